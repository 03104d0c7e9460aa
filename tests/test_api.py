from __future__ import annotations

import inspect
from datetime import datetime

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from app.main import app
from app.models.opportunity import OpportunityKind
from app.services.store import MemoryOpportunityStore, MongoOpportunityStore

pytestmark = pytest.mark.integration


def post_internship(client: TestClient, **overrides) -> dict:
    payload = {
        "title": "Backend Intern",
        "company_name": "Startup Labs",
        "description": "Build Python APIs",
        "location": "Bengaluru",
        "remote": False,
        "skills": ["Python", "FastAPI"],
    }
    payload.update(overrides)
    response = client.post("/internships", json=payload)
    assert response.status_code == 201
    return response.json()


def post_project(client: TestClient, **overrides) -> dict:
    payload = {
        "title": "Campus Marketplace",
        "description": "Buy and sell used textbooks",
        "skills": "React, TypeScript",
    }
    payload.update(overrides)
    response = client.post("/projects", json=payload)
    assert response.status_code == 201
    return response.json()


# ------------------------------------------------------------
# Root & health
# ------------------------------------------------------------

def test_root_and_health_report_memory_backend(client: TestClient) -> None:
    assert client.get("/").json() == {"message": "Welcome to InternHub API", "version": "1.0.0"}
    assert client.get("/health").json() == {"status": "ok", "db": "not_connected", "backend": "memory"}


# ------------------------------------------------------------
# Creation
# ------------------------------------------------------------

def test_create_project_assigns_id_defaults_and_timestamp(client: TestClient) -> None:
    project = post_project(client)

    assert project["id"]
    assert project["status"] == "active"
    assert project["owner_name"] == "Anonymous"
    assert project["skills"] == ["React", "TypeScript"]
    datetime.fromisoformat(project["created_at"].replace("Z", "+00:00"))


@pytest.mark.parametrize(
    "payload",
    [
        {"description": "No title"},
        {"title": "   ", "description": "Blank title"},
        {"title": "No description"},
        {"title": "T", "description": ""},
    ],
)
def test_create_project_without_title_or_description_is_rejected(
    client: TestClient, memory_store: MemoryOpportunityStore, payload: dict
) -> None:
    response = client.post("/projects", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "title and description are required"}
    assert memory_store.count(OpportunityKind.project) == 0


def test_create_internship_requires_company_name(client: TestClient, memory_store: MemoryOpportunityStore) -> None:
    response = client.post("/internships", json={"title": "Intern", "description": "Work"})

    assert response.status_code == 400
    assert "company_name" in response.json()["error"]
    assert memory_store.count(OpportunityKind.internship) == 0


def test_get_record_by_id(client: TestClient) -> None:
    created = post_internship(client)

    response = client.get(f"/internships/{created['id']}")
    assert response.status_code == 200
    assert response.json()["company_name"] == "Startup Labs"

    assert client.get("/internships/missing").status_code == 404


# ------------------------------------------------------------
# Listing
# ------------------------------------------------------------

def test_list_internships_newest_first_with_filters(client: TestClient) -> None:
    post_internship(client, title="Frontend Intern", company_name="Example Co", location="Remote",
                    remote=True, skills=["React", "CSS"])
    post_internship(client, title="Backend Intern")
    post_internship(client, title="Data Intern", company_name="AICTE Partner Org", location="Pune",
                    skills=["SQL"])

    titles = [r["title"] for r in client.get("/internships").json()]
    assert titles == ["Data Intern", "Backend Intern", "Frontend Intern"]

    def titles_for(params: dict) -> list[str]:
        response = client.get("/internships", params=params)
        assert response.status_code == 200
        return [r["title"] for r in response.json()]

    assert titles_for({"skills": "React,SQL"}) == ["Data Intern", "Frontend Intern"]
    assert titles_for({"skills": ["React", "SQL"]}) == ["Data Intern", "Frontend Intern"]
    assert titles_for({"remote": "true"}) == ["Frontend Intern"]
    assert titles_for({"remote": "false"}) == ["Data Intern", "Backend Intern"]
    assert titles_for({"remote": "maybe"}) == ["Data Intern", "Backend Intern", "Frontend Intern"]
    assert titles_for({"location": "bengaluru"}) == ["Backend Intern"]
    assert titles_for({"q": "aicte"}) == ["Data Intern"]
    assert titles_for({"q": "startup", "skills": "Python"}) == ["Backend Intern"]


def test_list_paginates_after_filtering(client: TestClient) -> None:
    for i in range(25):
        post_internship(client, title=f"Intern {i}")

    page_three = client.get("/internships", params={"page": 3, "limit": 10}).json()
    assert [r["title"] for r in page_three] == [f"Intern {i}" for i in range(4, -1, -1)]
    assert client.get("/internships", params={"page": 4, "limit": 10}).json() == []
    assert len(client.get("/internships").json()) == 20
    assert len(client.get("/internships", params={"page": 0, "limit": 1000}).json()) == 25


def test_list_projects_supports_status_filter(client: TestClient) -> None:
    post_project(client, title="Done", status="completed")
    post_project(client, title="Ongoing")

    response = client.get("/projects", params={"status": "completed"})
    assert [r["title"] for r in response.json()] == ["Done"]


# ------------------------------------------------------------
# Recommendations
# ------------------------------------------------------------

def test_recommend_ranks_by_overlap_and_keeps_recency_on_ties(client: TestClient) -> None:
    post_project(client, title="rec2", skills=["B", "C"])
    post_project(client, title="rec1", skills=["A"])
    post_project(client, title="rec0", skills=["A", "B"])

    ranked = client.get("/projects/recommend", params={"skills": "A,B"}).json()
    assert [r["title"] for r in ranked] == ["rec0", "rec1", "rec2"]

    unranked = client.get("/projects/recommend").json()
    assert [r["title"] for r in unranked] == ["rec0", "rec1", "rec2"]


def test_recommend_returns_full_collection(client: TestClient) -> None:
    for i in range(30):
        post_internship(client, title=f"Intern {i}", skills=["Go"] if i == 0 else ["Python"])

    ranked = client.get("/internships/recommend", params={"skills": "Go"}).json()
    assert len(ranked) == 30
    assert ranked[0]["title"] == "Intern 0"


# ------------------------------------------------------------
# Applications
# ------------------------------------------------------------

def test_apply_to_project(client: TestClient) -> None:
    project = post_project(client)

    response = client.post(
        f"/projects/{project['id']}/applications",
        json={"message": "I'd like to help with the frontend"},
    )
    assert response.status_code == 201
    application = response.json()
    assert application["target_id"] == project["id"]
    assert application["target_kind"] == "project"
    assert application["applicant_name"] == "Anonymous"
    assert application["applicant_email"] is None
    assert application["status"] == "pending"

    listed = client.get(f"/projects/{project['id']}/applications").json()
    assert [a["id"] for a in listed] == [application["id"]]


def test_apply_to_internship_keeps_applicant_details(client: TestClient) -> None:
    internship = post_internship(client)

    response = client.post(
        f"/internships/{internship['id']}/applications",
        json={"message": "Interested", "applicant_name": "Asha", "applicant_email": "asha@example.com"},
    )
    assert response.status_code == 201
    assert response.json()["applicant_name"] == "Asha"
    assert response.json()["applicant_email"] == "asha@example.com"


def test_apply_to_missing_project_creates_nothing(client: TestClient, memory_store: MemoryOpportunityStore) -> None:
    response = client.post("/projects/missing/applications", json={"message": "Hello"})

    assert response.status_code == 404
    assert response.json() == {"error": "project not found"}
    assert memory_store._applications == []


def test_apply_requires_message(client: TestClient) -> None:
    project = post_project(client)

    response = client.post(f"/projects/{project['id']}/applications", json={"message": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "message is required"}


def test_list_applications_for_missing_target_is_404(client: TestClient) -> None:
    assert client.get("/internships/missing/applications").status_code == 404


# ------------------------------------------------------------
# Sync
# ------------------------------------------------------------

def test_sync_without_body_uses_external_sources(client: TestClient) -> None:
    first = client.post("/internships/sync")
    second = client.post("/internships/sync")

    assert first.json() == {"status": "ok", "upserted": 2}
    assert second.json() == {"status": "ok", "upserted": 0}
    assert len(client.get("/internships").json()) == 2


def test_sync_with_items_skips_invalid_ones(client: TestClient) -> None:
    response = client.post(
        "/internships/sync",
        json={"items": [
            {"title": "Only a title"},
            {"title": "ML Intern", "company_name": "Lab", "description": "Models", "skills": ["Python"]},
        ]},
    )

    assert response.status_code == 200
    assert response.json()["upserted"] == 1


# ------------------------------------------------------------
# Profiles
# ------------------------------------------------------------

def test_profile_upsert_and_fetch(client: TestClient) -> None:
    assert client.post("/profiles", json={"email": "x@example.com"}).status_code == 400

    created = client.post("/profiles", json={"id": "auth-1", "email": "x@example.com",
                                             "metadata": {"college": "IIT"}})
    assert created.status_code == 200

    client.post("/profiles", json={"id": "auth-1", "full_name": "Asha"})
    profile = client.get("/profiles/auth-1").json()
    assert profile["email"] == "x@example.com"
    assert profile["full_name"] == "Asha"
    assert profile["metadata"] == {"college": "IIT"}

    assert client.get("/profiles/unknown").status_code == 404


# ------------------------------------------------------------
# MongoDB-backed API
# ------------------------------------------------------------

def test_mongo_backed_create_list_and_apply(mongo_client: TestClient, mongo_store: MongoOpportunityStore) -> None:
    created = post_internship(mongo_client, skills="Python, Docker")
    assert len(created["id"]) == 24

    listed = mongo_client.get("/internships", params={"skills": "Docker"}).json()
    assert [r["id"] for r in listed] == [created["id"]]

    response = mongo_client.post(f"/internships/{created['id']}/applications", json={"message": "Hi"})
    assert response.status_code == 201
    assert mongo_client.post("/internships/0123456789abcdef01234567/applications",
                             json={"message": "Hi"}).status_code == 404


def test_mongo_backed_sync_upserts_every_time(mongo_client: TestClient, mongo_store: MongoOpportunityStore) -> None:
    assert mongo_client.post("/internships/sync").json()["upserted"] == 2
    assert mongo_client.post("/internships/sync").json()["upserted"] == 2
    assert mongo_store.count(OpportunityKind.internship) == 2


def test_sync_with_non_object_items_still_syncs_the_rest(client: TestClient) -> None:
    response = client.post(
        "/internships/sync",
        json={"items": [
            "not-a-dict",
            42,
            None,
            {"title": "ML Intern", "company_name": "Lab", "description": "Models", "skills": ["Python"]},
        ]},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "upserted": 1}
    assert [r["title"] for r in client.get("/internships").json()] == ["ML Intern"]


@pytest.mark.parametrize("client_fixture", ["client", "mongo_client"])
def test_page_far_past_the_end_is_empty(client_fixture: str, request: pytest.FixtureRequest) -> None:
    test_client = request.getfixturevalue(client_fixture)
    post_internship(test_client)

    response = test_client.get("/internships", params={"page": 10 ** 18, "limit": 20})

    assert response.status_code == 200
    assert response.json() == []


# ------------------------------------------------------------
# Routing
# ------------------------------------------------------------

def test_store_backed_handlers_run_in_the_threadpool() -> None:
    endpoints = [route.endpoint for route in app.routes if isinstance(route, APIRoute)]

    assert endpoints
    assert not [e.__name__ for e in endpoints if inspect.iscoroutinefunction(e)]


def test_error_responses_are_documented(client: TestClient) -> None:
    paths = client.get("/openapi.json").json()["paths"]

    not_found = paths["/projects/{project_id}"]["get"]["responses"]["404"]
    bad_request = paths["/internships"]["post"]["responses"]["400"]
    for response in (not_found, bad_request):
        schema = response["content"]["application/json"]["schema"]
        assert schema["$ref"].endswith("/ErrorResponse")
