"""
Project Routes

GET  /projects                      - List projects with filters and pagination
POST /projects                      - Create project
GET  /projects/recommend            - Rank all projects by skill overlap
GET  /projects/{project_id}         - Get project details
POST /projects/{project_id}/applications - Request to join a project
GET  /projects/{project_id}/applications - List join requests
"""

from fastapi import APIRouter, Query
from typing import List, Optional

from app.models.opportunity import OpportunityFilter, OpportunityKind, parse_skill_list
from app.services.opportunity_service import get_opportunity_service
from app.schemas.schemas import (
    ERROR_RESPONSES, ProjectCreate, ProjectResponse, ApplicationCreate, ApplicationResponse
)

router = APIRouter(prefix="/projects", tags=["Projects"], responses=ERROR_RESPONSES)

KIND = OpportunityKind.project


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    skills: Optional[List[str]] = Query(None, description="Comma-separated or repeated"),
    remote: Optional[str] = Query(None, description="true / false"),
    location: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Search title, owner and description"),
    status: Optional[str] = Query(None),
    page: int = Query(1),
    limit: Optional[int] = Query(None)
):
    """List projects, newest first. page >= 1, limit clamped to [1, 100]."""
    spec = OpportunityFilter.from_params(skills, remote, location, q, status)
    return get_opportunity_service().list_opportunities(KIND, spec, page=page, limit=limit)


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(project: ProjectCreate):
    """Create a project. title and description are required."""
    service = get_opportunity_service()
    return service.create_opportunity(KIND, project.model_dump(mode="json"))


@router.get("/recommend", response_model=List[ProjectResponse])
def recommend_projects(
    skills: Optional[List[str]] = Query(None, description="Comma-separated or repeated")
):
    """
    All projects ranked by how many of the given skills they list.

    Equal scores keep recency order. Without skills the plain listing
    order is returned.
    """
    return get_opportunity_service().recommend(KIND, parse_skill_list(skills))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str):
    """Get details of a specific project."""
    return get_opportunity_service().get_opportunity(KIND, project_id)


@router.post("/{project_id}/applications", response_model=ApplicationResponse, status_code=201)
def apply_to_project(project_id: str, application: ApplicationCreate):
    """Send a collaboration request. message is required."""
    service = get_opportunity_service()
    return service.create_application(
        KIND, project_id,
        message=application.message,
        applicant_name=application.applicant_name,
        applicant_email=application.applicant_email
    )


@router.get("/{project_id}/applications", response_model=List[ApplicationResponse])
def list_project_applications(project_id: str):
    """Collaboration requests for a project, newest first."""
    return get_opportunity_service().list_applications(KIND, project_id)
