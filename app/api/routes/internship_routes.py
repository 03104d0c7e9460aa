"""
Internship Routes

GET  /internships                         - List internships with filters and pagination
POST /internships                         - Post an internship
GET  /internships/recommend               - Rank all internships by skill overlap
POST /internships/sync                    - Pull listings from external aggregators
GET  /internships/{internship_id}         - Get internship details
POST /internships/{internship_id}/applications - Apply to an internship
GET  /internships/{internship_id}/applications - List applications
"""

from fastapi import APIRouter, Query
from typing import List, Optional

from app.models.opportunity import OpportunityFilter, OpportunityKind, parse_skill_list
from app.services.opportunity_service import get_opportunity_service
from app.services.sync_service import fetch_external_internships, sync_batch
from app.schemas.schemas import (
    ERROR_RESPONSES, InternshipCreate, InternshipResponse, ApplicationCreate, ApplicationResponse,
    SyncRequest, SyncResponse
)

router = APIRouter(prefix="/internships", tags=["Internships"], responses=ERROR_RESPONSES)

KIND = OpportunityKind.internship


@router.get("", response_model=List[InternshipResponse])
def list_internships(
    skills: Optional[List[str]] = Query(None, description="Comma-separated or repeated"),
    remote: Optional[str] = Query(None, description="true / false"),
    location: Optional[str] = Query(None, description="Case-insensitive pattern"),
    q: Optional[str] = Query(None, description="Search title, company and description"),
    status: Optional[str] = Query(None),
    page: int = Query(1),
    limit: Optional[int] = Query(None)
):
    """
    List internships, newest first.

    Filters combine with AND; pagination is applied after filtering.
    """
    spec = OpportunityFilter.from_params(skills, remote, location, q, status)
    return get_opportunity_service().list_opportunities(KIND, spec, page=page, limit=limit)


@router.post("", response_model=InternshipResponse, status_code=201)
def create_internship(internship: InternshipCreate):
    """Post an internship. title, company_name and description are required."""
    service = get_opportunity_service()
    return service.create_opportunity(KIND, internship.model_dump(mode="json"))


@router.get("/recommend", response_model=List[InternshipResponse])
def recommend_internships(
    skills: Optional[List[str]] = Query(None, description="Comma-separated or repeated")
):
    """All internships ranked by skill overlap (stable on ties)."""
    return get_opportunity_service().recommend(KIND, parse_skill_list(skills))


@router.post("/sync", response_model=SyncResponse)
def sync_internships(request: Optional[SyncRequest] = None):
    """
    Merge external listings into the store.

    Uses the request's items when given, otherwise the configured
    external sources. Invalid items are skipped, not rejected.
    """
    items = request.items if request is not None else None
    if items is None:
        items = fetch_external_internships()
    return SyncResponse(upserted=sync_batch(items, KIND))


@router.get("/{internship_id}", response_model=InternshipResponse)
def get_internship(internship_id: str):
    """Get details of a specific internship."""
    return get_opportunity_service().get_opportunity(KIND, internship_id)


@router.post("/{internship_id}/applications", response_model=ApplicationResponse, status_code=201)
def apply_to_internship(internship_id: str, application: ApplicationCreate):
    """Apply to an internship. message is required."""
    service = get_opportunity_service()
    return service.create_application(
        KIND, internship_id,
        message=application.message,
        applicant_name=application.applicant_name,
        applicant_email=application.applicant_email
    )


@router.get("/{internship_id}/applications", response_model=List[ApplicationResponse])
def list_internship_applications(internship_id: str):
    """Applications for an internship, newest first."""
    return get_opportunity_service().list_applications(KIND, internship_id)
