"""
Opportunity Service

PURPOSE:
The operations behind the project / internship / profile routes:
- list_opportunities: filter -> sort (newest first) -> paginate
- recommend:          full collection ranked by skill overlap
- create_opportunity: validate required fields, then insert
- create_application: check the target exists, then insert
- upsert_profile / get_profile

All store access goes through StoreProvider.run(), so a call lands on
MongoDB or the in-memory store without the caller knowing which.
"""

import logging
from typing import Iterable, List, Optional

from app.core.errors import NotFoundError, ValidationError
from app.models.opportunity import (
    APPLICATION_PENDING,
    DEFAULT_APPLICANT_NAME,
    DEFAULT_STATUS,
    OpportunityFilter,
    OpportunityKind,
)
from app.services.matching_service import rank_by_skill_overlap
from app.services.store import StoreProvider, get_store_provider

logger = logging.getLogger("internhub.opportunities")


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


def _required_fields_message(kind: OpportunityKind) -> str:
    fields = list(kind.required_fields)
    if len(fields) == 2:
        return f"{fields[0]} and {fields[1]} are required"
    return f"{', '.join(fields[:-1])} and {fields[-1]} are required"


class OpportunityService:
    """Stateless facade over the active store."""

    def __init__(self, provider: StoreProvider):
        self.provider = provider

    # ------------------------------------------------------------
    # Listing & recommendations
    # ------------------------------------------------------------

    def list_opportunities(
        self,
        kind: OpportunityKind,
        spec: Optional[OpportunityFilter] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = None
    ) -> List[dict]:
        """One page of filtered records, newest first."""
        return self.provider.run(
            lambda store: store.list_opportunities(kind, spec, page=page, limit=limit)
        )

    def recommend(self, kind: OpportunityKind, skills: Iterable[str]) -> List[dict]:
        """
        Every record of this kind ranked by skill overlap.

        Not paginated: callers that want pages should slice the ranked
        output, never rank a single page.
        """
        records = self.provider.run(lambda store: store.list_opportunities(kind))
        return rank_by_skill_overlap(records, skills)

    def get_opportunity(self, kind: OpportunityKind, record_id: str) -> dict:
        record = self.provider.run(lambda store: store.get_opportunity(kind, record_id))
        if record is None:
            raise NotFoundError(f"{kind.value} not found")
        return record

    # ------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------

    def create_opportunity(self, kind: OpportunityKind, fields: dict) -> dict:
        """
        Validate and insert a user-submitted record.

        Raises ValidationError (store untouched) when a required field
        is missing or blank.
        """
        if any(_is_blank(fields.get(name)) for name in kind.required_fields):
            raise ValidationError(_required_fields_message(kind))

        record = {k: v for k, v in fields.items() if k not in ("id", "created_at")}
        for name in kind.required_fields:
            record[name] = str(record[name]).strip()
        record["status"] = record.get("status") or DEFAULT_STATUS
        record["skills"] = list(record.get("skills") or [])
        if kind is OpportunityKind.project:
            record["owner_name"] = record.get("owner_name") or DEFAULT_APPLICANT_NAME
        if kind is OpportunityKind.internship:
            record["remote"] = bool(record.get("remote"))

        created = self.provider.run(lambda store: store.insert_opportunity(kind, record))
        logger.info("Created %s %s", kind.value, created["id"])
        return created

    def create_application(
        self,
        kind: OpportunityKind,
        target_id: str,
        message: Optional[str],
        applicant_name: Optional[str] = None,
        applicant_email: Optional[str] = None
    ) -> dict:
        """
        Record a collaboration request / internship application.

        Raises ValidationError for a blank message and NotFoundError when
        the target does not exist; nothing is stored in either case.
        """
        if _is_blank(message):
            raise ValidationError("message is required")

        def apply(store):
            if store.get_opportunity(kind, target_id) is None:
                raise NotFoundError(f"{kind.value} not found")
            return store.insert_application({
                "target_kind": kind.value,
                "target_id": str(target_id),
                "message": message.strip(),
                "applicant_name": (applicant_name or "").strip() or DEFAULT_APPLICANT_NAME,
                "applicant_email": applicant_email or None,
                "status": APPLICATION_PENDING,
            })

        return self.provider.run(apply)

    def list_applications(self, kind: OpportunityKind, target_id: str) -> List[dict]:
        def collect(store):
            if store.get_opportunity(kind, target_id) is None:
                raise NotFoundError(f"{kind.value} not found")
            return store.list_applications(kind, str(target_id))

        return self.provider.run(collect)

    # ------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------

    def upsert_profile(self, profile_id: Optional[str], fields: dict) -> dict:
        if _is_blank(profile_id):
            raise ValidationError("id is required")
        updates = {k: v for k, v in fields.items() if k != "id" and v is not None}
        return self.provider.run(lambda store: store.upsert_profile(profile_id, updates))

    def get_profile(self, profile_id: str) -> dict:
        profile = self.provider.run(lambda store: store.get_profile(profile_id))
        if profile is None:
            raise NotFoundError("not found")
        return profile

    def health(self) -> dict:
        store = self.provider.active
        connected = store.durable and store.ping()
        return {
            "status": "ok",
            "db": "connected" if connected else "not_connected",
            "backend": store.name,
        }


def get_opportunity_service() -> OpportunityService:
    """Get a service bound to the active store."""
    return OpportunityService(get_store_provider())
