"""
Internship Sync Service

PURPOSE:
Merge listings from external aggregators into the store without
creating duplicates on repeated syncs.

DEDUP RULES (they differ by backend):
- MongoDB: upsert on (source, source_id). A second sync of the same
  listing overwrites its fields; id and created_at are kept.
- Memory:  match on apply_url, or on title + company/owner name.
  A match is skipped (NOT overwritten); otherwise insert with a new id.

Each candidate is validated on its own. A bad candidate is logged and
skipped; the rest of the batch still goes through.
"""

import logging
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.models.opportunity import OpportunityKind
from app.schemas.schemas import SyncCandidate
from app.services.store import OpportunityStore, StoreProvider, get_store_provider

logger = logging.getLogger("internhub.sync")


# ============================================================
# EXTERNAL SOURCES
# ============================================================

def fetch_external_internships() -> List[Dict[str, Any]]:
    """
    Listings from the external aggregators.

    Static stand-ins for the AICTE and Internshala feeds until real
    connectors exist.
    """
    return [
        {
            "title": "AICTE Software Intern",
            "company_name": "AICTE Partner Org",
            "description": "Work on educational software projects. Basic JS required.",
            "status": "active",
            "location": "Bengaluru",
            "remote": False,
            "duration": "6 months",
            "stipend": "₹12,000/month",
            "skills": ["JavaScript", "Node.js"],
            "apply_url": "https://aicte.example/apply/soft-intern",
            "source": "aicte",
            "source_id": "aicte-001",
        },
        {
            "title": "Internshala React Intern",
            "company_name": "Startup Labs",
            "description": "Build UI components and polish UX.",
            "status": "active",
            "location": "Remote",
            "remote": True,
            "duration": "3 months",
            "stipend": "₹8,000/month",
            "skills": ["React", "CSS"],
            "apply_url": "https://internshala.example/apply/react-intern",
            "source": "internshala",
            "source_id": "internshala-123",
        },
    ]


# ============================================================
# SYNC
# ============================================================

def validate_candidate(raw: Dict[str, Any], durable: bool) -> Dict[str, Any]:
    """
    Validate one raw candidate and return the fields to store.

    The durable path needs the natural key to upsert on, so a candidate
    without both source and source_id is rejected there.
    """
    try:
        candidate = SyncCandidate.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid candidate: {e.errors()[0]['msg']}") from e

    if durable and not candidate.has_natural_key:
        raise ValidationError("source and source_id are required to sync into MongoDB")

    return candidate.model_dump(mode="json")


def sync_into_store(
    store: OpportunityStore,
    kind: OpportunityKind,
    candidates: Iterable[Dict[str, Any]]
) -> int:
    """Merge candidates into one backend; returns how many were written."""
    written = 0
    for index, raw in enumerate(candidates):
        try:
            fields = validate_candidate(raw, store.durable)
        except ValidationError as e:
            logger.warning("Skipping sync item %d: %s", index, e.message)
            continue
        if store.sync_candidate(kind, fields):
            written += 1
    return written


def sync_batch(
    candidates: Iterable[Dict[str, Any]],
    kind: OpportunityKind = OpportunityKind.internship,
    provider: StoreProvider = None
) -> int:
    """
    Sync a batch into the active store.

    Returns the count of inserted (memory) or upserted (MongoDB) records.
    """
    provider = provider or get_store_provider()
    candidates = list(candidates)
    upserted = provider.run(lambda store: sync_into_store(store, kind, candidates))
    logger.info(
        "Synced %d/%d %s candidates into %s",
        upserted, len(candidates), kind.value, provider.active.name
    )
    return upserted
