"""
Filter & Pagination Service

PURPOSE:
Pure list processing over opportunity records (plain dicts, as
returned by serialize_doc). Both stores produce the same results:
- The memory store calls these functions directly
- The Mongo store pushes the same predicates down via build_mongo_query

PREDICATES (all supplied ones must match):
- skills:   ANY overlap with the record's skills
- remote:   exact boolean, missing counts as False
- location: case-insensitive regex search (literal if the pattern is invalid)
- query:    case-insensitive substring of title / name field / description
- status:   exact match, missing counts as "active"
"""

import re
from typing import Iterable, List, Optional, Pattern

from app.core.config import get_settings
from app.models.opportunity import DEFAULT_STATUS, OpportunityFilter, OpportunityKind


# ============================================================
# PATTERN HELPERS
# ============================================================

def compile_location_pattern(location: str) -> Pattern:
    """
    Compile the location filter, falling back to a literal match.

    Patterns are checked with Python re but run on MongoDB as PCRE. The
    two mostly agree; a pattern the server rejects is retried there as a
    literal (see MongoOpportunityStore.list_opportunities).
    """
    try:
        return re.compile(location, re.IGNORECASE)
    except re.error:
        return re.compile(re.escape(location), re.IGNORECASE)


def location_regex_source(location: str, literal: bool = False) -> str:
    """Regex text for the Mongo $regex operator (same rules as above)."""
    if literal:
        return re.escape(location)
    return compile_location_pattern(location).pattern


# ============================================================
# PREDICATES
# ============================================================

def _matches_skills(record: dict, skills) -> bool:
    return any(s in skills for s in (record.get("skills") or []))


def _matches_query(record: dict, query_lower: str, name_field: str) -> bool:
    for field in ("title", name_field, "description"):
        if query_lower in (record.get(field) or "").lower():
            return True
    return False


def matches_filter(
    record: dict,
    spec: OpportunityFilter,
    kind: OpportunityKind,
    location_pattern: Optional[Pattern] = None
) -> bool:
    """True if the record satisfies every predicate in spec."""
    if spec.skills and not _matches_skills(record, spec.skills):
        return False

    if spec.remote is not None and bool(record.get("remote")) != spec.remote:
        return False

    if spec.location:
        pattern = location_pattern or compile_location_pattern(spec.location)
        if not pattern.search(str(record.get("location") or "")):
            return False

    if spec.query and not _matches_query(record, spec.query.lower(), kind.name_field):
        return False

    if spec.status and (record.get("status") or DEFAULT_STATUS) != spec.status:
        return False

    return True


def filter_records(
    records: Iterable[dict],
    spec: Optional[OpportunityFilter],
    kind: OpportunityKind
) -> List[dict]:
    """
    Order-preserving subset of records matching spec.

    An empty (or missing) filter returns the input unchanged.
    """
    records = list(records)
    if spec is None or spec.is_empty():
        return records

    location_pattern = compile_location_pattern(spec.location) if spec.location else None
    return [r for r in records if matches_filter(r, spec, kind, location_pattern)]


def build_mongo_query(
    spec: Optional[OpportunityFilter],
    kind: OpportunityKind,
    literal_location: bool = False
) -> dict:
    """Translate a filter into an equivalent MongoDB query document."""
    query = {}
    if spec is None or spec.is_empty():
        return query

    if spec.skills:
        query["skills"] = {"$in": sorted(spec.skills)}

    if spec.remote is True:
        query["remote"] = True
    elif spec.remote is False:
        # Records without the field count as on-site
        query["remote"] = {"$ne": True}

    if spec.location:
        query["location"] = {
            "$regex": location_regex_source(spec.location, literal_location),
            "$options": "i"
        }

    if spec.query:
        escaped = re.escape(spec.query)
        query["$or"] = [
            {field: {"$regex": escaped, "$options": "i"}}
            for field in ("title", kind.name_field, "description")
        ]

    if spec.status:
        if spec.status == DEFAULT_STATUS:
            query["status"] = {"$in": [DEFAULT_STATUS, None]}
        else:
            query["status"] = spec.status

    return query


# ============================================================
# PAGINATION
# ============================================================

# Largest skip() value BSON can encode (signed 64-bit)
MAX_MONGO_OFFSET = 2 ** 63 - 1


def clamp_page(page: Optional[int]) -> int:
    if not page or page < 1:
        return 1
    return page


def clamp_limit(limit: Optional[int]) -> int:
    settings = get_settings()
    if not limit:
        limit = settings.default_page_limit
    return max(1, min(settings.max_page_limit, limit))


def page_bounds(page: Optional[int], limit: Optional[int]) -> tuple:
    """(offset, limit) for a 1-based page after clamping."""
    page = clamp_page(page)
    limit = clamp_limit(limit)
    return (page - 1) * limit, limit


def paginate(records: List[dict], page: Optional[int], limit: Optional[int]) -> List[dict]:
    """
    Slice records[(page-1)*limit : page*limit].

    page is clamped to >= 1 and limit to [1, max_page_limit]; a page past
    the end is simply empty.
    """
    offset, limit = page_bounds(page, limit)
    return list(records[offset:offset + limit])
