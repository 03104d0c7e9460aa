"""
Models module - internal domain types.

Difference from schemas:
- Models: internal data structures (kinds, filters, field rules)
- Schemas: API contract (what client sends/receives)
"""

from app.models.opportunity import (
    OpportunityKind,
    OpportunityFilter,
    parse_skill_list,
    parse_remote_flag,
)

__all__ = [
    "OpportunityKind",
    "OpportunityFilter",
    "parse_skill_list",
    "parse_remote_flag",
]
