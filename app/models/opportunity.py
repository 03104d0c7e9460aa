"""
Opportunity domain types shared by the store, filter and sync layers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class OpportunityKind(str, Enum):
    project = "project"
    internship = "internship"

    @property
    def collection(self) -> str:
        """Mongo collection / memory list name for this kind."""
        return f"{self.value}s"

    @property
    def name_field(self) -> str:
        """Secondary name field searched by the free-text query."""
        return SECONDARY_NAME_FIELD[self]

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return REQUIRED_FIELDS[self]


SECONDARY_NAME_FIELD = {
    OpportunityKind.project: "owner_name",
    OpportunityKind.internship: "company_name",
}

REQUIRED_FIELDS = {
    OpportunityKind.project: ("title", "description"),
    OpportunityKind.internship: ("title", "company_name", "description"),
}

DEFAULT_STATUS = "active"
DEFAULT_APPLICANT_NAME = "Anonymous"
APPLICATION_PENDING = "pending"


@dataclass(frozen=True)
class OpportunityFilter:
    """
    Listing predicates. Every supplied field must match (logical AND);
    fields left as None (or an empty skill set) impose no constraint.
    """
    skills: FrozenSet[str] = field(default_factory=frozenset)
    remote: Optional[bool] = None
    location: Optional[str] = None
    query: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        skills=None,
        remote: Optional[str] = None,
        location: Optional[str] = None,
        query: Optional[str] = None,
        status: Optional[str] = None
    ) -> "OpportunityFilter":
        """Build a filter from raw query-string values."""
        return cls(
            skills=frozenset(parse_skill_list(skills)),
            remote=parse_remote_flag(remote),
            location=location or None,
            query=query or None,
            status=status or None,
        )

    def is_empty(self) -> bool:
        return (
            not self.skills
            and self.remote is None
            and not self.location
            and not self.query
            and not self.status
        )


def parse_skill_list(values) -> list:
    """
    Normalize skills given as a list and/or comma-separated strings.

    "React, CSS" and ["React", "CSS"] both become ["React", "CSS"].
    Order is kept and blanks dropped; case is untouched.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    skills = []
    for value in values:
        for part in str(value).split(","):
            part = part.strip()
            if part:
                skills.append(part)
    return skills


def parse_remote_flag(value: Optional[str]) -> Optional[bool]:
    """'true' -> True, 'false' -> False, anything else -> no constraint."""
    if value is None:
        return None
    lowered = str(value).strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None
