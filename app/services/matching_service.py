"""
Skill Matching Service

PURPOSE:
Rank opportunities for a student by how many of their skills each
listing asks for.

HOW IT WORKS:
1. score = number of entries in record["skills"] found in the caller's set
   (a listing that repeats a skill counts it each time)
2. Sort by score, highest first
3. Ties keep their incoming order (recency order from the store)

Skills are compared exactly as stored: "React" and "react" differ.

COMPOSING WITH PAGINATION:
Rank the full collection first, then paginate the ranked output.
Paginating first would only rank within one page.
"""

from typing import Iterable, List


def score_skill_overlap(record: dict, skills: Iterable[str]) -> int:
    """Count record skills that appear in the caller's skill set."""
    wanted = set(skills)
    return sum(1 for s in (record.get("skills") or []) if s in wanted)


def rank_by_skill_overlap(records: List[dict], skills: Iterable[str]) -> List[dict]:
    """
    Sort records by skill overlap, descending.

    Python's sort is stable, so equal scores keep their input order.
    An empty skill set returns the records untouched.
    """
    wanted = set(skills)
    if not wanted:
        return list(records)

    scored = [(score_skill_overlap(r, wanted), r) for r in records]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [r for _, r in scored]
