"""
Header resolver for UDisc scorecard exports.

Maps logical round fields to the actual header strings of a CSV using the
declarative rules in COLUMN_RULES. Resolution never fails: a field with no
matching header resolves to its literal fallback name.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from disc_tracker.models.scorecard import ColumnMap
from disc_tracker.utils.constants import (
    COLUMN_RULES,
    HOLE_COLUMN_PREFIX,
    MATCH_CONTAINS,
    MATCH_EXACT,
    MATCH_PREFIX,
)


_WHITESPACE = re.compile(r'\s+')

_MATCHERS: Dict[str, Callable[[str, str], bool]] = {
    MATCH_EXACT: lambda header, token: header == token,
    MATCH_PREFIX: lambda header, token: header.startswith(token),
    MATCH_CONTAINS: lambda header, token: token in header,
}


def normalize_header(header: str) -> str:
    """
    Normalize a header for matching.

    Examples:
        >>> normalize_header("Player Name")
        'playername'
    """
    return _WHITESPACE.sub('', header.lower())


def find_header(
    headers: Sequence[str],
    candidates: List[Tuple[str, str]],
) -> Optional[str]:
    """
    Find the first header satisfying the highest-priority candidate.

    Args:
        headers: Headers in column order
        candidates: (match_kind, token) pairs in priority order

    Returns:
        The matching header, or None if no candidate matches
    """
    normalized = [(h, normalize_header(h)) for h in headers]
    for kind, token in candidates:
        matches = _MATCHERS[kind]
        for header, norm in normalized:
            if matches(norm, token):
                return header
    return None


def find_hole_columns(headers: Sequence[str]) -> Tuple[str, ...]:
    """Every header whose normalized form starts with "hole", in order."""
    return tuple(
        h for h in headers if normalize_header(h).startswith(HOLE_COLUMN_PREFIX)
    )


def resolve_columns(headers: Sequence[str]) -> ColumnMap:
    """
    Resolve every logical field to a header.

    Args:
        headers: Header strings from the tokenized CSV

    Returns:
        ColumnMap; hole_columns may be empty (the caller decides whether
        that is fatal)

    Examples:
        >>> cols = resolve_columns(["PlayerName", "CourseName", "Hole1"])
        >>> cols.player, cols.total_strokes, cols.hole_columns
        ('PlayerName', 'Total', ('Hole1',))
    """
    resolved = {}
    for field_name, (candidates, fallback) in COLUMN_RULES.items():
        resolved[field_name] = find_header(headers, candidates) or fallback

    return ColumnMap(hole_columns=find_hole_columns(headers), **resolved)
