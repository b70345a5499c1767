"""
Scorecard models - Intermediate artifacts of the UDisc import pipeline.

These are plain dataclasses: they live for one import request, flowing
from the tokenizer through the header resolver and reconciler into the
materializer, and are never persisted directly.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Any


@dataclass
class RawCsvTable:
    """
    Directly parsed CSV content.

    Attributes:
        headers: Header strings in column order (not deduplicated)
        rows: One mapping per data line, header -> trimmed value
    """

    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class ColumnMap:
    """
    Resolved association between logical fields and actual CSV headers.

    Every logical field maps to some header string. When nothing in the
    file matched, the header is a literal fallback (e.g. "Total") that may
    not exist in the file; value() then yields an empty string.

    Attributes:
        player: Player name column
        course: Course name column
        layout: Layout name column
        start_time: Round start timestamp column
        end_time: Round end timestamp column
        total_strokes: Total strokes column
        score_vs_par: Score relative to par column
        round_rating: Round rating column
        hole_columns: Per-hole score columns, in column order
    """

    player: str
    course: str
    layout: str
    start_time: str
    end_time: str
    total_strokes: str
    score_vs_par: str
    round_rating: str
    hole_columns: Tuple[str, ...] = ()

    def value(self, row: Dict[str, str], field_name: str) -> str:
        """
        Look up a logical field in a row.

        Args:
            row: Row mapping from RawCsvTable
            field_name: Logical field name (e.g. "total_strokes")

        Returns:
            The row's value for the resolved header, or "" if absent
        """
        return row.get(getattr(self, field_name), '') or ''

    def to_dict(self) -> Dict[str, Any]:
        """Diagnostic header map, as surfaced in the import response."""
        return {
            'playerHeader': self.player,
            'courseHeader': self.course,
            'layoutHeader': self.layout,
            'startHeader': self.start_time,
            'endHeader': self.end_time,
            'totalHeader': self.total_strokes,
            'scoreHeader': self.score_vs_par,
            'ratingHeader': self.round_rating,
            'holeHeaders': list(self.hole_columns),
        }


@dataclass
class ReconciledHole:
    """
    One hole's par/strokes pair, ready to persist.

    Attributes:
        play_order: 1-based index of the hole column. Holes dropped for
            missing strokes leave gaps; the order is never renumbered.
        hole_label: Header text after the leading "hole" token, or the
            play order when that leaves nothing
        par: Par from the par row, if present and numeric
        strokes: Strokes taken
    """

    play_order: int
    hole_label: str
    par: Optional[int]
    strokes: int


@dataclass
class ReconciledRound:
    """
    Semantic result of applying a ColumnMap to a RawCsvTable.

    Attributes:
        player_name: Player whose row was selected
        course_name: Course name (placeholder if blank)
        layout_name: Layout name, None if blank
        start_time: Parsed start timestamp, None if unparsable
        end_time: Parsed end timestamp, None if unparsable
        total_strokes: Total strokes, None if not numeric
        score_vs_par: Score relative to par, None if not numeric
        round_rating: Round rating, None if not numeric
        holes_count: Number of hole columns detected (retained or not)
        holes: Retained holes, in column order
    """

    player_name: str
    course_name: str
    layout_name: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_strokes: Optional[int] = None
    score_vs_par: Optional[int] = None
    round_rating: Optional[Decimal] = None
    holes_count: int = 0
    holes: List[ReconciledHole] = field(default_factory=list)
