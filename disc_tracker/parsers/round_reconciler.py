"""
Row selector and reconciler for UDisc scorecard exports.

Locates the par row and the target player's row, then turns the player's
row into a ReconciledRound with one ReconciledHole per scored hole column.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

import pandas as pd

from disc_tracker.errors import RowNotFound
from disc_tracker.models.scorecard import (
    ColumnMap,
    RawCsvTable,
    ReconciledHole,
    ReconciledRound,
)
from disc_tracker.utils.constants import (
    DEFAULT_COURSE_NAME,
    DEFAULT_PLAYER_NAME,
    HOLE_COLUMN_PREFIX,
    PAR_ROW_NAME,
)
from disc_tracker.utils.date_parser import parse_date_safe


logger = logging.getLogger(__name__)

Row = Dict[str, str]

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')
_HOLE_TOKEN = re.compile(HOLE_COLUMN_PREFIX, re.IGNORECASE)
_ASCII_LOWERCASE = str.maketrans(
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz'
)


class RoundReconciler:
    """
    Reconciles a tokenized scorecard against its resolved column map.

    Player names are compared ASCII case-insensitively; other characters
    must match exactly.

    Example usage:
        reconciler = RoundReconciler(table, columns)
        reconciled = reconciler.reconcile(target_player_name="Alice")
    """

    def __init__(self, table: RawCsvTable, columns: ColumnMap) -> None:
        self.table = table
        self.columns = columns

    def reconcile(self, target_player_name: Optional[str] = None) -> ReconciledRound:
        """
        Build the reconciled round for the target player.

        Args:
            target_player_name: Exact player name to import. When omitted,
                the first named non-par row is used.

        Returns:
            ReconciledRound with retained holes in column order

        Raises:
            RowNotFound: If the named player, or any default player row,
                is absent
        """
        par_row = self.find_par_row()
        player_row = self.select_player_row(target_player_name)
        cols = self.columns

        return ReconciledRound(
            player_name=cols.value(player_row, 'player') or DEFAULT_PLAYER_NAME,
            course_name=cols.value(player_row, 'course') or DEFAULT_COURSE_NAME,
            layout_name=cols.value(player_row, 'layout') or None,
            start_time=parse_date_safe(cols.value(player_row, 'start_time')),
            end_time=parse_date_safe(cols.value(player_row, 'end_time')),
            total_strokes=self._parse_int(cols.value(player_row, 'total_strokes')),
            score_vs_par=self._parse_int(cols.value(player_row, 'score_vs_par')),
            round_rating=self._parse_decimal(cols.value(player_row, 'round_rating')),
            holes_count=len(cols.hole_columns),
            holes=self.build_holes(player_row, par_row),
        )

    def find_par_row(self) -> Optional[Row]:
        """First row whose player value is "par", or None."""
        for row in self.table.rows:
            if self._player_key(row) == PAR_ROW_NAME:
                return row
        return None

    def select_player_row(self, target_player_name: Optional[str] = None) -> Row:
        """
        Select the row to import.

        A supplied name never falls back to the default row.
        """
        if target_player_name:
            wanted = _ascii_lower(target_player_name)
            for row in self.table.rows:
                if self._player_key(row) == wanted:
                    return row
            raise RowNotFound(
                f'No row found for player "{target_player_name}"',
                details={
                    'playerHeader': self.columns.player,
                    'headers': list(self.table.headers),
                },
            )

        for row in self.table.rows:
            key = self._player_key(row)
            if key and key != PAR_ROW_NAME:
                return row
        raise RowNotFound(
            "No player row found in CSV",
            details={
                'playerHeader': self.columns.player,
                'headers': list(self.table.headers),
            },
        )

    def build_holes(self, player_row: Row, par_row: Optional[Row]) -> List[ReconciledHole]:
        """
        Pair par and strokes for every hole column.

        Holes without a numeric stroke count are dropped; play order stays
        the 1-based column index, so dropped holes leave gaps.
        """
        holes = []
        for idx, header in enumerate(self.columns.hole_columns):
            play_order = idx + 1
            strokes = self._parse_int(player_row.get(header, ''))
            if strokes is None:
                logger.debug("Skipping %s: no strokes recorded", header)
                continue

            par = self._parse_int(par_row.get(header, '')) if par_row else None
            holes.append(ReconciledHole(
                play_order=play_order,
                hole_label=self.hole_label(header, play_order),
                par=par,
                strokes=strokes,
            ))
        return holes

    @staticmethod
    def hole_label(header: str, play_order: int) -> str:
        """
        Derive the hole label from its column header.

        Examples:
            >>> RoundReconciler.hole_label("Hole 7A", 7)
            '7A'
            >>> RoundReconciler.hole_label("Hole", 3)
            '3'
        """
        return _HOLE_TOKEN.sub('', header, count=1).strip() or str(play_order)

    def _player_key(self, row: Row) -> str:
        return _ascii_lower(self.columns.value(row, 'player'))

    @staticmethod
    def _parse_int(value: str) -> Optional[int]:
        """
        Parse the leading signed integer of a value.

        Handles formats like:
        - "4"
        - "+3"
        - "-2"
        - "5*" (trailing annotation ignored)

        Returns:
            Parsed int, or None when there are no leading digits
        """
        if not value:
            return None
        match = _LEADING_INT.match(value)
        if not match:
            return None
        return int(match.group(1))

    @staticmethod
    def _parse_decimal(value: str) -> Optional[Decimal]:
        """
        Parse a decimal number, None if empty or not numeric.
        """
        if not value:
            return None
        number = pd.to_numeric(value.strip(), errors='coerce')
        if pd.isna(number):
            return None
        try:
            result = Decimal(str(number))
        except InvalidOperation:
            return None
        return result if result.is_finite() else None


def _ascii_lower(value: str) -> str:
    return value.translate(_ASCII_LOWERCASE)


def reconcile(
    table: RawCsvTable,
    columns: ColumnMap,
    target_player_name: Optional[str] = None,
) -> ReconciledRound:
    """Convenience wrapper around RoundReconciler.reconcile()."""
    return RoundReconciler(table, columns).reconcile(target_player_name)
