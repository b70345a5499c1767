"""
UDisc Importer - Unified pipeline for UDisc scorecard CSV exports.

Runs tokenize -> resolve columns -> reconcile -> materialize for one
uploaded file.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from disc_tracker.errors import MissingColumns
from disc_tracker.importers.round_materializer import MaterializeResult, RoundMaterializer
from disc_tracker.models.scorecard import ColumnMap, ReconciledRound
from disc_tracker.parsers.csv_tokenizer import tokenize
from disc_tracker.parsers.header_resolver import resolve_columns
from disc_tracker.parsers.round_reconciler import RoundReconciler
from disc_tracker.storage.round_store import RoundRepository


logger = logging.getLogger(__name__)


@dataclass
class ImportPreview:
    """Reconciled round and the columns used to build it, before persisting."""

    reconciled: ReconciledRound
    columns: ColumnMap


@dataclass
class ImportOutcome:
    """
    Result of one UDisc import.

    Attributes:
        result: What the materializer wrote
        player_name: Player whose row was imported
        columns: Resolved header map (surfaced for debugging)
    """

    result: MaterializeResult
    player_name: str
    columns: ColumnMap

    @property
    def ok(self) -> bool:
        return self.result.ok

    def to_response(self) -> Dict[str, Any]:
        """
        Build the JSON body returned by the import endpoint.

        A failed hole write still reports the created round.
        """
        body: Dict[str, Any] = {
            'ok': self.result.ok,
            'round': self.result.round.model_dump(mode='json'),
            'holesInserted': self.result.holes_inserted,
            'playerName': self.player_name,
            'debug': self.columns.to_dict(),
        }
        if not self.result.ok:
            body.update({
                'roundCreated': self.result.round_created,
                'category': 'persistence_error',
                'stage': 'holes',
                'error': 'Round created, but error inserting hole results',
                'details': self.result.hole_error,
                'attemptedHoles': self.result.attempted_holes,
            })
        return body


class UDiscImporter:
    """
    Import UDisc scorecard CSVs as rounds.
    Why: One pipeline for the API and the CLI.
    """

    def __init__(self, store: RoundRepository):
        self.materializer = RoundMaterializer(store)

    def preview(self, csv_text: str, player_name: Optional[str] = None) -> ImportPreview:
        """
        Reconcile a CSV without persisting anything.

        Raises:
            MalformedInput: If the CSV has no headers or data rows
            MissingColumns: If no hole columns were found
            RowNotFound: If the player row is absent
        """
        table = tokenize(csv_text)
        columns = resolve_columns(table.headers)

        if not columns.hole_columns:
            raise MissingColumns(
                "No hole columns found in CSV",
                details={'headers': list(table.headers)},
            )

        reconciled = RoundReconciler(table, columns).reconcile(player_name)
        logger.info(
            "Reconciled %s at %s: %d of %d holes scored",
            reconciled.player_name,
            reconciled.course_name,
            len(reconciled.holes),
            reconciled.holes_count,
        )
        return ImportPreview(reconciled=reconciled, columns=columns)

    def import_csv(
        self,
        csv_text: str,
        user_id: str,
        source_filename: Optional[str] = None,
        player_name: Optional[str] = None,
    ) -> ImportOutcome:
        """
        Main entry point for UDisc imports.

        Args:
            csv_text: Decoded CSV content
            user_id: Owning user
            source_filename: Uploaded filename, stored as source_ref
            player_name: Exact player to import; first player row if omitted

        Returns:
            ImportOutcome (check .ok for a failed hole write)

        Raises:
            MalformedInput, MissingColumns, RowNotFound: Client input faults
            PersistenceError: If the round could not be written
        """
        preview = self.preview(csv_text, player_name)
        result = self.materializer.materialize(preview.reconciled, user_id, source_filename)
        return ImportOutcome(
            result=result,
            player_name=preview.reconciled.player_name,
            columns=preview.columns,
        )
