"""
Round materializer - persists a reconciled round and its hole results.

The round and its holes are written by two independent calls, in that
order. A failed hole write never rolls back the round: the caller gets the
created round plus a description of what went wrong.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from disc_tracker.errors import PersistenceError
from disc_tracker.models.round import NewHoleResult, NewRound, Round
from disc_tracker.models.scorecard import ReconciledRound
from disc_tracker.storage.round_store import RoundRepository
from disc_tracker.utils.constants import SOURCE_UDISC_IMPORT


logger = logging.getLogger(__name__)


@dataclass
class MaterializeResult:
    """
    Outcome of persisting one reconciled round.

    Attributes:
        round: The created round (always present)
        holes_inserted: Hole results actually written
        attempted_holes: Hole results the batch write tried to insert
        hole_error: Failure message from the hole write, if it failed
    """

    round: Round
    holes_inserted: int = 0
    attempted_holes: int = 0
    hole_error: Optional[str] = None

    @property
    def round_created(self) -> bool:
        return True

    @property
    def ok(self) -> bool:
        """False only when the hole write failed."""
        return self.hole_error is None


class RoundMaterializer:
    """
    Writes reconciled rounds through a RoundRepository.

    Example usage:
        materializer = RoundMaterializer(RoundStore())
        result = materializer.materialize(reconciled, "user-1", "scorecard.csv")
    """

    def __init__(self, store: RoundRepository) -> None:
        self.store = store

    def materialize(
        self,
        reconciled: ReconciledRound,
        user_id: str,
        source_filename: Optional[str],
    ) -> MaterializeResult:
        """
        Persist the round, then its retained holes.

        Args:
            reconciled: Round data from the reconciler
            user_id: Owning user
            source_filename: Uploaded filename, stored as source_ref

        Returns:
            MaterializeResult; check .ok for hole-stage failures

        Raises:
            PersistenceError: If the round itself could not be written.
                Nothing else is written in that case.
        """
        new_round = self.build_round(reconciled, user_id, source_filename)
        try:
            created = self.store.insert_round(new_round)
        except Exception as e:
            logger.error("Round insert failed for user %s: %s", user_id, e)
            raise PersistenceError(
                "Error creating round from UDisc CSV",
                stage="round",
                details=str(e),
            ) from e

        logger.info("Created round %s (%s)", created.id, created.course_name)

        holes = self.build_holes(reconciled)
        result = MaterializeResult(round=created, attempted_holes=len(holes))
        if not holes:
            return result

        try:
            result.holes_inserted = self.store.insert_hole_results(created.id, holes)
        except Exception as e:
            logger.warning(
                "Round %s created, but inserting %d hole results failed: %s",
                created.id, len(holes), e,
            )
            result.hole_error = str(e)
            return result

        logger.info("Inserted %d hole results for round %s", result.holes_inserted, created.id)
        return result

    @staticmethod
    def build_round(
        reconciled: ReconciledRound,
        user_id: str,
        source_filename: Optional[str],
    ) -> NewRound:
        """Build the round insert payload for an imported round."""
        return NewRound(
            user_id=user_id,
            course_name=reconciled.course_name,
            layout_name=reconciled.layout_name,
            start_time=reconciled.start_time,
            end_time=reconciled.end_time,
            total_strokes=reconciled.total_strokes,
            score_vs_par=reconciled.score_vs_par,
            round_rating=reconciled.round_rating,
            holes_count=reconciled.holes_count,
            source=SOURCE_UDISC_IMPORT,
            source_ref=source_filename,
        )

    @staticmethod
    def build_holes(reconciled: ReconciledRound) -> List[NewHoleResult]:
        """One hole result per retained hole. No OB detection, no notes."""
        return [
            NewHoleResult(
                play_order=hole.play_order,
                hole_label=hole.hole_label,
                par=hole.par,
                strokes=hole.strokes,
            )
            for hole in reconciled.holes
        ]
