"""
Shared fixtures: an in-memory round store and the sample UDisc export.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from uuid import UUID, uuid4

import pytest

from disc_tracker.models.round import HoleResult, NewHoleResult, NewRound, Round


FIXTURES_PATH = Path(__file__).parent / "fixtures"


class InMemoryRoundStore:
    """
    RoundStore stand-in that keeps rows in dicts.

    Set fail_round / fail_holes to make the matching write raise.
    """

    def __init__(self) -> None:
        self.rounds: Dict[UUID, Round] = {}
        self.holes: List[HoleResult] = []
        self.hole_batches: List[int] = []
        self.fail_round = False
        self.fail_holes = False
        self.closed = False

    def insert_round(self, new_round: NewRound) -> Round:
        if self.fail_round:
            raise RuntimeError("could not connect to server")
        created = Round(
            id=uuid4(),
            created_at=datetime(2024, 6, 2, 9, 0, len(self.rounds)),
            **new_round.model_dump(),
        )
        self.rounds[created.id] = created
        return created

    def insert_hole_results(self, round_id: UUID, holes: Sequence[NewHoleResult]) -> int:
        self.hole_batches.append(len(holes))
        if self.fail_holes:
            raise RuntimeError('null value in column "strokes" violates not-null constraint')
        for hole in holes:
            self.holes.append(HoleResult(id=uuid4(), round_id=round_id, **hole.model_dump()))
        return len(holes)

    def list_rounds(self, user_id: str) -> List[Round]:
        mine = [r for r in self.rounds.values() if r.user_id == user_id]
        return sorted(
            mine,
            key=lambda r: (r.start_time is not None, r.start_time or datetime.min, r.created_at),
            reverse=True,
        )

    def get_round(self, round_id: UUID) -> Optional[Round]:
        return self.rounds.get(round_id)

    def list_hole_results(self, round_id: UUID) -> List[HoleResult]:
        return sorted(
            (h for h in self.holes if h.round_id == round_id),
            key=lambda h: h.play_order,
        )

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def store():
    """Empty in-memory round store."""
    return InMemoryRoundStore()


@pytest.fixture
def fixtures_path():
    """Get path to test fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def scorecard_path(fixtures_path):
    """Sample UDisc export: Par, Alice (hole 6 blank) and Bob."""
    return fixtures_path / "udisc_scorecard.csv"


@pytest.fixture
def scorecard_text(scorecard_path):
    return scorecard_path.read_text(encoding="utf-8")
