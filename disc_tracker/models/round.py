"""
Round models - Persisted rounds and their hole results.

Uses Pydantic v2 for validation. New* models are insert payloads; the
plain models mirror database rows including generated ids and timestamps.
"""

from uuid import UUID
from datetime import datetime
from decimal import Decimal
from typing import Optional, Literal

from pydantic import BaseModel, Field, field_validator

from disc_tracker.utils.constants import SOURCE_MANUAL


RoundSource = Literal["manual", "udisc-import"]


class NewRound(BaseModel):
    """
    Round insert payload.
    Why: Database generates id and created_at.
    """
    user_id: str = Field(min_length=1)
    course_name: str = Field(min_length=1)
    layout_name: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_strokes: Optional[int] = None
    score_vs_par: Optional[int] = None
    round_rating: Optional[Decimal] = None
    holes_count: Optional[int] = Field(default=None, ge=0)
    source: RoundSource = SOURCE_MANUAL
    source_ref: Optional[str] = None


class Round(NewRound):
    """One logged disc-golf outing, as stored."""
    id: UUID
    created_at: datetime


class NewHoleResult(BaseModel):
    """Hole result insert payload (round id supplied at insert time)."""
    play_order: int = Field(ge=1)
    hole_label: str
    par: Optional[int] = None
    strokes: int
    ob: bool = False
    notes: str = ""


class HoleResult(NewHoleResult):
    """One hole's par/strokes pair within a stored round."""
    id: UUID
    round_id: UUID


class ManualRoundRequest(BaseModel):
    """Body of POST /api/rounds."""
    user_id: str = Field(alias="userId", min_length=1)
    course_name: str = Field(alias="courseName")
    layout_name: Optional[str] = Field(default=None, alias="layoutName")

    model_config = {"populate_by_name": True}

    @field_validator("user_id", "course_name")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def to_new_round(self, started_at: datetime) -> NewRound:
        """Build the insert payload for a manually logged round."""
        return NewRound(
            user_id=self.user_id,
            course_name=self.course_name,
            layout_name=self.layout_name,
            start_time=started_at,
            source=SOURCE_MANUAL,
        )


__all__ = [
    'NewRound',
    'Round',
    'NewHoleResult',
    'HoleResult',
    'ManualRoundRequest',
    'RoundSource',
]
