"""Domain models consumed and produced by the matching engine.

Users are supplied by the host application and treated as read-only, so the
models are frozen. Field aliases accept the camelCase payloads the mobile
client sends.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class GenderMode(str, Enum):
    """Gender matching preference for a group request."""

    ANY = "any"
    SAME_GENDER = "sameGender"
    # Reserved: accepted but filtered exactly like ANY.
    MIXED_PREFERRED = "mixedPreferred"

    @classmethod
    def _missing_(cls, value: object) -> Optional["GenderMode"]:
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "")
            aliases = {
                "any": cls.ANY,
                "samegender": cls.SAME_GENDER,
                "samegenderonly": cls.SAME_GENDER,
                "mixedpreferred": cls.MIXED_PREFERRED,
            }
            return aliases.get(key)
        return None

    @property
    def display_name(self) -> str:
        return {
            GenderMode.ANY: "Any",
            GenderMode.SAME_GENDER: "Same only",
            GenderMode.MIXED_PREFERRED: "Mixed preferred",
        }[self]


class Vibe(str, Enum):
    CHILL = "Chill"
    COMPETITIVE = "Competitive"
    PARTY = "Party"


class User(BaseModel):
    """A person who can request a group or be picked as a companion."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = ""
    age: int
    gender: str = ""
    city: Optional[str] = None
    vibe: str = ""
    ethnicity: str = ""
    religion: str = ""
    # Activity the user wants to do right now.
    activity: Optional[str] = None
    # Activities the user has attended before.
    attendance: tuple[str, ...] = ()
    mbti: str = ""
    badges: tuple[str, ...] = ()
    attendance_rating: float = Field(default=0.0, alias="attendanceRating")
    photo_name: Optional[str] = Field(default=None, alias="photoName")


class MatchingWeights(BaseModel):
    """Relative importance of each scoring factor.

    Only ratios matter: weights are normalized to sum to one before use.
    """

    model_config = ConfigDict(frozen=True)

    activity: float = Field(default=5.0, ge=0.0)
    age: float = Field(default=1.4, ge=0.0)
    distance: float = Field(default=1.0, ge=0.0)
    vibe: float = Field(default=0.0, ge=0.0)
    religion: float = Field(default=0.6, ge=0.0)
    ethnicity: float = Field(default=1.0, ge=0.0)

    def total(self) -> float:
        return (
            self.activity
            + self.age
            + self.distance
            + self.vibe
            + self.religion
            + self.ethnicity
        )

    def normalized(self) -> MatchingWeights:
        """Return weights scaled to sum to 1.0 (unchanged when the sum is 0)."""

        total = self.total()
        if total <= 0:
            return self
        return MatchingWeights(
            activity=self.activity / total,
            age=self.age / total,
            distance=self.distance / total,
            vibe=self.vibe / total,
            religion=self.religion / total,
            ethnicity=self.ethnicity / total,
        )


class ScoredCandidate(NamedTuple):
    user: User
    score: float


class Group(BaseModel):
    """Summary of an assembled group, requester first."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    activity: str = ""
    group_size: int
    members: list[User]
    matched_user_names: list[str]
    vibe: str = ""
    # Sum of MBTI/vibe pair points across all member pairs.
    affinity: int = 0
    # "locked" once every seat is filled, otherwise "forming".
    status: str = "forming"
    plan_date: Optional[str] = None
    plan_time: Optional[str] = None
    plan_location: Optional[str] = None
    plan_note: Optional[str] = None

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.group_size
