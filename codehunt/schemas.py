"""Pydantic v2 request/response schemas for all endpoints.

The wire format is camelCase; fields are snake_case in Python and accept
either spelling on input.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

THEMES = (
    "AI in Healthcare",
    "Generative AI & Creativity",
    "Computer Science Fundamentals",
    "AI in Education & Learning",
    "AI in Smart Cities",
)
MIN_MEMBERS = 3
MAX_MEMBERS = 4
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


class RegisterTeamRequest(CamelModel):
    team_name: str = Field(..., min_length=1, max_length=100)
    team_leader: str = Field(..., min_length=1, max_length=100)
    team_members: list[str]
    email: str = Field(..., max_length=254)
    theme: str

    @field_validator("team_name", "team_leader")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("team_members", mode="before")
    @classmethod
    def split_members(cls, v: Any) -> Any:
        # the registration form sends "a, b, c"
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            return [m.strip() for m in v if isinstance(m, str) and m.strip()]
        return v

    @field_validator("team_members")
    @classmethod
    def member_count(cls, v: list[str]) -> list[str]:
        if not MIN_MEMBERS <= len(v) <= MAX_MEMBERS:
            raise ValueError(f"Team must have {MIN_MEMBERS}-{MAX_MEMBERS} members")
        return v

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("theme")
    @classmethod
    def valid_theme(cls, v: str) -> str:
        if v not in THEMES:
            raise ValueError("Please select a valid theme")
        return v


class PhaseRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    completed: bool = False


class TeamResponse(CamelModel):
    team_id: str
    team_name: str
    team_leader: str
    team_members: list[str]
    email: str
    theme: str
    current_phase: int
    phase1: PhaseRecord
    phase2: PhaseRecord
    phase3: PhaseRecord
    phase4: PhaseRecord
    phase5: PhaseRecord
    phase6: PhaseRecord
    created_at: str | None = None


class RegisterTeamResponse(CamelModel):
    success: bool = True
    message: str = "Registration successful!"
    team: TeamResponse


class LeaderboardEntry(CamelModel):
    team_id: str
    team_name: str
    team_leader: str


# ---------------------------------------------------------------------------
# Phase submissions
# ---------------------------------------------------------------------------


class Phase1SubmitRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    ai_prompt: str = Field(..., min_length=1, max_length=5000)
    drive_link: str | None = Field(default=None, max_length=2000)


class Phase1SubmitResponse(CamelModel):
    success: bool = True
    completed: bool
    current_phase: int
    message: str = "Phase 1 completed!"


class CheckSingleRequest(CamelModel):
    question_index: int
    answer: Any


class CheckSingleResponse(CamelModel):
    success: bool = True
    correct: bool


class AnswerListRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    answers: list[Any]


class Phase2SubmitResponse(CamelModel):
    success: bool = True
    score: int
    total: int
    passed: bool
    results: list[dict[str, Any]]
    current_phase: int


class Phase3SubmitResponse(Phase2SubmitResponse):
    questions: list[dict[str, Any]]


class Phase4SubmitRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    answer: str | None = Field(default=None, max_length=500)


class Phase4SubmitResponse(CamelModel):
    success: bool
    correct: bool
    message: str
    room: str | None = None
    current_phase: int


class Phase5AnswerRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    riddle_id: int
    answer: Any


class Phase5CompleteRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    answers: dict[str, Any] = Field(default_factory=dict)
    # accepted for compatibility with the client, never used for scoring
    score: int | None = None


class Phase5CompleteResponse(CamelModel):
    success: bool
    score: int
    total: int
    message: str
    results: list[dict[str, Any]]
    current_phase: int


class Phase6SubmitRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    location_answer: str | None = Field(default=None, max_length=2000)


class Phase6SubmitResponse(CamelModel):
    success: bool = True
    message: str = "Congratulations! You have completed CodeHunt-2026!"
    team_name: str
    team_leader: str
    current_phase: int


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class PhaseStats(BaseModel):
    phase1: int = 0
    phase2: int = 0
    phase3: int = 0
    phase4: int = 0
    phase5: int = 0
    phase6: int = 0


class StatsResponse(CamelModel):
    total_teams: int
    phase_stats: PhaseStats


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted: int = 1
