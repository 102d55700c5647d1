"""
Entities exchanged between the service layer, the stores and the HTTP API.

Attributes are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from .types import QuestionType

# integers stay integers on the wire
Points = Union[StrictInt, float]


class HiringModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict:
        """JSON-compatible dict with wire (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")


class Question(HiringModel):
    id: str
    text: str
    type: QuestionType
    points: Points
    options: Optional[List[str]] = None
    correct_option: Optional[str] = None
    correct_options: Optional[List[str]] = None
    min: Optional[Points] = None
    max: Optional[Points] = None
    keywords: Optional[List[str]] = None


class Job(HiringModel):
    id: str
    title: str
    location: str
    customer: str
    job_name: str
    description: str
    questions: List[Question]
    created_at: datetime


class Answer(HiringModel):
    question_id: str
    value: Any = None


class ScoreBreakdown(HiringModel):
    question_id: str
    question_text: str
    points_earned: float
    points_possible: Points
    answer: Any = None


class Application(HiringModel):
    id: str
    job_id: str
    candidate_name: str
    candidate_email: str
    answers: List[Answer]
    total_score: float
    max_score: Points
    score_breakdown: List[ScoreBreakdown] = Field(default_factory=list)
    submitted_at: datetime
