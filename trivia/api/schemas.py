"""
Pydantic Schemas for API - Typed request values and response bodies.

Wire names follow the TheoryBot client (UserID, MessageID, QuestionCount,
RightAnswer, ...); Python code uses snake_case attributes and the models
translate with aliases.

Requests come in two phases (see validation.py): the body is decoded into
a loose dict, then checked against these models. Only the frozen request
models travel past the HTTP layer.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from ..config import MAX_QUESTION_COUNT


class WireModel(BaseModel):
    """Base for models exchanged with the bot."""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# =============================================================================
# Request Models
# =============================================================================

class StartGamePayload(WireModel):
    """Type check of a start request body. QuestionCount range is not checked here."""
    model_config = ConfigDict(populate_by_name=False)

    user_id: StrictStr = Field(..., alias="UserID", min_length=1)
    message_id: StrictStr = Field(..., alias="MessageID", min_length=1)
    # Decoded bodies carry floats; ints come from callers building the dict directly
    question_count: Union[StrictInt, StrictFloat] = Field(..., alias="QuestionCount")


class StartGameRequest(WireModel):
    """A validated request to start a game."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="UserID", min_length=1)
    message_id: str = Field(..., alias="MessageID", min_length=1)
    question_count: int = Field(..., alias="QuestionCount", ge=1, le=MAX_QUESTION_COUNT)

    def acknowledgement(self) -> str:
        return (
            f"User: {self.user_id}, Game: {self.message_id}, "
            f"Questions: {self.question_count}"
        )


class NextRequest(WireModel):
    """A validated request for the next step of a game."""
    model_config = ConfigDict(populate_by_name=False, frozen=True)

    user_id: StrictStr = Field(..., alias="UserID", min_length=1)
    answer: Optional[StrictStr] = Field(
        None, alias="Answer", description="Answer to the question awaiting one"
    )
    question_number: Optional[int] = Field(
        None, alias="QuestionNumber", ge=1,
        description="Number of the question the answer is for",
    )


class EndGameRequest(WireModel):
    """A validated request to abandon a game."""
    model_config = ConfigDict(populate_by_name=False, frozen=True)

    user_id: StrictStr = Field(..., alias="UserID", min_length=1)


# =============================================================================
# Response Models
# =============================================================================

class QuestionResponse(WireModel):
    """The question the user should answer now."""
    type: Literal["question"] = Field("question", alias="Type")
    user_id: str = Field(..., alias="UserID")
    message_id: str = Field(..., alias="MessageID")
    question_number: int = Field(..., alias="QuestionNumber")
    question_count: int = Field(..., alias="QuestionCount")
    question: str = Field(..., alias="Question")
    right_answer: str = Field(..., alias="RightAnswer")
    wrong_answer1: Optional[str] = Field(None, alias="WrongAnswer1")
    wrong_answer2: Optional[str] = Field(None, alias="WrongAnswer2")
    wrong_answer3: Optional[str] = Field(None, alias="WrongAnswer3")
    image: Optional[str] = Field(None, alias="Image")
    score: int = Field(0, alias="Score")


class QuestionResultInfo(WireModel):
    """How one question of a finished game went."""
    question_number: int = Field(..., alias="QuestionNumber")
    question: str = Field(..., alias="Question")
    answer: str = Field(..., alias="Answer")
    right_answer: str = Field(..., alias="RightAnswer")
    correct: bool = Field(..., alias="Correct")


class StatisticsResponse(WireModel):
    """Final statistics of a game."""
    type: Literal["statistics"] = Field("statistics", alias="Type")
    user_id: str = Field(..., alias="UserID")
    message_id: str = Field(..., alias="MessageID")
    outcome: Literal["completed", "abandoned"] = Field(..., alias="Outcome")
    score: int = Field(..., alias="Score")
    total: int = Field(..., alias="Total")
    answered: int = Field(..., alias="Answered")
    results: list[QuestionResultInfo] = Field(default_factory=list, alias="Results")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    active_sessions: int
