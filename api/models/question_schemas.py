from pydantic import ConfigDict, Field
from typing import Optional, List

from api.models.common_schemas import CamelModel


# ============ Answer Schemas ============

class Answer(CamelModel):
    """Answer option belonging to a quiz question"""
    id: str
    text: str
    is_correct: bool
    order: int
    question_id: str
    created_at: str
    updated_at: str


class AnswerInput(CamelModel):
    """Answer as submitted with a question create/update (id absent = new answer)"""
    id: Optional[str] = None
    text: str = Field(..., min_length=1, max_length=500, description="Answer text")
    is_correct: bool
    order: Optional[int] = Field(None, ge=0)


# ============ Question Schemas ============

class Question(CamelModel):
    """Quiz question attached to a video"""
    id: str
    text: str
    order: int
    video_id: str
    created_at: str
    updated_at: str


class QuestionWithAnswers(Question):
    """Question with its ordered answers"""
    answers: List[Answer]


class CreateQuestionInput(CamelModel):
    """Schema for creating a question with its answers"""
    text: str = Field(..., min_length=1, max_length=1000, description="Question text")
    order: Optional[int] = Field(None, ge=0)
    answers: List[AnswerInput] = Field(..., min_length=2, description="At least 2 answers are required")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "Which extinguisher is used on electrical fires?",
                "answers": [
                    {"text": "Water", "isCorrect": False, "order": 0},
                    {"text": "CO2", "isCorrect": True, "order": 1}
                ]
            }
        }
    )


class UpdateQuestionInput(CamelModel):
    """Schema for updating a question; `answers` replaces the full answer set"""
    text: Optional[str] = Field(None, min_length=1, max_length=1000)
    order: Optional[int] = Field(None, ge=0)
    answers: Optional[List[AnswerInput]] = Field(None, min_length=2)


class QuestionOrderItem(CamelModel):
    id: str
    order: int = Field(..., ge=0)


class ReorderQuestionsInput(CamelModel):
    """Bulk reorder payload: {questions: [{id, order}]}"""
    questions: List[QuestionOrderItem]


# ============ Response Schemas ============

class QuestionResponse(CamelModel):
    question: QuestionWithAnswers


class QuestionsResponse(CamelModel):
    questions: List[QuestionWithAnswers]
