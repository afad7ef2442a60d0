"""
Question/answer editor state.

Holds everything the video page needs to browse and edit a video's quiz
without touching Streamlit, so the rules can be exercised directly:

- expansion is a set of question ids, independent of editing
- at most one question is being edited (EditState = Idle | Editing)
- the new-question draft is separate and always starts with two empty,
  incorrect answers
- submission requires question text, text on every answer and at least one
  correct answer; answers are renumbered by position on submit
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field, ValidationError

from api.client import ApiError
from services.mutation import Mutation, MutationInProgress
from services.query_cache import QueryState
from services.question_service import QuestionService

logger = logging.getLogger(__name__)

MIN_ANSWERS = 2


# ============ DRAFTS ============

class AnswerDraft(BaseModel):
    """Unsaved answer; `id` is None for answers not persisted yet."""
    id: Optional[str] = None
    text: str = ""
    is_correct: bool = False


class QuestionDraft(BaseModel):
    """
    Unsaved question with its ordered answers.

    Answer order is list position. `revision` increases whenever the answer
    list changes shape so widget keys can follow.
    """
    text: str = ""
    answers: List[AnswerDraft] = Field(default_factory=list)
    revision: int = 0

    @classmethod
    def empty(cls) -> "QuestionDraft":
        return cls(answers=[AnswerDraft() for _ in range(MIN_ANSWERS)])

    @classmethod
    def from_question(cls, question: Dict[str, Any]) -> "QuestionDraft":
        """Snapshot a persisted question (wire dict, camelCase keys)."""
        answers = sorted(question.get("answers") or [], key=lambda answer: answer.get("order", 0))
        return cls(
            text=question.get("text", ""),
            answers=[
                AnswerDraft(id=answer.get("id"), text=answer.get("text", ""),
                            is_correct=bool(answer.get("isCorrect")))
                for answer in answers
            ],
        )

    # ---- edits ----

    def set_text(self, text: str) -> None:
        self.text = text

    def set_answer_text(self, index: int, text: str) -> None:
        self.answers[index].text = text

    def toggle_answer_correct(self, index: int) -> None:
        """Flip one answer only; several answers may be correct at once."""
        answer = self.answers[index]
        answer.is_correct = not answer.is_correct

    def add_answer(self) -> None:
        self.answers.append(AnswerDraft())
        self.revision += 1

    def remove_answer(self, index: int) -> bool:
        """Remove one answer. No-op (returns False) at the two-answer minimum."""
        if len(self.answers) <= MIN_ANSWERS:
            return False
        del self.answers[index]
        self.revision += 1
        return True

    def move_answer(self, index: int, target: int) -> bool:
        if not (0 <= index < len(self.answers) and 0 <= target < len(self.answers)) or index == target:
            return False
        self.answers.insert(target, self.answers.pop(index))
        self.revision += 1
        return True

    # ---- validation ----

    def has_correct_answer(self) -> bool:
        return any(answer.is_correct for answer in self.answers)

    def validation_messages(self) -> List[str]:
        messages = []
        if not self.text.strip():
            messages.append("Question text is required")
        if any(not answer.text.strip() for answer in self.answers):
            messages.append("Every answer needs text")
        if not self.has_correct_answer():
            messages.append("Mark at least one answer as correct")
        return messages

    def can_submit(self) -> bool:
        return not self.validation_messages()

    # ---- serialization ----

    def to_answer_inputs(self) -> List[Dict[str, Any]]:
        """Wire answers with order = current position; id only for persisted answers."""
        inputs = []
        for position, answer in enumerate(self.answers):
            item: Dict[str, Any] = {"text": answer.text, "isCorrect": answer.is_correct, "order": position}
            if answer.id:
                item = {"id": answer.id, **item}
            inputs.append(item)
        return inputs

    def to_payload(self) -> Dict[str, Any]:
        return {"text": self.text, "answers": self.to_answer_inputs()}


# ============ EDIT STATE ============

class Idle(BaseModel):
    kind: Literal["idle"] = "idle"


class Editing(BaseModel):
    kind: Literal["editing"] = "editing"
    question_id: str
    draft: QuestionDraft


EditState = Union[Idle, Editing]


class RenderMode(str, Enum):
    COLLAPSED = "collapsed"
    VIEW = "view"
    EDIT = "edit"


def render_mode(expanded: bool, editing: bool) -> RenderMode:
    if not expanded:
        return RenderMode.COLLAPSED
    return RenderMode.EDIT if editing else RenderMode.VIEW


# ============ EDITOR ============

class QuestionEditor:
    """
    Editor for one video's questions.

    Usage:
        editor = QuestionEditor(video_id, services.questions)
        for question in editor.questions():
            mode = editor.render_mode(question["id"])
            ...
    """

    def __init__(self, video_id: str, question_service: QuestionService):
        self.video_id = video_id
        self.service = question_service

        self.expanded: Set[str] = set()
        self.edit_state: EditState = Idle()
        self.is_adding_new = False
        self.new_draft = QuestionDraft.empty()

    # ---- data ----

    def questions_state(self) -> QueryState:
        return self.service.video_questions(self.video_id)

    def questions(self) -> List[Dict[str, Any]]:
        data = self.questions_state().data
        if not isinstance(data, dict):
            return []
        return list(data.get("questions") or [])

    # ---- expansion ----

    def toggle_expanded(self, question_id: str) -> None:
        # The question under edit stays open
        if self.editing_id == question_id:
            return
        if question_id in self.expanded:
            self.expanded.discard(question_id)
        else:
            self.expanded.add(question_id)

    def is_expanded(self, question_id: str) -> bool:
        return question_id in self.expanded

    def render_mode(self, question_id: str) -> RenderMode:
        return render_mode(self.is_expanded(question_id), self.editing_id == question_id)

    # ---- editing ----

    @property
    def editing_id(self) -> Optional[str]:
        return self.edit_state.question_id if isinstance(self.edit_state, Editing) else None

    @property
    def edit_draft(self) -> Optional[QuestionDraft]:
        return self.edit_state.draft if isinstance(self.edit_state, Editing) else None

    def begin_edit(self, question: Dict[str, Any]) -> None:
        """Edit `question`; any unsaved draft for another question is dropped."""
        self.edit_state = Editing(question_id=question["id"], draft=QuestionDraft.from_question(question))
        self.expanded.add(question["id"])

    def cancel_edit(self) -> None:
        self.edit_state = Idle()

    def save_edit(self) -> bool:
        """
        Submit the edit draft.

        Returns False without a request when the draft is invalid. On failure
        the draft and focus are kept and the error stays on update_question.
        """
        state = self.edit_state
        if not isinstance(state, Editing) or not state.draft.can_submit():
            return False

        saved = self._run(
            self.service.update_question,
            question_id=state.question_id,
            video_id=self.video_id,
            data=state.draft.to_payload(),
        )
        if saved and self.edit_state is state:
            self.edit_state = Idle()
        return saved

    # ---- creating ----

    def start_adding(self) -> None:
        self.is_adding_new = True

    def cancel_adding(self) -> None:
        self.is_adding_new = False
        self.new_draft = QuestionDraft.empty()

    def create_question(self) -> bool:
        if not self.new_draft.can_submit():
            return False

        created = self._run(self.service.create_question, video_id=self.video_id,
                            data=self.new_draft.to_payload())
        if created:
            self.new_draft = QuestionDraft.empty()
            self.is_adding_new = False
        return created

    # ---- deleting / ordering ----

    def delete_question(self, question_id: str) -> bool:
        """Delete immediately; there is no confirmation step for questions."""
        return self._run(self.service.delete_question, question_id=question_id, video_id=self.video_id)

    def move_question(self, question_id: str, offset: int) -> bool:
        """Move a question up (-1) or down (+1) and persist the full order."""
        ids = [question["id"] for question in sorted(self.questions(), key=lambda q: q.get("order", 0))]
        if question_id not in ids:
            return False
        index = ids.index(question_id)
        target = index + offset
        if not 0 <= target < len(ids) or target == index:
            return False

        ids.insert(target, ids.pop(index))
        order = [{"id": qid, "order": position} for position, qid in enumerate(ids)]
        return self._run(self.service.reorder_questions, video_id=self.video_id, questions=order)

    # ---- lifecycle ----

    def close(self) -> None:
        """
        Drop every piece of local state when the video view goes away.

        The question mutations are shared by all videos in the session, so
        their recorded errors are cleared too.
        """
        self.expanded.clear()
        self.edit_state = Idle()
        self.cancel_adding()
        for mutation in (
            self.service.create_question,
            self.service.update_question,
            self.service.delete_question,
            self.service.reorder_questions,
        ):
            mutation.reset()

    # ---- status ----

    @property
    def is_saving(self) -> bool:
        return self.service.update_question.is_pending

    @property
    def is_creating(self) -> bool:
        return self.service.create_question.is_pending

    @property
    def is_deleting(self) -> bool:
        return self.service.delete_question.is_pending

    @property
    def save_error(self) -> Optional[Exception]:
        return self.service.update_question.error

    @property
    def create_error(self) -> Optional[Exception]:
        return self.service.create_question.error

    @property
    def delete_error(self) -> Optional[Exception]:
        return self.service.delete_question.error

    @property
    def reorder_error(self) -> Optional[Exception]:
        return self.service.reorder_questions.error

    @staticmethod
    def _run(mutation: Mutation, **variables) -> bool:
        try:
            mutation.mutate(**variables)
        except MutationInProgress:
            logger.debug(f"Ignored duplicate {mutation.name} submission")
            return False
        except (ApiError, ValidationError):
            # Kept on mutation.error for display
            return False
        return True
