"""
Quiz questions attached to videos.

Cache scopes:
    ("questions", "video", video_id)  - a video's question list
    ("questions", question_id)        - a single question

Creating, deleting or reordering only touches the owning video's list.
Updating also refreshes the single-question entry.
"""

from typing import Any, Dict, List, Optional

from api.client import ApiClient
from api.models.common_schemas import MessageResponse, dump_input
from api.models.question_schemas import (
    CreateQuestionInput,
    QuestionResponse,
    QuestionsResponse,
    ReorderQuestionsInput,
    UpdateQuestionInput,
)
from services.base_service import ResourceService
from services.query_cache import QueryCache, QueryKey, QueryState
from utils.url_builder import path_segment

QUESTIONS_KEY = ("questions",)


def video_questions_key(video_id: Optional[str]) -> QueryKey:
    return QUESTIONS_KEY + ("video", video_id)


def question_key(question_id: Optional[str]) -> QueryKey:
    return QUESTIONS_KEY + (question_id,)


class QuestionService(ResourceService):
    """
    Queries:
        video_questions(video_id), question(question_id)

    Mutations:
        create_question(video_id, data), update_question(question_id, video_id, data),
        delete_question(question_id, video_id), reorder_questions(video_id, questions)
    """

    def __init__(self, api: ApiClient, cache: QueryCache):
        super().__init__(api, cache)

        self.create_question = self._mutation(
            self._create_question,
            lambda variables: [video_questions_key(variables["video_id"])],
        )
        self.update_question = self._mutation(
            self._update_question,
            lambda variables: [
                video_questions_key(variables["video_id"]),
                question_key(variables["question_id"]),
            ],
        )
        self.delete_question = self._mutation(
            self._delete_question,
            lambda variables: [video_questions_key(variables["video_id"])],
        )
        self.reorder_questions = self._mutation(
            self._reorder_questions,
            lambda variables: [video_questions_key(variables["video_id"])],
        )

    def video_questions(self, video_id: Optional[str]) -> QueryState:
        return self._query(
            video_questions_key(video_id),
            lambda: self.api.get(f"/api/videos/{path_segment(video_id)}/questions", schema=QuestionsResponse),
            enabled=bool(video_id),
        )

    def question(self, question_id: Optional[str]) -> QueryState:
        return self._query(
            question_key(question_id),
            lambda: self.api.get(f"/api/questions/{path_segment(question_id)}", schema=QuestionResponse),
            enabled=bool(question_id),
        )

    def _create_question(self, video_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(CreateQuestionInput, data))
        return self.api.post(f"/api/videos/{path_segment(video_id)}/questions", payload, schema=QuestionResponse)

    def _update_question(self, question_id: str, video_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(UpdateQuestionInput, data))
        return self.api.put(f"/api/questions/{path_segment(question_id)}", payload, schema=QuestionResponse)

    def _delete_question(self, question_id: str, video_id: str) -> Dict[str, Any]:
        return self.api.delete(f"/api/questions/{path_segment(question_id)}", schema=MessageResponse)

    def _reorder_questions(self, video_id: str, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
        payload = dump_input(ReorderQuestionsInput(questions=questions))
        return self.api.put(
            f"/api/videos/{path_segment(video_id)}/questions/order", payload, schema=QuestionsResponse
        )
