"""
Video library operations.

Files travel as the raw request body; metadata rides in the query string.
A video without a company is visible to everyone, so the upload omits the
companyId parameter entirely instead of sending an empty value.
"""

from typing import Any, Dict, Optional

from api.client import ApiClient, FileUpload
from api.models.common_schemas import MessageResponse, dump_input
from api.models.video_schemas import (
    CreateVideoInput,
    UpdateVideoInput,
    VideoResponse,
    VideosResponse,
)
from services.base_service import ResourceService
from services.query_cache import QueryCache, QueryState
from utils.url_builder import path_segment, with_query

VIDEOS_KEY = ("videos",)


class VideoService(ResourceService):
    """
    Queries:
        videos(), video(video_id)

    Mutations:
        upload_video(file, title, publish_date, company_id=None),
        create_video(data), update_video(video_id, data),
        replace_video_file(video_id, file), delete_video(video_id)
    """

    def __init__(self, api: ApiClient, cache: QueryCache):
        super().__init__(api, cache)
        invalidate_videos = lambda variables: [VIDEOS_KEY]

        self.upload_video = self._mutation(self._upload_video, invalidate_videos)
        self.create_video = self._mutation(self._create_video, invalidate_videos)
        self.update_video = self._mutation(self._update_video, invalidate_videos)
        self.replace_video_file = self._mutation(self._replace_video_file, invalidate_videos)
        self.delete_video = self._mutation(self._delete_video, invalidate_videos)

    def videos(self) -> QueryState:
        return self._query(VIDEOS_KEY, lambda: self.api.get("/api/videos", schema=VideosResponse))

    def video(self, video_id: Optional[str]) -> QueryState:
        return self._query(
            VIDEOS_KEY + (video_id,),
            lambda: self.api.get(f"/api/videos/{path_segment(video_id)}", schema=VideoResponse),
            enabled=bool(video_id),
        )

    def _upload_video(self, file: FileUpload, title: str, publish_date: str,
                      company_id: Optional[str] = None) -> Dict[str, Any]:
        metadata = CreateVideoInput(title=title, publish_date=publish_date, company_id=company_id)
        endpoint = with_query("/api/videos/upload", {
            "filename": file.filename,
            "title": metadata.title,
            "publishDate": metadata.publish_date,
            "companyId": metadata.company_id,
        })
        return self.api.upload_file(endpoint, file, schema=VideoResponse)

    def _create_video(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(CreateVideoInput, data))
        return self.api.post("/api/videos", payload, schema=VideoResponse)

    def _update_video(self, video_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(UpdateVideoInput, data))
        return self.api.put(f"/api/videos/{path_segment(video_id)}", payload, schema=VideoResponse)

    def _replace_video_file(self, video_id: str, file: FileUpload) -> Dict[str, Any]:
        endpoint = with_query(f"/api/videos/{path_segment(video_id)}/replace", {"filename": file.filename})
        return self.api.put_file(endpoint, file, schema=VideoResponse)

    def _delete_video(self, video_id: str) -> Dict[str, Any]:
        return self.api.delete(f"/api/videos/{path_segment(video_id)}", schema=MessageResponse)
