from pydantic import Field
from typing import Optional, List

from api.models.common_schemas import CamelModel, CompanySummary


class Video(CamelModel):
    """
    Training video.

    `company_id` is nullable on purpose: None means the video is visible to
    everyone, not that the scope is unknown. Published vs scheduled is derived
    from `publish_date` at display time and never stored.
    """
    id: str
    title: str
    url: str
    publish_date: str
    company_id: Optional[str]
    created_at: str
    updated_at: str


class VideoWithCompany(Video):
    """Video with its company summary (list/detail views)"""
    company: Optional[CompanySummary] = None


class CreateVideoInput(CamelModel):
    """Schema for metadata-only video creation"""
    title: str = Field(..., min_length=1, max_length=200, description="Video title")
    publish_date: str = Field(..., min_length=1, description="ISO-8601 publish date")
    company_id: Optional[str] = Field(None, description="None = visible to everyone")


class UpdateVideoInput(CamelModel):
    """Schema for updating video metadata"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    publish_date: Optional[str] = None
    company_id: Optional[str] = Field(None, description="None = visible to everyone")


# ============ Response Schemas ============

class VideoResponse(CamelModel):
    video: VideoWithCompany


class VideosResponse(CamelModel):
    videos: List[VideoWithCompany]
