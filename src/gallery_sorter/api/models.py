"""Pydantic models for gallery API request bodies."""

from pydantic import BaseModel, Field

from gallery_sorter.domain.results import SortDimension


class MetadataRequest(BaseModel):
    """Request to describe the session's images."""

    focus: str = Field(default="", max_length=500)


class SortRequest(BaseModel):
    """Request to group described images."""

    sort_by: SortDimension
