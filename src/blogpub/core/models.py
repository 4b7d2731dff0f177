"""Data models for documents, post records, and pass reports"""

from dataclasses import dataclass, field
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class RawDocument:
    """Unmodified file content and its path relative to the docs root."""
    text: str
    path: str


@dataclass
class AIFields:
    """Whatever could be recovered from an AI response; unresolved fields stay empty."""
    title:   Optional[str] = None
    excerpt: Optional[str] = None
    tags:    list[str] = field(default_factory=list)


class PostRecord(BaseModel):
    """Fully resolved post consumed by listing, detail, feed, and sitemap views."""
    model_config = ConfigDict(populate_by_name=True)

    slug:        str
    title:       str
    excerpt:     str = ""
    date:        str = ""
    author:      str = ""
    read_time:   str = Field(default="", alias="readTime")
    tags:        list[str] = []
    category:    str = "blog"
    subcategory: Optional[str] = None
    image:       Optional[str] = None
    content:     str = ""
    word_count:  int = Field(default=0, ge=0, alias="wordCount")
    path:        str = ""    # relative source path; not part of the public record

    def public_dict(self) -> dict:
        """camelCase dict for the rendering layer, without the source path."""
        return self.model_dump(by_alias=True, exclude={"path"})


class ProcessResult(BaseModel):
    path:   str
    status: Literal["updated", "unchanged", "would-update"]
    diff:   str = ""


class SEOIssue(BaseModel):
    type:       Literal["error", "warning", "info"]
    file:       str
    message:    str
    suggestion: Optional[str] = None


class SEOReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_posts:           int = Field(default=0, alias="totalPosts")
    posts_with_images:     int = Field(default=0, alias="postsWithImages")
    images_without_alt:    int = Field(default=0, alias="imagesWithoutAlt")
    posts_without_excerpt: int = Field(default=0, alias="postsWithoutExcerpt")
    posts_without_tags:    int = Field(default=0, alias="postsWithoutTags")
    posts_with_bad_dates:  int = Field(default=0, alias="postsWithBadDates")
    issues:          list[SEOIssue] = []
    recommendations: list[str] = []


class OptimizationResult(BaseModel):
    file:    str
    changes: list[str] = []
    success: bool = True
    error:   Optional[str] = None
