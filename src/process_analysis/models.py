"""Data models for process_analysis pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from analyze_content.models import StructuredAnalysis
from common.datetime import utc_now

SOURCE_UNAVAILABLE = "Source Unavailable"
SCRAPED_DATA_UNAVAILABLE = "Scraped data unavailable."


class PublishState(str, Enum):
    UNPUBLISHED = "unpublished"
    PUBLISHED = "published"


class AnalysisStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    COMPLETE = "complete"


class TagCategory(str, Enum):
    GENERAL = "general"
    SOURCE = "source"


@dataclass(frozen=True)
class TagRef:
    """A tag resolved in the content store."""
    name: str
    category: TagCategory
    store_id: int | None = None

    @property
    def key(self) -> tuple[str, TagCategory]:
        return self.name, self.category


@dataclass
class ContentItem:
    """An article record as seen by the pipeline."""
    id: str
    title: str = ""
    source_url: str | None = None
    body_text: str | None = None
    publish_state: PublishState = PublishState.UNPUBLISHED
    raw_scraped_data: str | None = None
    raw_analysis_response: str | None = None
    structured_analysis: StructuredAnalysis | None = None
    analysis_text: str | None = None
    analysis_status: AnalysisStatus = AnalysisStatus.NONE
    source_name: str | None = None
    tags: list[TagRef] = field(default_factory=list)

    credibility_score: int | None = None
    bias_rating: int | None = None
    sentiment_score: int | None = None
    authoritarianism_score: int | None = None
    bias_analysis: str | None = None

    site_name: str | None = None
    author: str | None = None
    breadcrumb: str | None = None
    word_count: int | None = None
    language: str | None = None
    image_url: str | None = None
    published_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)

    def add_tag(self, tag: TagRef) -> bool:
        """Add a tag unless one with the same name and category is present."""
        if any(existing.key == tag.key for existing in self.tags):
            return False
        self.tags.append(tag)
        return True

    def set_tags(self, tags: list[TagRef]) -> None:
        self.tags = []
        for tag in tags:
            self.add_tag(tag)


@dataclass
class ProcessingStatus:
    """Per-item summary of which stages have produced output."""
    item_id: str
    scraped: bool
    analyzed: bool
    structured: bool
    tagged: bool
    tag_count: int
    publish_state: PublishState
    analysis_status: AnalysisStatus
