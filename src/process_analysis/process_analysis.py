"""Persist analysis results, resolve tags, render the report and decide publication."""

from __future__ import annotations

import logging

from analyze_content.models import SCORE_FIELDS, StructuredAnalysis
from common.errors import PipelineError
from content_store.store import ContentStore
from process_analysis.models import SOURCE_UNAVAILABLE, AnalysisStatus, ContentItem, TagCategory, TagRef
from process_analysis.publish import apply_publish_rules
from process_analysis.report import render_analysis_report
from process_analysis.sources import normalize_source_name

logger = logging.getLogger(__name__)


class DataProcessor:
    def __init__(self, store: ContentStore, tag_url_template: str = "/tags/{tag_id}"):
        self.store = store
        self.tag_url_template = tag_url_template

    def process_analysis_data(self, item: ContentItem, structured: StructuredAnalysis, raw: str) -> bool:
        """Store the analysis on ``item`` and run it through tagging, rendering and publishing.

        The item is saved after tags are resolved, again after the report is
        rendered with links to those tags, and once more if the publish rules
        changed it.

        Returns:
            False if the store failed at any point.
        """
        try:
            item.raw_analysis_response = raw
            item.structured_analysis = structured
            self._update_assessment_fields(item, structured)
            general_tags = self._update_tags(item, structured)

            self.store.save(item)

            item.analysis_text = render_analysis_report(
                structured,
                {tag.name: tag for tag in general_tags},
                self.tag_url_template,
            )
            self.store.save(item)

            if apply_publish_rules(item):
                self.store.save(item)
        except PipelineError as exc:
            logger.error(
                "Error processing analysis data stage=process id=%s title=%s error=%s",
                item.id,
                item.title,
                exc,
            )
            return False

        logger.info(
            "Processed analysis data id=%s title=%s tags=%d state=%s",
            item.id,
            item.title,
            len(item.tags),
            item.publish_state.value,
        )
        return True

    def _update_assessment_fields(self, item: ContentItem, structured: StructuredAnalysis) -> None:
        for name in SCORE_FIELDS:
            value = getattr(structured, name)
            if value is not None:
                setattr(item, name, value)
        if structured.bias_analysis:
            item.bias_analysis = structured.bias_analysis
        item.analysis_status = AnalysisStatus.COMPLETE

    def _update_tags(self, item: ContentItem, structured: StructuredAnalysis) -> list[TagRef]:
        """Replace the item's tags with those derived from the analysis.

        Returns:
            The general-category tags, used for report links.
        """
        general_tags = [
            self.store.get_or_create_tag(name, TagCategory.GENERAL)
            for name in extract_tag_names(structured)
        ]
        tags = list(general_tags)

        source = normalize_source_name(item.source_name)
        if source and source != SOURCE_UNAVAILABLE:
            item.source_name = source
            tags.append(self.store.get_or_create_tag(source, TagCategory.SOURCE))

        item.set_tags(tags)
        logger.info("Resolved %d tags for id=%s title=%s", len(item.tags), item.id, item.title)
        return general_tags


def extract_tag_names(structured: StructuredAnalysis) -> list[str]:
    """Entity names, motivations and the key metric, de-duplicated in order."""
    names: dict[str, None] = {}
    for entity in structured.entities:
        for name in (entity.name, *entity.motivations):
            if name and name.strip():
                names.setdefault(name.strip(), None)
    if structured.key_metric and structured.key_metric.strip():
        names.setdefault(structured.key_metric.strip(), None)
    return list(names)
