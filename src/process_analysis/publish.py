"""Publish/unpublish decision rules.

Rules run in a fixed order on every call and only read the item's current
fields, so applying them repeatedly converges after the first run.
"""

from __future__ import annotations

import logging

from process_analysis.models import (
    SCRAPED_DATA_UNAVAILABLE,
    SOURCE_UNAVAILABLE,
    AnalysisStatus,
    ContentItem,
    PublishState,
)
from process_analysis.sources import extract_source_from_scraped_data

logger = logging.getLogger(__name__)

SCRAPED_DATA_SENTINELS = (SCRAPED_DATA_UNAVAILABLE, SCRAPED_DATA_UNAVAILABLE.rstrip("."))

# Pending sentinel -> the text it is rewritten to once the item is held back
PENDING_REWRITES = {
    "Analysis is Pending": "Unpublished - Analysis Pending",
    "No analysis data available": "Unpublished - No analysis data available",
}


def is_scraped_data_unavailable(raw_scraped_data: str | None) -> bool:
    return raw_scraped_data is not None and raw_scraped_data.strip() in SCRAPED_DATA_SENTINELS


def has_pending_sentinel(analysis_text: str | None) -> bool:
    """True if the text carries a pending marker or its unpublished rewrite."""
    if not analysis_text:
        return False
    return any(
        sentinel in analysis_text or rewritten in analysis_text
        for sentinel, rewritten in PENDING_REWRITES.items()
    )


def apply_publish_rules(item: ContentItem) -> bool:
    """Apply the unavailable-data, pending-analysis and publish rules in order.

    Returns:
        True if any field on the item changed.
    """
    changed = _unpublish_unavailable(item)
    changed = _unpublish_pending(item) or changed
    changed = _publish_ready(item) or changed
    return changed


def _unpublish_unavailable(item: ContentItem) -> bool:
    if not is_scraped_data_unavailable(item.raw_scraped_data):
        return False

    changed = False
    if item.publish_state != PublishState.UNPUBLISHED:
        item.publish_state = PublishState.UNPUBLISHED
        logger.warning("Unpublished item with unavailable scraped data id=%s title=%s", item.id, item.title)
        changed = True
    if item.source_name != SOURCE_UNAVAILABLE:
        item.source_name = SOURCE_UNAVAILABLE
        changed = True
    return changed


def _unpublish_pending(item: ContentItem) -> bool:
    pending_status = item.analysis_status == AnalysisStatus.PENDING
    if not (pending_status or has_pending_sentinel(item.analysis_text)):
        return False

    changed = False
    if item.publish_state != PublishState.UNPUBLISHED:
        item.publish_state = PublishState.UNPUBLISHED
        logger.warning("Unpublished item with pending analysis id=%s title=%s", item.id, item.title)
        changed = True

    text = item.analysis_text
    if text:
        for sentinel, rewritten in PENDING_REWRITES.items():
            if sentinel in text and rewritten not in text:
                text = text.replace(sentinel, rewritten)
        if text != item.analysis_text:
            item.analysis_text = text
            changed = True
    return changed


def _publish_ready(item: ContentItem) -> bool:
    if item.publish_state != PublishState.UNPUBLISHED:
        return False
    if item.analysis_status == AnalysisStatus.PENDING:
        return False
    if not item.analysis_text or not item.analysis_text.strip() or has_pending_sentinel(item.analysis_text):
        return False
    if not item.raw_scraped_data or not item.raw_scraped_data.strip():
        return False
    if is_scraped_data_unavailable(item.raw_scraped_data):
        return False

    item.publish_state = PublishState.PUBLISHED
    logger.info("Published item id=%s title=%s", item.id, item.title)

    if not item.source_name or item.source_name == SOURCE_UNAVAILABLE:
        source = extract_source_from_scraped_data(item.raw_scraped_data)
        if source and source != SOURCE_UNAVAILABLE:
            logger.info("Backfilled news source id=%s source=%s", item.id, source)
            item.source_name = source
    return True
