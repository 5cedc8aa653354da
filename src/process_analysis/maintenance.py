"""Bulk maintenance over stored items: source backfill and score reprocessing."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from analyze_content.analyze_content import parse_response
from common.errors import PipelineError
from content_store.store import SqlContentStore
from process_analysis.models import SOURCE_UNAVAILABLE
from process_analysis.process_analysis import DataProcessor
from process_analysis.sources import resolve_source_name

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceSummary:
    examined: int = 0
    updated: int = 0
    failed: int = 0


def backfill_source_names(
    store: SqlContentStore,
    batch_size: int = 50,
    process_all: bool = False,
) -> MaintenanceSummary:
    """Fill missing source names from stored scraped data, one batch or until exhausted."""
    summary = MaintenanceSummary()
    after_id = None

    while True:
        items = store.list_missing_source(limit=batch_size, after_id=after_id)
        if not items:
            break

        for item in items:
            summary.examined += 1
            source = resolve_source_name(item)
            if not source or source == item.source_name:
                continue
            if source == SOURCE_UNAVAILABLE and item.source_name:
                continue
            item.source_name = source
            try:
                store.save(item)
            except PipelineError as exc:
                logger.error("Failed to backfill source id=%s error=%s", item.id, exc)
                summary.failed += 1
                continue
            summary.updated += 1
            logger.info("Backfilled source id=%s source=%s", item.id, source)

        after_id = items[-1].id
        if not process_all or len(items) < batch_size:
            break

    logger.info(
        "Source backfill examined=%d updated=%d failed=%d",
        summary.examined,
        summary.updated,
        summary.failed,
    )
    return summary


def reprocess_missing_scores(
    store: SqlContentStore,
    processor: DataProcessor,
    field: str,
    limit: int | None = 50,
) -> MaintenanceSummary:
    """Re-parse the stored AI response for items whose ``field`` score is empty."""
    summary = MaintenanceSummary()

    for item in store.list_missing_score(field, limit):
        summary.examined += 1
        structured = parse_response(item.raw_analysis_response)
        if getattr(structured, field) is None:
            logger.warning("Stored AI response has no %s id=%s title=%s", field, item.id, item.title)
            continue

        if processor.process_analysis_data(item, structured, item.raw_analysis_response):
            summary.updated += 1
        else:
            summary.failed += 1

    logger.info(
        "Reprocessed %s examined=%d updated=%d failed=%d",
        field,
        summary.examined,
        summary.updated,
        summary.failed,
    )
    return summary
