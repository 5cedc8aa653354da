"""Article pipeline: extraction, analysis, then tagging and the publish decision."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from analyze_content.analyze_content import AnalysisEngine, parse_response, validate_response
from common.errors import ConfigurationError, InvalidURLError, PipelineError, ValidationError
from common.hashing import article_id
from content_store.store import ContentStore, SqlContentStore
from daily_quota.daily_quota import QuotaTracker
from extract_content.extract_content import (
    ContentExtractor,
    get_stored_scraped_data,
    store_scraped_data,
    update_basic_fields,
)
from extract_content.url_filter import rejection_reason
from process_analysis.models import SOURCE_UNAVAILABLE, ContentItem, ProcessingStatus
from process_analysis.process_analysis import DataProcessor
from process_analysis.publish import apply_publish_rules
from process_analysis.sources import extract_source_from_url, normalize_source_name

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Outcome of one item in a batch run."""
    item_id: str
    title: str
    url: str | None
    source_name: str | None
    success: bool
    skipped: bool = False
    publish_state: str | None = None


def quota_source(item: ContentItem, url: str | None = None) -> str:
    """Source name an item is counted against, known before extraction."""
    source = normalize_source_name(item.source_name)
    if source and source != SOURCE_UNAVAILABLE:
        return source
    return extract_source_from_url(url or item.source_url) or SOURCE_UNAVAILABLE


def enqueue_article(
    store: SqlContentStore,
    url: str,
    title: str = "",
    source_name: str | None = None,
) -> ContentItem:
    """Add a URL to the pending queue, keyed by its canonical form.

    Returns the stored item unchanged if the URL was already queued.

    Raises:
        InvalidURLError: The URL would be rejected at extraction.
    """
    reason = rejection_reason(url)
    if reason is not None:
        raise InvalidURLError(url, reason)

    source = normalize_source_name(source_name) or extract_source_from_url(url) or SOURCE_UNAVAILABLE
    item_id = article_id(url)

    existing = store.load(item_id)
    if existing is not None:
        logger.info("Already queued id=%s url=%s", item_id, url)
        return existing

    item = ContentItem(id=item_id, title=title, source_url=url, source_name=source_name or None)
    store.add(item)
    logger.info("Queued id=%s source=%s url=%s", item_id, source, url)
    return item


class ArticleProcessor:
    def __init__(
        self,
        extractor: ContentExtractor,
        analyzer: AnalysisEngine,
        data_processor: DataProcessor,
        store: ContentStore,
        quota_tracker: QuotaTracker | None = None,
    ):
        self.extractor = extractor
        self.analyzer = analyzer
        self.data_processor = data_processor
        self.store = store
        self.quota_tracker = quota_tracker

    def process_article(self, item: ContentItem, url: str) -> bool:
        """Run extraction, analysis and data processing for one item.

        Earlier stages are not rolled back when a later one fails; a later
        run of reprocess_article picks up from the stored data.

        Raises:
            ConfigurationError: A required API credential is missing.
        """
        logger.info("Starting article processing id=%s title=%s url=%s", item.id, item.title, url)
        source = quota_source(item, url)

        if not self._scrape(item, url, count_against=source):
            return False

        if not self._analyze(item, item.body_text or ""):
            return False

        logger.info("Completed processing id=%s title=%s state=%s", item.id, item.title, item.publish_state.value)
        return True

    def reprocess_article(self, item: ContentItem) -> bool:
        """Rebuild analysis from stored data, calling the AI only if no raw response is stored."""
        logger.info("Reprocessing article from stored data id=%s title=%s", item.id, item.title)

        if item.raw_analysis_response:
            structured = parse_response(item.raw_analysis_response)
            if self.data_processor.process_analysis_data(item, structured, item.raw_analysis_response):
                logger.info("Reprocessed from raw AI response id=%s title=%s", item.id, item.title)
                return True

        text = self._stored_text(item)
        if text:
            return self._analyze(item, text)

        logger.warning("Unable to reprocess article, no stored data available id=%s title=%s", item.id, item.title)
        return False

    def scrape_article_only(self, item: ContentItem, url: str) -> bool:
        """Extraction stage only. Applies the publish rules to the scraped state."""
        logger.info("Scraping content only id=%s title=%s url=%s", item.id, item.title, url)
        if not self._scrape(item, url, count_against=quota_source(item, url)):
            return False

        if apply_publish_rules(item):
            try:
                self.store.save(item)
            except PipelineError as exc:
                self._log_failure("scrape", item, exc)
                return False
        return True

    def analyze_article_only(self, item: ContentItem) -> bool:
        """Analysis stage only, using the body text or the stored extraction response."""
        logger.info("Analyzing content only id=%s title=%s", item.id, item.title)
        text = item.body_text or self._stored_text(item)
        if not text:
            logger.warning("No article text found for analysis id=%s title=%s", item.id, item.title)
            return False
        return self._analyze(item, text)

    def get_processing_status(self, item: ContentItem) -> ProcessingStatus:
        return ProcessingStatus(
            item_id=item.id,
            scraped=bool(item.raw_scraped_data),
            analyzed=bool(item.raw_analysis_response),
            structured=item.structured_analysis is not None,
            tagged=bool(item.tags),
            tag_count=len(item.tags),
            publish_state=item.publish_state,
            analysis_status=item.analysis_status,
        )

    def _scrape(self, item: ContentItem, url: str, count_against: str) -> bool:
        try:
            extraction = self.extractor.extract_content(url)
        except ConfigurationError:
            raise
        except ValidationError as exc:
            logger.info("Skipping id=%s title=%s: %s", item.id, item.title, exc)
            return False
        except PipelineError as exc:
            self._log_failure("extract", item, exc)
            return False

        if not extraction.text or not extraction.text.strip():
            logger.warning("No content extracted id=%s url=%s", item.id, url)
            return False

        store_scraped_data(item, extraction)
        update_basic_fields(item, extraction)
        try:
            self.store.save(item)
        except PipelineError as exc:
            self._log_failure("extract", item, exc)
            return False

        if self.quota_tracker is not None:
            try:
                self.quota_tracker.increment_count(count_against)
            except PipelineError as exc:
                self._log_failure("quota", item, exc)
        return True

    def _analyze(self, item: ContentItem, text: str) -> bool:
        try:
            raw = self.analyzer.generate_analysis(text, item.title)
        except ConfigurationError:
            raise
        except PipelineError as exc:
            self._log_failure("analyze", item, exc)
            return False

        structured = parse_response(raw)
        if not validate_response(structured):
            logger.warning("Invalid AI response structure stage=analyze id=%s title=%s", item.id, item.title)
            return False

        return self.data_processor.process_analysis_data(item, structured, raw)

    def _stored_text(self, item: ContentItem) -> str | None:
        data = get_stored_scraped_data(item)
        objects = data.get("objects") if data else None
        if objects and isinstance(objects[0], dict):
            text = objects[0].get("text")
            if isinstance(text, str) and text.strip():
                return text
        return None

    def _log_failure(self, stage: str, item: ContentItem, exc: Exception) -> None:
        logger.error("Processing failed stage=%s id=%s title=%s error=%s", stage, item.id, item.title, exc)


def process_pending_articles(
    store: SqlContentStore,
    processor: ArticleProcessor,
    quota_tracker: QuotaTracker | None = None,
    limit: int | None = None,
) -> list[ProcessingResult]:
    """Process stored items that have a source URL but no analysis yet.

    Items whose source is at its daily limit are skipped without an
    extraction call.
    """
    items = store.list_pending(limit)
    logger.info("Loaded %d pending items", len(items))

    results = []
    for item in items:
        source = quota_source(item)
        if quota_tracker is not None and not quota_tracker.is_allowed(source):
            results.append(
                ProcessingResult(item.id, item.title, item.source_url, source, success=False, skipped=True)
            )
            continue

        success = processor.process_article(item, item.source_url)
        results.append(
            ProcessingResult(
                item_id=item.id,
                title=item.title,
                url=item.source_url,
                source_name=item.source_name,
                success=success,
                publish_state=item.publish_state.value,
            )
        )

    succeeded = sum(1 for r in results if r.success)
    skipped = sum(1 for r in results if r.skipped)
    logger.info("Processed %d items (%d succeeded, %d skipped by quota)", len(results), succeeded, skipped)
    return results
