"""Tests for process_analysis.process_analysis module."""

import json
from unittest.mock import MagicMock

from analyze_content.analyze_content import parse_response
from analyze_content.models import EntityMotivation, StructuredAnalysis
from common.errors import StoreError
from process_analysis.models import AnalysisStatus, ContentItem, PublishState, TagCategory
from process_analysis.process_analysis import DataProcessor, extract_tag_names

RAW = json.dumps(
    {
        "entities": [
            {"name": "Senator Smith", "motivations": ["Power", "Ambition"]},
            {"name": "Governor Jones", "motivations": ["Power", "Loyalty"]},
        ],
        "key_metric": "Budget of $2B",
        "analysis": "A fight over spending.",
        "credibility_score": 75,
        "bias_rating": 45,
        "sentiment_score": 60,
        "authoritarianism_score": 20,
        "bias_analysis": "Balanced sourcing.",
    }
)

SCRAPED = json.dumps({"objects": [{"siteName": "Reuters.com", "text": "Body"}]})


def _item(**overrides) -> ContentItem:
    fields = dict(
        id="item-1",
        title="Budget talks",
        source_url="https://www.reuters.com/a",
        body_text="Body",
        raw_scraped_data=SCRAPED,
        source_name="Reuters.com",
    )
    fields.update(overrides)
    return ContentItem(**fields)


class TestExtractTagNames:
    def test_entities_motivations_and_metric_deduplicated(self) -> None:
        assert extract_tag_names(parse_response(RAW)) == [
            "Senator Smith",
            "Power",
            "Ambition",
            "Governor Jones",
            "Loyalty",
            "Budget of $2B",
        ]

    def test_blank_names_skipped(self) -> None:
        structured = StructuredAnalysis(entities=[EntityMotivation(name=" ", motivations=["Fear", " "])], key_metric="")
        assert extract_tag_names(structured) == ["Fear"]


class TestProcessAnalysisData:
    def test_full_flow_publishes_and_tags(self, store) -> None:
        item = _item()
        processor = DataProcessor(store, tag_url_template="/tags/{tag_id}")

        assert processor.process_analysis_data(item, parse_response(RAW), RAW) is True

        assert item.publish_state == PublishState.PUBLISHED
        assert item.analysis_status == AnalysisStatus.COMPLETE
        assert item.raw_analysis_response == RAW
        assert (item.credibility_score, item.bias_rating, item.sentiment_score, item.authoritarianism_score) == (
            75,
            45,
            60,
            20,
        )
        assert item.bias_analysis == "Balanced sourcing."
        assert item.source_name == "Reuters"

        names = {(tag.name, tag.category) for tag in item.tags}
        assert ("Senator Smith", TagCategory.GENERAL) in names
        assert ("Budget of $2B", TagCategory.GENERAL) in names
        assert ("Reuters", TagCategory.SOURCE) in names
        assert len(item.tags) == 7

        power = store.find_tag("Power", TagCategory.GENERAL)
        assert f'<a href="/tags/{power.store_id}">Power</a>' in item.analysis_text

        loaded = store.load(item.id)
        assert loaded.publish_state == PublishState.PUBLISHED
        assert loaded.analysis_text == item.analysis_text
        assert {t.name for t in loaded.tags} == {t.name for t in item.tags}
        assert loaded.structured_analysis == parse_response(RAW)

    def test_reprocessing_does_not_duplicate_tags(self, store) -> None:
        processor = DataProcessor(store)
        item = _item()
        processor.process_analysis_data(item, parse_response(RAW), RAW)
        first_tags = sorted(tag.store_id for tag in item.tags)

        reloaded = store.load(item.id)
        processor.process_analysis_data(reloaded, parse_response(RAW), RAW)

        assert sorted(tag.store_id for tag in reloaded.tags) == first_tags
        assert store.source_statistics()["total"] == 1

    def test_missing_scores_keep_previous_values(self, store) -> None:
        item = _item(credibility_score=40)
        raw = json.dumps({"entities": [{"name": "A", "motivations": ["Fear"]}]})

        DataProcessor(store).process_analysis_data(item, parse_response(raw), raw)

        assert item.credibility_score == 40

    def test_unavailable_source_gets_no_source_tag(self, store) -> None:
        item = _item(source_name="Source Unavailable")

        DataProcessor(store).process_analysis_data(item, parse_response(RAW), RAW)

        assert all(tag.category == TagCategory.GENERAL for tag in item.tags)

    def test_store_failure_returns_false(self) -> None:
        store = MagicMock()
        store.save.side_effect = StoreError("disk full", stage="store")

        assert DataProcessor(store).process_analysis_data(_item(), parse_response(RAW), RAW) is False
