"""Tests for analyze_content.analyze_content module."""

import json
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from analyze_content.analyze_content import (
    BIAS_ANALYSIS_MAX_CHARS,
    AnalysisEngine,
    parse_response,
    validate_response,
)
from analyze_content.models import EntityMotivation, StructuredAnalysis
from common.errors import ConfigurationError, EmptyResponseError, UpstreamError

RESPONSE = {
    "entities": [
        {"name": "Senator Smith", "motivations": ["Power", "Ambition"]},
        {"name": "Governor Jones", "motivations": ["Power"]},
    ],
    "key_metric": "Approval rating at 41%",
    "analysis": "  A contest over the budget.  ",
    "credibility_score": 82,
    "bias_rating": "45",
    "bias_analysis": "Mostly balanced.",
    "sentiment_score": 30.7,
    "authoritarianism_score": 12,
}


def _client(content):
    client = MagicMock()
    message = MagicMock()
    message.content = content
    client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=message)])
    return client


class TestGenerateAnalysis:
    def test_returns_model_output(self) -> None:
        client = _client('{"entities": []}')
        engine = AnalysisEngine(client=client, model="test-model", max_tokens=500, timeout=5.0)

        assert engine.generate_analysis("Body text", "Title") == '{"entities": []}'

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 500
        assert kwargs["timeout"] == 5.0
        assert kwargs["messages"][0]["role"] == "user"
        assert "Title" in kwargs["messages"][0]["content"]
        assert "Body text" in kwargs["messages"][0]["content"]

    def test_missing_key_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisEngine(api_key=None).generate_analysis("text", "title")

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_empty_content(self, content) -> None:
        with pytest.raises(EmptyResponseError):
            AnalysisEngine(client=_client(content)).generate_analysis("text", "title")

    def test_api_error_wrapped(self) -> None:
        client = MagicMock()
        client.chat.completions.create.side_effect = OpenAIError("timed out")

        with pytest.raises(UpstreamError, match="timed out") as exc_info:
            AnalysisEngine(client=client).generate_analysis("text", "title")

        assert exc_info.value.stage == "analyze"


class TestParseResponse:
    def test_full_response(self) -> None:
        result = parse_response(json.dumps(RESPONSE))

        assert [e.name for e in result.entities] == ["Senator Smith", "Governor Jones"]
        assert result.motivations == ["Power", "Ambition"]
        assert result.key_metric == "Approval rating at 41%"
        assert result.analysis == "A contest over the budget."
        assert result.credibility_score == 82
        assert result.bias_rating == 45
        assert result.sentiment_score == 30
        assert result.authoritarianism_score == 12

    def test_json_embedded_in_prose(self) -> None:
        raw = "Here is the analysis:\n```json\n" + json.dumps(RESPONSE) + "\n```\nThanks!"
        assert parse_response(raw).credibility_score == 82

    @pytest.mark.parametrize(
        "raw",
        [None, 42, "", "no json here", "} backwards {", "{not valid json}", "[1, 2]", "{" * 5000 + "}" * 5000],
    )
    def test_garbage_yields_empty_result(self, raw) -> None:
        result = parse_response(raw)
        assert isinstance(result, StructuredAnalysis)
        assert result.is_empty()

    def test_scores_are_clamped(self) -> None:
        raw = json.dumps({"credibility_score": 150, "bias_rating": -20, "sentiment_score": "101"})
        result = parse_response(raw)
        assert result.credibility_score == 100
        assert result.bias_rating == 0
        assert result.sentiment_score == 100

    def test_non_numeric_scores_dropped(self) -> None:
        raw = json.dumps({"credibility_score": "high", "bias_rating": True, "sentiment_score": None})
        assert parse_response(raw).scores == {}

    def test_bias_analysis_truncated(self) -> None:
        result = parse_response(json.dumps({"bias_analysis": "x" * 1500}))
        assert len(result.bias_analysis) == BIAS_ANALYSIS_MAX_CHARS
        assert result.bias_analysis.endswith("...")

    def test_bias_analysis_at_limit_kept(self) -> None:
        text = "y" * BIAS_ANALYSIS_MAX_CHARS
        assert parse_response(json.dumps({"bias_analysis": text})).bias_analysis == text

    def test_key_metric_list_takes_first_string(self) -> None:
        raw = json.dumps({"key_metric": [3, "", "GDP grew 2%", "other"]})
        assert parse_response(raw).key_metric == "GDP grew 2%"

    def test_malformed_entities_skipped(self) -> None:
        raw = json.dumps(
            {
                "entities": [
                    "just a string",
                    {"name": "No motivations"},
                    {"motivations": ["Fear"]},
                    {"name": "Single", "motivations": "Fear"},
                    {"name": "Bad list", "motivations": {"a": 1}},
                ]
            }
        )
        result = parse_response(raw)
        assert result.entities == [EntityMotivation(name="Single", motivations=["Fear"])]


class TestValidateResponse:
    def test_valid(self) -> None:
        assert validate_response(parse_response(json.dumps(RESPONSE))) is True

    def test_no_entities(self) -> None:
        assert validate_response(StructuredAnalysis()) is False

    def test_entities_without_motivations(self) -> None:
        data = StructuredAnalysis(entities=[EntityMotivation(name="A", motivations=[])])
        assert validate_response(data) is False
