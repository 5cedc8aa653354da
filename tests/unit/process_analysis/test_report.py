"""Tests for process_analysis.report and process_analysis.scores modules."""

import pytest

from analyze_content.models import EntityMotivation, StructuredAnalysis
from process_analysis.models import TagCategory, TagRef
from process_analysis.report import NO_ANALYSIS_HTML, render_analysis_report
from process_analysis.scores import score_label


class TestScoreLabel:
    @pytest.mark.parametrize(
        "score,expected",
        [(0, "Extreme Left"), (20, "Extreme Left"), (21, "Lean Left"), (50, "Center"), (75, "Lean Right"), (100, "Extreme Right")],
    )
    def test_bias_buckets(self, score, expected) -> None:
        assert score_label("bias_rating", score) == expected

    def test_other_fields(self) -> None:
        assert score_label("credibility_score", 75) == "Generally reliable"
        assert score_label("sentiment_score", 60) == "Neutral"
        assert score_label("authoritarianism_score", 20) == "Strongly democratic"


class TestRenderAnalysisReport:
    def test_empty_analysis(self) -> None:
        assert render_analysis_report(None, {}) == NO_ANALYSIS_HTML
        assert render_analysis_report(StructuredAnalysis(), {}) == NO_ANALYSIS_HTML

    def test_links_and_scores(self) -> None:
        structured = StructuredAnalysis(
            entities=[EntityMotivation(name="Senator Smith", motivations=["Power", "Fear"])],
            key_metric="Turnout 61%",
            credibility_score=75,
            bias_rating=45,
            bias_analysis="Leans on official sources.",
            analysis="Overview.",
        )
        tags = {
            "Senator Smith": TagRef("Senator Smith", TagCategory.GENERAL, store_id=1),
            "Power": TagRef("Power", TagCategory.GENERAL, store_id=2),
            "Turnout 61%": TagRef("Turnout 61%", TagCategory.GENERAL, store_id=3),
        }

        html = render_analysis_report(structured, tags, "/tags/{tag_id}")

        assert '- <a href="/tags/1">Senator Smith</a>: <a href="/tags/2">Power</a>, Fear<br>' in html
        assert "Credibility Score: 75/100 (Generally reliable)<br>" in html
        assert "Bias Rating: 45/100 (Center)<br>" in html
        assert "Sentiment Score" not in html
        assert "<strong>Bias Analysis:</strong><br>Leans on official sources." in html
        assert '<strong>Key metric:</strong> <a href="/tags/3">Turnout 61%</a>' in html
        assert html.endswith("<p>Overview.</p>")

    def test_text_is_escaped(self) -> None:
        structured = StructuredAnalysis(
            entities=[EntityMotivation(name="<script>", motivations=["A & B"])],
            analysis='"quoted" <b>',
        )

        html = render_analysis_report(structured, {})

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "A &amp; B" in html
        assert "&lt;b&gt;" in html
