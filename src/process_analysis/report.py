"""HTML rendering of a structured analysis with tag links."""

from __future__ import annotations

from html import escape

from analyze_content.models import SCORE_FIELDS, StructuredAnalysis
from process_analysis.models import TagRef
from process_analysis.scores import SCORE_TITLES, score_label

NO_ANALYSIS_HTML = "<p>No analysis data available.</p>"


def render_analysis_report(
    structured: StructuredAnalysis | None,
    tags_by_name: dict[str, TagRef],
    url_template: str = "/tags/{tag_id}",
) -> str:
    """Render the analysis as HTML.

    Names present in ``tags_by_name`` become links; anything else is
    rendered as escaped plain text.
    """
    if structured is None or structured.is_empty():
        return NO_ANALYSIS_HTML

    def link(name: str) -> str:
        tag = tags_by_name.get(name)
        if tag is None or tag.store_id is None:
            return escape(name)
        href = escape(url_template.format(tag_id=tag.store_id), quote=True)
        return f'<a href="{href}">{escape(name)}</a>'

    parts = []

    if structured.entities:
        lines = []
        for entity in structured.entities:
            motivations = ", ".join(link(m) for m in entity.motivations)
            lines.append(f"- {link(entity.name)}: {motivations}<br>")
        parts.append("<p><strong>Entities mentioned:</strong><br>" + "".join(lines) + "</p>")

    scores = []
    for field in SCORE_FIELDS:
        value = getattr(structured, field)
        if value is not None:
            scores.append(f"{SCORE_TITLES[field]}: {value}/100 ({score_label(field, value)})<br>")
    parts.append("<p><strong>Article Assessment:</strong><br>" + "".join(scores) + "</p>")

    if structured.bias_analysis:
        parts.append(f"<p><strong>Bias Analysis:</strong><br>{escape(structured.bias_analysis)}</p>")

    if structured.key_metric:
        parts.append(f"<p><strong>Key metric:</strong> {link(structured.key_metric)}</p>")

    if structured.analysis:
        parts.append(f"<p>{escape(structured.analysis)}</p>")

    return "".join(parts)
