"""Data models for analyze_content pipeline stage."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

SCORE_FIELDS = (
    "credibility_score",
    "bias_rating",
    "sentiment_score",
    "authoritarianism_score",
)


@dataclass
class EntityMotivation:
    """An entity named in the article and the motivations attributed to it."""
    name: str
    motivations: list[str] = field(default_factory=list)


@dataclass
class StructuredAnalysis:
    """Parsed AI analysis. Every field may be missing."""
    entities: list[EntityMotivation] = field(default_factory=list)
    key_metric: str | None = None
    analysis: str | None = None
    credibility_score: int | None = None
    bias_rating: int | None = None
    bias_analysis: str | None = None
    sentiment_score: int | None = None
    authoritarianism_score: int | None = None

    @property
    def motivations(self) -> list[str]:
        """Unique motivations across all entities, in first-seen order."""
        seen: dict[str, None] = {}
        for entity in self.entities:
            for motivation in entity.motivations:
                seen.setdefault(motivation, None)
        return list(seen)

    @property
    def scores(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in SCORE_FIELDS if getattr(self, name) is not None}

    def is_empty(self) -> bool:
        return not (self.entities or self.key_metric or self.analysis or self.bias_analysis or self.scores)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StructuredAnalysis:
        """Rebuild from the stored JSON form."""
        if not data:
            return cls()
        entities = [
            EntityMotivation(name=e.get("name", ""), motivations=list(e.get("motivations") or []))
            for e in data.get("entities") or []
            if isinstance(e, dict)
        ]
        return cls(
            entities=entities,
            key_metric=data.get("key_metric"),
            analysis=data.get("analysis"),
            credibility_score=data.get("credibility_score"),
            bias_rating=data.get("bias_rating"),
            bias_analysis=data.get("bias_analysis"),
            sentiment_score=data.get("sentiment_score"),
            authoritarianism_score=data.get("authoritarianism_score"),
        )
