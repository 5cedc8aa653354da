"""Bucket labels for the 0-100 assessment scores."""

from __future__ import annotations

# Upper bound (inclusive) -> label, per score
SCORE_BUCKETS = {
    "credibility_score": (
        (20, "Intentional deceit"),
        (40, "Highly questionable"),
        (60, "Mixed reliability"),
        (80, "Generally reliable"),
        (100, "Highly credible"),
    ),
    "bias_rating": (
        (20, "Extreme Left"),
        (40, "Lean Left"),
        (60, "Center"),
        (80, "Lean Right"),
        (100, "Extreme Right"),
    ),
    "sentiment_score": (
        (20, "Very negative"),
        (40, "Negative"),
        (60, "Neutral"),
        (80, "Positive"),
        (100, "Very positive"),
    ),
    "authoritarianism_score": (
        (20, "Strongly democratic"),
        (40, "Generally democratic"),
        (60, "Mixed signals"),
        (80, "Authoritarian tendencies"),
        (100, "Totalitarian"),
    ),
}

SCORE_TITLES = {
    "credibility_score": "Credibility Score",
    "bias_rating": "Bias Rating",
    "sentiment_score": "Sentiment Score",
    "authoritarianism_score": "Authoritarianism Risk",
}


def score_label(field: str, score: int) -> str:
    buckets = SCORE_BUCKETS[field]
    for upper, label in buckets:
        if score <= upper:
            return label
    return buckets[-1][1]
