ALLOWED_MOTIVATIONS = (
    "Ambition",
    "Competitive spirit",
    "Righteousness",
    "Moral outrage",
    "Loyalty",
    "Pride",
    "Determination",
    "Fear",
    "Greed",
    "Power",
    "Control",
    "Revenge",
    "Justice",
    "Self-preservation",
    "Recognition",
    "Legacy",
    "Influence",
    "Security",
    "Freedom",
    "Unity",
    "Professional pride",
    "Duty",
    "Curiosity",
    "Enthusiasm",
    "Wariness",
    "Anxiety",
    "Self-respect",
    "Obligation",
    "Indignation",
)

ANALYSIS_INSTRUCTIONS = """As a social scientist, analyze this article comprehensively for both content analysis and media assessment.

Instructions:
1. Identify each entity (person, organization, institution) mentioned in the article
2. For each entity, select their top 2-3 motivations from the allowed list
3. Choose the most relevant US performance metric this article impacts
4. Provide analysis of how this affects that metric
5. Assess the article's credibility, bias, sentiment, and authoritarianism risk

Use ONLY motivations from this list: {allowed_motivations}

CREDIBILITY SCORING (0-100):
- 0-20: Intentional deceit, false information, propaganda
- 21-40: Highly questionable sources, unverified claims
- 41-60: Mixed reliability, some factual issues
- 61-80: Generally reliable with minor issues
- 81-100: Highly credible, well-sourced, factual

BIAS RATING (0-100):
- 0-20: Extreme Left
- 21-40: Lean Left
- 41-60: Center
- 61-80: Lean Right
- 81-100: Extreme Right

SENTIMENT SCORING (0-100):
- 0-20: Very negative, doom, crisis
- 21-40: Negative, critical, pessimistic
- 41-60: Neutral, balanced reporting
- 61-80: Positive, optimistic, hopeful
- 81-100: Very positive, celebratory, triumphant

AUTHORITARIANISM RISK SCORING (0-100):
- 0-20: Strongly promotes democratic values, transparency, accountability
- 21-40: Generally democratic with minor authoritarian elements
- 41-60: Mixed democratic/authoritarian signals or neutral
- 61-80: Shows authoritarian tendencies, power consolidation themes
- 81-100: Promotes totalitarian ideas, suppression of dissent, elimination of checks/balances

Return your response as valid JSON in this exact format:

{{
  "entities": [
    {{
      "name": "Entity Name",
      "motivations": ["Motivation1", "Motivation2", "Motivation3"]
    }}
  ],
  "key_metric": "Specific Metric Name",
  "analysis": "As a social scientist, I analyze that [your detailed analysis].",
  "credibility_score": 75,
  "bias_rating": 45,
  "bias_analysis": "Two-line explanation of why this bias rating was selected based on language, framing, and source presentation.",
  "sentiment_score": 35,
  "authoritarianism_score": 25
}}

IMPORTANT: Return ONLY the JSON object, no other text or formatting.

Article Title: {title}

Article Text: {text}"""


def build_analysis_prompt(title: str, text: str) -> str:
    return ANALYSIS_INSTRUCTIONS.format(
        allowed_motivations=", ".join(ALLOWED_MOTIVATIONS),
        title=title or "",
        text=text or "",
    )
