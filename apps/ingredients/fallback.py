from typing import Optional

from apps.ingredients.normalizer import split_raw_ingredients
from apps.ingredients.schemas import Classification, IngredientVerdict, StructuredAnalysisResult

FALLBACK_REASON = "Unable to analyze - service unavailable"
FALLBACK_SUMMARY = "Analysis unavailable due to service error. Please try again later."
FALLBACK_RATING = 5


def build_fallback_result(ingredients_text: Optional[str]) -> StructuredAnalysisResult:
    """Deterministic degraded result: every raw token is Neutral, rating 5."""
    verdicts = [
        IngredientVerdict(
            name=token.strip(),
            classification=Classification.NEUTRAL,
            reason=FALLBACK_REASON,
        )
        for token in split_raw_ingredients(ingredients_text)
    ]
    return StructuredAnalysisResult(
        ingredients=verdicts,
        overall_rating=FALLBACK_RATING,
        summary=FALLBACK_SUMMARY,
    )
