"""
Ingredient text analysis against the chat-completion model.

The text path always answers: any failure degrades to the fallback result.
"""

import logging

from libs.llm_openai.chat_client import ChatCompletionClient

from apps.ingredients.fallback import build_fallback_result
from apps.ingredients.normalizer import normalize_ingredients
from apps.ingredients.postprocess import JsonKind, extract_json, parse_analysis_result
from apps.ingredients.prompt_builder import TEXT_SYSTEM_PROMPT, build_ingredient_prompt
from apps.ingredients.schemas import StructuredAnalysisResult

logger = logging.getLogger(__name__)

TEXT_MAX_TOKENS = 2000


class IngredientTextAnalyzer:
    def __init__(self, client: ChatCompletionClient):
        self.client = client

    def analyze_ingredients(self, ingredients_text: str) -> StructuredAnalysisResult:
        try:
            prompt = build_ingredient_prompt(normalize_ingredients(ingredients_text))
            content = self.client.complete(
                messages=[
                    {"role": "system", "content": TEXT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=TEXT_MAX_TOKENS,
            )
            logger.debug("Ingredient analysis raw content: %s", content)
            return parse_analysis_result(extract_json(content, JsonKind.OBJECT))
        # pylint: disable=broad-exception-caught
        except Exception as e:
            logger.warning("Ingredient analysis failed, using fallback: %s", e, exc_info=True)
            return build_fallback_result(ingredients_text)
