"""
Ingredient Analyze Usecase.

Drives one analysis request: user lookup, LLM analysis (with fallback),
score derivation and persistence of a new AnalysisRecord.
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Optional

from libs.auth_internal.user_directory import UserDirectory

from apps.ingredients.errors import InvalidInputError, UserNotFoundError
from apps.ingredients.normalizer import split_raw_ingredients
from apps.ingredients.repository import AnalysisRepository
from apps.ingredients.schemas import AnalysisRecord
from apps.ingredients.text_client import IngredientTextAnalyzer
from apps.ingredients.vision_client import IngredientVisionExtractor

logger = logging.getLogger(__name__)


class IngredientAnalyzeUsecase:
    """Usecase for analyzing ingredient lists from text or label images."""

    def __init__(
        self,
        users: UserDirectory,
        repository: AnalysisRepository,
        text_analyzer: IngredientTextAnalyzer,
        vision_extractor: IngredientVisionExtractor,
    ):
        self.users = users
        self.repository = repository
        self.text_analyzer = text_analyzer
        self.vision_extractor = vision_extractor

    def _require_user(self, user_id: str) -> None:
        if self.users.get_user(user_id) is None:
            raise UserNotFoundError(user_id)

    def execute(
        self, user_id: str, ingredients_text: str, product_name: Optional[str] = None
    ) -> AnalysisRecord:
        if not ingredients_text or not ingredients_text.strip():
            raise InvalidInputError("Ingredients list cannot be empty")
        self._require_user(user_id)

        raw_ingredients = split_raw_ingredients(ingredients_text)
        result = self.text_analyzer.analyze_ingredients(ingredients_text)

        record = AnalysisRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            identified_ingredients=json.dumps(raw_ingredients, ensure_ascii=False),
            safety_analysis=result.model_dump_json(),
            safety_score=result.safety_score,
            product_name=product_name,
            analysis_date=datetime.now(),
        )
        saved = self.repository.save(record)
        logger.info(
            "Saved analysis %s for user=%s score=%.1f product=%s",
            saved.id, user_id, saved.safety_score, product_name,
        )
        return saved

    def execute_image(
        self,
        user_id: str,
        image_bytes: bytes,
        content_type: Optional[str],
        product_name: Optional[str] = None,
    ) -> AnalysisRecord:
        # Fail on unknown users before paying for the vision call
        self._require_user(user_id)
        ingredients_text = self.vision_extractor.extract_ingredients_from_image(
            image_bytes, content_type
        )
        return self.execute(user_id, ingredients_text, product_name)
