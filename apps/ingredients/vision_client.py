"""
Ingredient extraction from label photos.

Unlike the text path there is no fallback: an unreadable label must fail
the request instead of feeding invented names into the analysis.
"""

import logging
from io import BytesIO
from typing import Optional

import PIL.Image

from libs.llm_openai.chat_client import ChatCompletionClient, LLMError, build_image_data_url

from apps.ingredients.errors import InvalidInputError, VisionExtractionError
from apps.ingredients.postprocess import JsonKind, clean_extracted_ingredients, extract_json
from apps.ingredients.prompt_builder import VISION_SYSTEM_PROMPT, VISION_USER_INSTRUCTION

logger = logging.getLogger(__name__)

VISION_TEMPERATURE = 0.1
VISION_MAX_TOKENS = 400


def resolve_image_content_type(image_bytes: bytes, content_type: Optional[str]) -> str:
    """
    Check the upload decodes as an image and return its MIME type.

    The declared type is kept when it is an `image/*` type, otherwise the
    type sniffed by Pillow is used.
    """
    if not image_bytes:
        raise InvalidInputError("Image file is empty")

    try:
        with PIL.Image.open(BytesIO(image_bytes)) as img:
            sniffed = PIL.Image.MIME.get(img.format or "")
            img.verify()
    except (
        PIL.UnidentifiedImageError,
        PIL.Image.DecompressionBombError,
        OSError,
        SyntaxError,
    ) as e:
        raise InvalidInputError("Invalid image file or format") from e

    declared = (content_type or "").split(";")[0].strip().lower()
    if declared.startswith("image/"):
        return declared
    if not sniffed:
        raise InvalidInputError("Unsupported image format")
    return sniffed


class IngredientVisionExtractor:
    def __init__(self, client: ChatCompletionClient, model_name: Optional[str] = None):
        self.client = client
        self.model_name = model_name

    def extract_ingredients_from_image(
        self, image_bytes: bytes, content_type: Optional[str]
    ) -> str:
        """Return the label's ingredient names, comma joined."""
        mime = resolve_image_content_type(image_bytes, content_type)
        data_url = build_image_data_url(image_bytes, mime)

        try:
            content = self.client.complete(
                messages=[
                    {"role": "system", "content": VISION_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": VISION_USER_INSTRUCTION},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    },
                ],
                max_tokens=VISION_MAX_TOKENS,
                temperature=VISION_TEMPERATURE,
                model_name=self.model_name,
            )
            logger.debug("Vision extraction result: %s", content)
            ingredients = clean_extracted_ingredients(extract_json(content, JsonKind.ARRAY))
        except LLMError as e:
            logger.error("Vision extraction failed: %s", e, exc_info=True)
            raise VisionExtractionError(f"Failed to extract ingredients from image: {e}") from e

        if not ingredients:
            raise VisionExtractionError("Failed to extract ingredients from image: no ingredients found")
        return ingredients
