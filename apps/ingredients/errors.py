"""
Ingredient analysis error taxonomy.

LLM boundary failures (`LLMTransportError`, `LLMMalformedOutputError`) live
in `libs.llm_openai.chat_client`; the text path absorbs them, the vision
path wraps them in `VisionExtractionError`.
"""


class IngredientAnalysisError(Exception):
    """Base class for errors surfaced to the HTTP layer."""


class UserNotFoundError(IngredientAnalysisError):
    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class InvalidInputError(IngredientAnalysisError):
    """Request rejected before any LLM call."""


class VisionExtractionError(IngredientAnalysisError):
    """Ingredient names could not be read from the uploaded image."""


class PersistenceError(IngredientAnalysisError):
    """Reading or writing analysis records failed."""
