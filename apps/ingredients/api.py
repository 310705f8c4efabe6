import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from libs.auth_internal.user_directory import UserDirectory
from libs.llm_openai.chat_client import ChatCompletionClient
from libs.storage_lib import JsonlStorage

from apps.deps import require_user
from apps.settings import BackendSettings
from apps.ingredients.errors import (
    IngredientAnalysisError,
    InvalidInputError,
    PersistenceError,
    UserNotFoundError,
    VisionExtractionError,
)
from apps.ingredients.repository import AnalysisRepository
from apps.ingredients.schemas import AnalysisRecordView, IngredientAnalysisRequest
from apps.ingredients.text_client import IngredientTextAnalyzer
from apps.ingredients.usecases.analyze import IngredientAnalyzeUsecase
from apps.ingredients.usecases.history import IngredientHistoryUsecase
from apps.ingredients.vision_client import IngredientVisionExtractor

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    VisionExtractionError: status.HTTP_502_BAD_GATEWAY,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _to_http_error(e: IngredientAnalysisError) -> HTTPException:
    code = _ERROR_STATUS.get(type(e), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.error("Ingredient request failed: %s", e)
    return HTTPException(status_code=code, detail=str(e))


def build_ingredient_usecases(
    settings: BackendSettings,
) -> Tuple[IngredientAnalyzeUsecase, IngredientHistoryUsecase]:
    """Wire the default collaborators from settings."""
    users = UserDirectory(users_file=f"{settings.user_data_dir}/users.json")
    repository = AnalysisRepository(JsonlStorage(base_dir=settings.user_data_dir))
    client = ChatCompletionClient(settings.chat_client_config())

    analyze_uc = IngredientAnalyzeUsecase(
        users=users,
        repository=repository,
        text_analyzer=IngredientTextAnalyzer(client),
        vision_extractor=IngredientVisionExtractor(
            client, model_name=settings.llm_vision_model_name
        ),
    )
    history_uc = IngredientHistoryUsecase(users=users, repository=repository)
    return analyze_uc, history_uc


def build_ingredients_router(
    settings: BackendSettings,
    analyze_uc: Optional[IngredientAnalyzeUsecase] = None,
    history_uc: Optional[IngredientHistoryUsecase] = None,
) -> APIRouter:
    router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])
    current_user = require_user(settings)

    if analyze_uc is None or history_uc is None:
        default_analyze, default_history = build_ingredient_usecases(settings)
        analyze_uc = analyze_uc or default_analyze
        history_uc = history_uc or default_history

    @router.post("/analyze", response_model=AnalysisRecordView)
    def analyze_ingredients(
        req: IngredientAnalysisRequest,
        user_id: str = Depends(current_user),
    ):
        try:
            record = analyze_uc.execute(
                user_id=user_id,
                ingredients_text=req.ingredients,
                product_name=req.productName,
            )
        except IngredientAnalysisError as e:
            raise _to_http_error(e) from e
        return AnalysisRecordView.from_record(record)

    @router.post("/analyze-image", response_model=AnalysisRecordView)
    async def analyze_ingredients_image(
        image: UploadFile = File(...),
        productName: Optional[str] = Form(default=None),
        user_id: str = Depends(current_user),
    ):
        image_bytes = await image.read()
        logger.info("Received label image for user=%s product=%s", user_id, productName)
        try:
            record = await run_in_threadpool(
                analyze_uc.execute_image,
                user_id,
                image_bytes,
                image.content_type,
                productName,
            )
        except IngredientAnalysisError as e:
            raise _to_http_error(e) from e
        return AnalysisRecordView.from_record(record)

    @router.get("/history", response_model=List[AnalysisRecordView])
    def analysis_history(user_id: str = Depends(current_user)):
        try:
            records = history_uc.execute(user_id=user_id)
        except IngredientAnalysisError as e:
            raise _to_http_error(e) from e
        return [AnalysisRecordView.from_record(r) for r in records]

    return router
