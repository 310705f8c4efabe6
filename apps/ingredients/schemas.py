from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class Classification(str, Enum):
    GOOD = "Good"
    BAD = "Bad"
    NEUTRAL = "Neutral"
    # Anything the model returns outside the instructed set
    UNKNOWN = "Unknown"


_CLASSIFICATION_LOOKUP = {c.value.lower(): c for c in Classification}


class IngredientVerdict(BaseModel):
    name: str
    classification: Classification = Classification.UNKNOWN
    reason: str = ""

    @field_validator("classification", mode="before")
    @classmethod
    def _coerce_classification(cls, v: Any) -> Classification:
        if isinstance(v, Classification):
            return v
        return _CLASSIFICATION_LOOKUP.get(str(v or "").strip().lower(), Classification.UNKNOWN)

    @field_validator("reason", mode="before")
    @classmethod
    def _none_reason(cls, v: Any) -> Any:
        return "" if v is None else v


class StructuredAnalysisResult(BaseModel):
    """Per-ingredient verdicts plus the overall 1-10 rating, as returned by the model."""

    ingredients: List[IngredientVerdict]
    overall_rating: int = Field(..., ge=1, le=10)
    summary: str = ""

    @property
    def safety_score(self) -> float:
        return self.overall_rating / 10.0


class AnalysisRecord(BaseModel):
    """Persisted result of one analysis request. Never updated after creation."""

    id: str
    user_id: str
    # JSON array text of the raw comma split
    identified_ingredients: str
    # JSON object text of the StructuredAnalysisResult
    safety_analysis: str
    safety_score: float = Field(..., ge=0.0, le=1.0)
    product_name: Optional[str] = None
    analysis_date: datetime


# --- HTTP views ---

class IngredientAnalysisRequest(BaseModel):
    ingredients: str
    productName: Optional[str] = None


class AnalysisRecordView(BaseModel):
    id: str
    username: str
    identifiedIngredients: str
    safetyAnalysis: str
    safetyScore: float
    analysisDate: str
    productName: Optional[str] = None

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "AnalysisRecordView":
        return cls(
            id=record.id,
            username=record.user_id,
            identifiedIngredients=record.identified_ingredients,
            safetyAnalysis=record.safety_analysis,
            safetyScore=record.safety_score,
            analysisDate=record.analysis_date.strftime("%Y-%m-%d %H:%M:%S"),
            productName=record.product_name,
        )
