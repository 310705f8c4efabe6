import logging
from typing import List

from pydantic import ValidationError

from libs.storage_lib import JsonlStorage

from apps.ingredients.errors import PersistenceError
from apps.ingredients.schemas import AnalysisRecord

logger = logging.getLogger(__name__)

CATEGORY = "ingredients"
ANALYSES_FILE = "analyses.jsonl"


class AnalysisRepository:
    """AnalysisRecord persistence, one JSONL line per record under the owner's directory."""

    def __init__(self, storage: JsonlStorage):
        self.storage = storage

    def save(self, record: AnalysisRecord) -> AnalysisRecord:
        try:
            self.storage.append(
                user_id=record.user_id,
                category=CATEGORY,
                filename=ANALYSES_FILE,
                data=record.model_dump(mode="json"),
            )
        except OSError as e:
            raise PersistenceError(f"Failed to save analysis {record.id}: {e}") from e
        return record

    def list_for_user(self, user_id: str) -> List[AnalysisRecord]:
        try:
            rows = self.storage.read_all(user_id=user_id, category=CATEGORY, filename=ANALYSES_FILE)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read analyses for {user_id}: {e}") from e

        records: List[AnalysisRecord] = []
        for row in rows:
            try:
                records.append(AnalysisRecord.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping invalid analysis row for %s: %s", user_id, e)
        return records
