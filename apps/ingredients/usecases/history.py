from typing import List

from libs.auth_internal.user_directory import UserDirectory

from apps.ingredients.errors import UserNotFoundError
from apps.ingredients.repository import AnalysisRepository
from apps.ingredients.schemas import AnalysisRecord


class IngredientHistoryUsecase:
    def __init__(self, users: UserDirectory, repository: AnalysisRepository):
        self.users = users
        self.repository = repository

    def execute(self, user_id: str) -> List[AnalysisRecord]:
        """The user's analyses, newest first."""
        if self.users.get_user(user_id) is None:
            raise UserNotFoundError(user_id)
        records = self.repository.list_for_user(user_id)
        # reversed() keeps later appends first when timestamps tie
        return sorted(reversed(records), key=lambda r: r.analysis_date, reverse=True)
