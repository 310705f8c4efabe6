"""Shared pytest fixtures: stub chat client, temp user store, wired usecases."""

from io import BytesIO
from typing import Any, Dict, List, Optional

import PIL.Image
import pytest

from libs.auth_internal.user_directory import UserDirectory
from libs.storage_lib import JsonlStorage

from apps.ingredients.repository import AnalysisRepository
from apps.ingredients.text_client import IngredientTextAnalyzer
from apps.ingredients.usecases.analyze import IngredientAnalyzeUsecase
from apps.ingredients.usecases.history import IngredientHistoryUsecase
from apps.ingredients.vision_client import IngredientVisionExtractor


class StubChatClient:
    """Stands in for ChatCompletionClient: replays queued replies, records calls."""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    def queue(self, reply: Any) -> None:
        self.replies.append(reply)

    def complete(self, messages, max_tokens, temperature=None, model_name=None) -> str:
        self.calls.append(
            {
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "model_name": model_name,
            }
        )
        if not self.replies:
            raise AssertionError("StubChatClient has no queued reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_png_bytes() -> bytes:
    buf = BytesIO()
    PIL.Image.new("RGB", (8, 8), color=(240, 240, 240)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def chat_client() -> StubChatClient:
    return StubChatClient()


@pytest.fixture
def user_dir(tmp_path):
    return tmp_path / "user_data"


@pytest.fixture
def users(user_dir) -> UserDirectory:
    directory = UserDirectory(users_file=user_dir / "users.json")
    directory.add_user("alice", email="alice@example.com")
    return directory


@pytest.fixture
def repository(user_dir) -> AnalysisRepository:
    return AnalysisRepository(JsonlStorage(base_dir=str(user_dir)))


@pytest.fixture
def analyze_uc(users, repository, chat_client) -> IngredientAnalyzeUsecase:
    return IngredientAnalyzeUsecase(
        users=users,
        repository=repository,
        text_analyzer=IngredientTextAnalyzer(chat_client),
        vision_extractor=IngredientVisionExtractor(chat_client, model_name="vision-model"),
    )


@pytest.fixture
def history_uc(users, repository) -> IngredientHistoryUsecase:
    return IngredientHistoryUsecase(users=users, repository=repository)
