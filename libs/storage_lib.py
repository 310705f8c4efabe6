"""
JSONL Storage Library.

Provides a simple append-only JSONL storage mechanism for per-user data.
Each user gets a directory, each dataset is one `.jsonl` file inside a
category folder, e.g. `user_data/alice/ingredients/analyses.jsonl`.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class JsonlStorage:
    """
    Append-only JSONL store keyed by user and category.

    Appends rely on the OS appending a single short write atomically, which
    is enough for one record per request.
    """

    def __init__(self, base_dir: str = "user_data"):
        self.base_dir = Path(base_dir)

    def _get_user_dir(self, user_id: str, category: str) -> Path:
        """Return the per-user category directory, e.g. user_data/alice/ingredients."""
        path = self.base_dir / user_id / category
        path.mkdir(parents=True, exist_ok=True)
        return path

    def append(
        self, user_id: str, category: str, filename: str, data: Dict[str, Any]
    ) -> str:
        """
        Append one record.

        :param category: e.g. "ingredients"
        :param filename: e.g. "analyses.jsonl"
        :param data: JSON-serialisable dict
        :return: absolute path written to
        """
        file_path = self._get_user_dir(user_id, category) / filename

        if "created_at" not in data:
            data["created_at"] = datetime.now().isoformat()

        line = json.dumps(data, ensure_ascii=False)
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

        return str(file_path)

    def read_all(self, user_id: str, category: str, filename: str) -> List[Dict[str, Any]]:
        """Read every record in file order (oldest append first)."""
        file_path = self.base_dir / user_id / category / filename
        if not file_path.exists():
            return []

        # If open() fails on permissions we want to know about it.
        with open(file_path, "r", encoding="utf-8") as f:
            lines = f.readlines()

        data: List[Dict[str, Any]] = []
        for lineno, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                item = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed line %s in %s", lineno, file_path)
                continue
            if isinstance(item, dict):
                data.append(item)
        return data

