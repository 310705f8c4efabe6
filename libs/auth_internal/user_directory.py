import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class UserDirectory:
    """
    File-backed registry of known users.

    Reads `user_data/users.json`:

        {"users": {"alice": {"email": "alice@example.com"}}}

    Analysis code only looks users up; provisioning goes through `add_user`
    (or editing the file and calling `reload`).
    """

    def __init__(self, users_file: Path):
        self.users_file = Path(users_file)
        self._users: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self.reload()

    def reload(self) -> None:
        """Reload the registry from disk. A missing file means no users."""
        if not self.users_file.exists():
            logger.warning("User directory file not found at %s, starting empty", self.users_file)
            self._users = {}
            return

        with open(self.users_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        users = data.get("users", {}) if isinstance(data, dict) else {}
        self._users = {str(k): dict(v or {}) for k, v in users.items()}
        logger.info("Loaded %s users from %s", len(self._users), self.users_file)

    def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        if not username:
            return None
        user = self._users.get(username)
        if user is None:
            return None
        return {"username": username, **user}

    def add_user(self, username: str, **attrs: Any) -> Dict[str, Any]:
        username = (username or "").strip()
        if not username:
            raise ValueError("username must not be blank")

        with self._lock:
            self._users[username] = dict(attrs)
            self.users_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.users_file.with_suffix(".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({"users": self._users}, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.users_file)

        return {"username": username, **attrs}
