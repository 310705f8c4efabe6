import json
import logging
from pathlib import Path
from typing import Any, Dict

from .project_paths import get_project_root

logger = logging.getLogger(__name__)


def load_root_config() -> Dict[str, Any]:
    """
    Load `config.json` from the project root (independent of the working directory).

    Note:
    - precedence (environment > .env > config.json) is the caller's job
    """
    return load_json(get_project_root() / "config.json")


def load_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}
