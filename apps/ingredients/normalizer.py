from typing import List, Optional

MAX_PROMPT_ITEMS = 150
MAX_PROMPT_CHARS = 8000


def normalize_ingredients(
    raw: Optional[str],
    max_items: int = MAX_PROMPT_ITEMS,
    max_chars: int = MAX_PROMPT_CHARS,
) -> str:
    """
    Clean a comma separated ingredient string for prompting.

    Tokens are trimmed, lowercased and de-duplicated in first-seen order,
    capped at `max_items`, then re-joined with ", ". A joined string longer
    than `max_chars` is hard-cut, which may split the last name.
    """
    if not raw:
        return ""

    seen = set()
    items: List[str] = []
    for part in raw.split(","):
        if len(items) >= max_items:
            break
        token = part.strip().lower()
        if not token or token in seen:
            continue
        seen.add(token)
        items.append(token)

    joined = ", ".join(items)
    return joined[:max_chars]


def split_raw_ingredients(text: Optional[str]) -> List[str]:
    """Verbatim comma split, as stored on the record."""
    return (text or "").split(",")
