import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

QUICK_PHRASES_KEY = "quick_phrases"
SEPARATOR = "||"


class JsonPreferenceStore:
    """Preferences kept as string values in one JSON object file."""

    def __init__(self, path: str = "txt_search_tool_prefs.json"):
        """Initialize store.

        Args:
            path: Preferences file; created on first write.
        """
        self._path = Path(path)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}

        with open(self._path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning(f"Preferences {self._path} unreadable, starting empty: {e}")
                return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def load_list(self) -> list[str]:
        joined = self._read().get(QUICK_PHRASES_KEY, "")
        if not joined:
            return []
        return [item for item in joined.split(SEPARATOR) if item.strip()]

    def save_list(self, items: list[str]) -> None:
        data = self._read()
        data[QUICK_PHRASES_KEY] = SEPARATOR.join(items)
        self._write(data)

    def clear(self) -> None:
        data = self._read()
        if data.pop(QUICK_PHRASES_KEY, None) is not None:
            self._write(data)

    def load_scalar(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def save_scalar(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
