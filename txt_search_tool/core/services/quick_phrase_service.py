"""Quick phrase service - saved search keywords."""

import logging

from ..protocols.preference_store import PreferenceStoreProtocol

logger = logging.getLogger(__name__)


class QuickPhraseService:
    """Ordered, de-duplicated list of phrases kept in the preference store."""

    def __init__(self, store: PreferenceStoreProtocol):
        self._store = store

    def phrases(self) -> list[str]:
        return self._store.load_list()

    def add(self, phrase: str) -> list[str]:
        """Append a phrase unless it is blank or already saved."""
        phrase = phrase.strip()
        phrases = self._store.load_list()
        if not phrase or phrase in phrases:
            return phrases

        phrases.append(phrase)
        self._store.save_list(phrases)
        logger.info(f"Quick phrase added: '{phrase}'")
        return phrases

    def remove(self, phrase: str) -> list[str]:
        phrases = [p for p in self._store.load_list() if p != phrase]
        self._store.save_list(phrases)
        return phrases

    def clear(self) -> None:
        self._store.clear()
        logger.info("Quick phrases cleared")
