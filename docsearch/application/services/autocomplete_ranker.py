"""Relevance ordering for autocomplete suggestions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from docsearch.application.dtos.search import AutocompleteCandidate

T = TypeVar("T", str, AutocompleteCandidate)


def _text(candidate: str | AutocompleteCandidate) -> str:
    return candidate.text if isinstance(candidate, AutocompleteCandidate) else candidate


class AutocompleteRanker:
    """Orders suggestions by how well they match the typed prefix.

    Accepts AutocompleteCandidate objects (ranked on ``text``) or plain
    strings. Case-insensitive:
    1. Values starting with the prefix come before those that do not.
    2. Among values starting with the prefix, shorter first.
    3. Remaining values in lexicographic order.

    The sort is stable, so equal keys keep input order and ranking a ranked
    list returns it unchanged.
    """

    @staticmethod
    def _key(prefix: str):
        needle = prefix.strip().lower()

        def key(candidate: str | AutocompleteCandidate) -> tuple[int, int, str]:
            text = _text(candidate)
            lowered = text.lower()
            if lowered.startswith(needle):
                return (0, len(text), lowered)
            return (1, 0, lowered)

        return key

    def rank(self, candidates: Iterable[T], prefix: str) -> list[T]:
        return sorted(candidates, key=self._key(prefix))
