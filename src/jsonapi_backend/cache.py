from __future__ import annotations

from typing import Any, Optional

__all__ = ['DeserializationCache']


class DeserializationCache:
    """
    Table of already deserialized models for a single deserialization call, keyed by (type, id).

    A model is stored before its relationships are resolved, so a relationship cycle that
    leads back to it gets the same (partially filled) object instead of recursing forever.
    Use one instance per top-level call.
    """
    def __init__(self):
        self._cache: dict[tuple[str, str], Any] = {}

    def __repr__(self):
        return f'DeserializationCache(size={len(self._cache)})'

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._cache

    def set(self, type_: str, id_: str, model: Any) -> None:
        self._cache[(type_, id_)] = model

    def get(self, type_: str, id_: str) -> Optional[Any]:
        """
        :return: Cached model, or None on a miss
        """
        return self._cache.get((type_, id_))

    def clear(self) -> None:
        self._cache.clear()
