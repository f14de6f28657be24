from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def clean_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value not in (None, "")}


class FilterSet:
    """Filter fields of one screen; blank values are kept locally but never sent."""

    def __init__(self, keys: Iterable[str], choices: Mapping[str, Iterable[str]] | None = None) -> None:
        self.keys = tuple(keys)
        self.choices = {key: frozenset(values) for key, values in (choices or {}).items()}
        self._values: dict[str, str] = {key: "" for key in self.keys}

    def set(self, key: str, value: str | None) -> bool:
        if key not in self._values:
            raise ValueError(f"Unknown filter {key!r}; expected one of {', '.join(self.keys) or 'none'}")
        normalized = (value or "").strip()
        allowed = self.choices.get(key)
        if normalized and allowed is not None and normalized not in allowed:
            raise ValueError(f"Invalid value for filter {key!r}: {normalized!r}")
        changed = self._values[key] != normalized
        self._values[key] = normalized
        return changed

    def get(self, key: str) -> str:
        return self._values[key]

    def reset(self) -> None:
        self._values = {key: "" for key in self.keys}

    def as_params(self) -> dict[str, str]:
        return clean_filters(self._values)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)
