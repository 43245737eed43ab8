# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""The ``@context`` value, which may be a single string or a list of strings."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from .types import DIDErrorKind, DocumentShapeError

_FIELD = "@context"


class Context:
    """Zero, one or many context URIs.

    Only the number of entries is remembered, not the JSON shape they came
    from: one entry always encodes as a bare string, two or more as an array,
    and an empty context is omitted altogether.
    """

    __slots__ = ("_uris",)

    def __init__(self, uris: Iterable[str] = ()) -> None:
        self._uris = tuple(uris)

    @classmethod
    def from_json(cls, value: Any) -> "Context":
        """Decode a JSON string or array of strings.

        Raises
        ------
        DocumentShapeError
            If *value* is neither, or the array holds a non-string.
        """
        if isinstance(value, str):
            return cls((value,))
        if isinstance(value, list):
            for item in value:
                if not isinstance(item, str):
                    raise DocumentShapeError(
                        DIDErrorKind.INVALID_VALUE,
                        _FIELD,
                        f"array entries must be strings, got {type(item).__name__}",
                    )
            return cls(value)
        raise DocumentShapeError(
            DIDErrorKind.INVALID_VALUE,
            _FIELD,
            f"expected string or array of strings, got {type(value).__name__}",
        )

    def to_json(self) -> str | list[str] | None:
        """Encode for JSON; ``None`` means the property should be omitted."""
        if not self._uris:
            return None
        if len(self._uris) == 1:
            return self._uris[0]
        return list(self._uris)

    def is_missing(self) -> bool:
        return not self._uris

    def as_list(self) -> list[str]:
        return list(self._uris)

    def __len__(self) -> int:
        return len(self._uris)

    def __iter__(self) -> Iterator[str]:
        return iter(self._uris)

    def __getitem__(self, index: int) -> str:
        return self._uris[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Context):
            return self._uris == other._uris
        if isinstance(other, str):
            return self._uris == (other,)
        if isinstance(other, list):
            return self._uris == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        # A single entry equals its bare string, so it must hash like one.
        if len(self._uris) == 1:
            return hash(self._uris[0])
        return hash(self._uris)

    def __repr__(self) -> str:
        return f"Context({list(self._uris)!r})"
