# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""DID URI parsing and rendering.

Grammar, matched left to right with no backtracking across components::

    uri      := "did:" method ":" id path? params? query? fragment?
    method   := [a-z0-9]+
    id       := [A-Za-z0-9._:-]*
    path     := ("/" segment)+
    params   := (";" token ("=" token)?)+
    query    := "?" item ("&" item)*        item := key "=" value
    fragment := "#" [^:#\\[\\]]+
    relative := path? params? query? fragment?     (at least one of them)

A character a component does not accept simply ends that component. The
whole input must be consumed, so anything left over (including a component
that appears out of order) makes the string invalid. ``relative`` is only
accepted by :func:`parse_did_reference`.
"""

from __future__ import annotations

import logging
import string
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .types import InvalidDIDUriError, UnsupportedDIDMethodError

logger = logging.getLogger(__name__)

_ALNUM = frozenset(string.ascii_letters + string.digits)
_METHOD_CHARS = frozenset(string.ascii_lowercase + string.digits)
_ID_CHARS = _ALNUM | frozenset("._-:")
_PATH_CHARS = _ALNUM | frozenset("_-%:@!$&'().*+,")
_PARAM_CHARS = _ALNUM | frozenset("%.-_:")
_QUERY_EXCLUDED = frozenset("&=:#[]")
_FRAGMENT_EXCLUDED = frozenset(":#[]")

_PREFIX = "did:"


@dataclass(frozen=True, eq=False)
class Uri:
    """A parsed DID URI.

    ``path`` is a tuple and ``params``/``query`` are read-only mappings kept
    sorted by key, so a ``Uri`` can be hashed and rendering is deterministic.
    Empty collections and an empty fragment are normalised to ``None``; they
    cannot be written back in a form that parses again.

    ``Uri()`` is the empty identifier: it renders to ``""`` and stands for
    "no identifier" rather than a parse failure. A value with no method but
    with a path, params, query or fragment is a relative DID URL such as
    ``#keys-1``; see :func:`parse_did_reference`.

    Raises
    ------
    ValueError
        If a component holds characters its grammar rule does not accept,
        or an ``id`` is given without a ``method``.
    """

    method: str = ""
    id: str = ""
    path: tuple[str, ...] | None = None
    params: Mapping[str, str] | None = None
    query: Mapping[str, str] | None = None
    fragment: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path) if self.path else None)
        object.__setattr__(self, "params", _frozen_map(self.params))
        object.__setattr__(self, "query", _frozen_map(self.query))
        object.__setattr__(self, "fragment", self.fragment or None)
        problem = _invalid_component(self)
        if problem is not None:
            raise ValueError(f"Uri: {problem}")

    @classmethod
    def parse(cls, value: str | bytes) -> "Uri":
        """Parse *value*; see :func:`parse_did_uri`."""
        return parse_did_uri(value)

    @property
    def did(self) -> str:
        """The bare ``did:<method>:<id>`` without path, params, query or fragment."""
        if not self.method:
            return ""
        return f"{_PREFIX}{self.method}:{self.id}"

    def is_empty(self) -> bool:
        return not any(self._fields())

    def is_relative(self) -> bool:
        return not self.method and not self.is_empty()

    def __str__(self) -> str:
        return render_did_uri(self)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return str(self) == other
        if not isinstance(other, Uri):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash(str(self))

    def _fields(self) -> tuple:
        return (self.method, self.id, self.path, self.params, self.query, self.fragment)


def _frozen_map(mapping: Mapping[str, str] | None) -> Mapping[str, str] | None:
    if not mapping:
        return None
    return MappingProxyType(dict(sorted(mapping.items())))


def _invalid_component(uri: Uri) -> str | None:
    """Describe the first component that would not render to parseable text."""
    if uri.id and not uri.method:
        return f"id {uri.id!r} given without a method"
    if not _METHOD_CHARS.issuperset(uri.method):
        return f"invalid method {uri.method!r}"
    if not _ID_CHARS.issuperset(uri.id):
        return f"invalid id {uri.id!r}"
    for segment in uri.path or ():
        if not segment or not _PATH_CHARS.issuperset(segment):
            return f"invalid path segment {segment!r}"
    for key, value in (uri.params or {}).items():
        # A param value may be empty; it renders as the bare key.
        if not key or not _PARAM_CHARS.issuperset(key) or not _PARAM_CHARS.issuperset(value):
            return f"invalid param {key!r}={value!r}"
    for key, value in (uri.query or {}).items():
        if not key or not value or not _QUERY_EXCLUDED.isdisjoint(key + value):
            return f"invalid query item {key!r}={value!r}"
    if uri.fragment is not None and not _FRAGMENT_EXCLUDED.isdisjoint(uri.fragment):
        return f"invalid fragment {uri.fragment!r}"
    return None


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


class _Scanner:
    """Cursor over the input text.

    Every matcher either consumes what it matched or leaves ``pos`` where it
    was, so callers can restore a saved mark when a component is incomplete.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def char(self, expected: str) -> bool:
        if self.text.startswith(expected, self.pos):
            self.pos += len(expected)
            return True
        return False

    def take_while(self, accept: Callable[[str], bool]) -> str:
        start = self.pos
        end = len(self.text)
        while self.pos < end and accept(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def take_while1(self, accept: Callable[[str], bool]) -> str | None:
        return self.take_while(accept) or None


def _is_query_char(char: str) -> bool:
    return char not in _QUERY_EXCLUDED


def _is_fragment_char(char: str) -> bool:
    return char not in _FRAGMENT_EXCLUDED


def _parse_path(scanner: _Scanner) -> list[str] | None:
    segments: list[str] = []
    while True:
        mark = scanner.pos
        if not scanner.char("/"):
            break
        segment = scanner.take_while1(_PATH_CHARS.__contains__)
        if segment is None:
            scanner.pos = mark
            break
        segments.append(segment)
    return segments or None


def _parse_params(scanner: _Scanner) -> dict[str, str] | None:
    params: dict[str, str] = {}
    while True:
        mark = scanner.pos
        if not scanner.char(";"):
            break
        key = scanner.take_while1(_PARAM_CHARS.__contains__)
        if key is None:
            scanner.pos = mark
            break
        value = ""
        before_value = scanner.pos
        if scanner.char("="):
            value = scanner.take_while1(_PARAM_CHARS.__contains__)
            if value is None:
                scanner.pos = before_value
                value = ""
        # Later occurrences overwrite earlier ones.
        params[key] = value
    return params or None


def _parse_query_item(scanner: _Scanner) -> tuple[str, str] | None:
    mark = scanner.pos
    key = scanner.take_while1(_is_query_char)
    if key is not None and scanner.char("="):
        value = scanner.take_while1(_is_query_char)
        if value is not None:
            return key, value
    scanner.pos = mark
    return None


def _parse_query(scanner: _Scanner) -> dict[str, str] | None:
    start = scanner.pos
    if not scanner.char("?"):
        return None
    query: dict[str, str] = {}
    matched = 0
    while True:
        mark = scanner.pos
        if matched and not scanner.char("&"):
            break
        item = _parse_query_item(scanner)
        if item is None:
            scanner.pos = mark
            break
        key, value = item
        query[key] = value
        matched += 1
    if not matched:
        scanner.pos = start
        return None
    return query


def _parse_fragment(scanner: _Scanner) -> str | None:
    mark = scanner.pos
    if not scanner.char("#"):
        return None
    fragment = scanner.take_while1(_is_fragment_char)
    if fragment is None:
        scanner.pos = mark
    return fragment


def _decode(value: str | bytes) -> str:
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidDIDUriError(value) from exc
    return value


def _parse_components(scanner: _Scanner) -> dict:
    return {
        "path": _parse_path(scanner),
        "params": _parse_params(scanner),
        "query": _parse_query(scanner),
        "fragment": _parse_fragment(scanner),
    }


def parse_did_uri(value: str | bytes) -> Uri:
    """Parse a DID URI into a :class:`Uri`.

    Parameters
    ----------
    value:
        The DID URI text. ``bytes`` are decoded as UTF-8. The zero-length
        string yields the empty identifier.

    Returns
    -------
    Uri

    Raises
    ------
    InvalidDIDUriError
        For any grammar violation. The error does not say which rule failed.
    """
    text = _decode(value)
    if text == "":
        return Uri()

    scanner = _Scanner(text)
    if not scanner.char(_PREFIX):
        logger.debug(f"DID URI rejected, missing {_PREFIX!r} prefix: {text!r}")
        raise InvalidDIDUriError(value)

    method = scanner.take_while1(_METHOD_CHARS.__contains__)
    if method is None or not scanner.char(":"):
        logger.debug(f"DID URI rejected, bad method at offset {scanner.pos}: {text!r}")
        raise InvalidDIDUriError(value)

    method_specific_id = scanner.take_while(_ID_CHARS.__contains__)
    components = _parse_components(scanner)

    if not scanner.at_end():
        logger.debug(f"DID URI rejected, unparsed input at offset {scanner.pos}: {text!r}")
        raise InvalidDIDUriError(value)

    return Uri(method=method, id=method_specific_id, **components)


def parse_did_reference(value: str | bytes) -> Uri:
    """Parse a DID URI or a relative DID URL.

    A relative DID URL drops the ``did:<method>:<id>`` part and starts with
    a path, params, query or fragment, e.g. ``#keys-1``. It is resolved
    against the document subject by whoever consumes it, not here.

    Raises
    ------
    InvalidDIDUriError
        If *value* is neither a DID URI nor a relative DID URL.
    """
    text = _decode(value)
    if text == "" or text.startswith(_PREFIX):
        return parse_did_uri(value)

    scanner = _Scanner(text)
    components = _parse_components(scanner)
    if not scanner.at_end() or not any(components.values()):
        logger.debug(f"DID reference rejected at offset {scanner.pos}: {text!r}")
        raise InvalidDIDUriError(value)
    return Uri(**components)


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


def _join_entries(entries: Mapping[str, str], separator: str) -> str:
    return separator.join(
        f"{key}={value}" if value else key for key, value in sorted(entries.items())
    )


def render_did_uri(uri: Uri) -> str:
    """Render *uri* back to text.

    The inverse of :func:`parse_did_uri` (or of :func:`parse_did_reference`
    for a relative DID URL): parsing the result yields a value equal to
    *uri*. Params and query entries are written sorted by key.
    """
    parts = [_PREFIX, uri.method, ":", uri.id] if uri.method else []
    if uri.path:
        parts.append("/" + "/".join(uri.path))
    if uri.params:
        parts.append(";" + _join_entries(uri.params, ";"))
    if uri.query:
        parts.append("?" + "&".join(f"{key}={value}" for key, value in sorted(uri.query.items())))
    if uri.fragment:
        parts.append("#" + uri.fragment)
    return "".join(parts)


def parse_did_method(did: str | Uri, supported: Iterable[str] | None = None) -> str:
    """Return the method of *did*, optionally restricted to *supported* methods.

    Raises
    ------
    InvalidDIDUriError
        If *did* is not a valid DID URI, or is empty or relative.
    UnsupportedDIDMethodError
        If *supported* is given and does not contain the method.
    """
    uri = did if isinstance(did, Uri) else parse_did_uri(did)
    if not uri.method:
        raise InvalidDIDUriError(str(did))
    if supported is not None and uri.method not in set(supported):
        raise UnsupportedDIDMethodError(f"unsupported DID method: {uri.method!r}")
    return uri.method
