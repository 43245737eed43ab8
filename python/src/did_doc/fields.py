# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Codecs for the polymorphic fields of a DID document.

Each entity peeks at the kind of JSON value it is handed and branches into
the matching constructor:

- key entries (``publicKey`` / ``authentication``) are either a bare string,
  a *reference* to a key defined elsewhere, or an object embedding the key;
- an embedded key carries its material under exactly one of a fixed set of
  property names, and that name is what decides :class:`~types.KeyEncoding`;
- service endpoints keep every property they do not model, in order, and
  write them back after the modeled ones.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .context import Context
from .did import Uri, parse_did_reference, parse_did_uri
from .types import (
    DIDError,
    DIDErrorKind,
    DocumentShapeError,
    KeyEncoding,
    KeyType,
)

logger = logging.getLogger(__name__)

# Name used in errors for whichever key-data property is involved.
KEY_DATA = "key data"

_KEY_FIELDS = ("id", "type", "controller")
_ENCODINGS_BY_PROPERTY = {encoding.property_name: encoding for encoding in KeyEncoding}
_SERVICE_FIELDS = ("@context", "id", "type", "serviceEndpoint")


# ------------------------------------------------------------------
# JSON loading
# ------------------------------------------------------------------


class JSONObject(dict):
    """A decoded JSON object that remembers repeated property names.

    The mapping itself keeps the last value seen for a repeated name, like
    :func:`json.loads` does.
    """

    duplicates: tuple[str, ...] = ()


def _collect_pairs(pairs: list[tuple[str, Any]]) -> JSONObject:
    obj = JSONObject()
    repeated: list[str] = []
    for key, value in pairs:
        if key in obj:
            repeated.append(key)
        obj[key] = value
    if repeated:
        obj.duplicates = tuple(repeated)
    return obj


def load_json(text: str | bytes) -> Any:
    """Parse JSON text, keeping track of repeated property names per object.

    Raises
    ------
    DIDError
        With kind ``INVALID_JSON`` if *text* is not valid JSON.
    """
    try:
        return json.loads(text, object_pairs_hook=_collect_pairs)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DIDError(f"invalid JSON: {exc}", kind=DIDErrorKind.INVALID_JSON) from exc


# ------------------------------------------------------------------
# Shared decode helpers
# ------------------------------------------------------------------


def require_object(value: Any, owner: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DocumentShapeError(
            DIDErrorKind.INVALID_VALUE,
            owner,
            f"expected object, got {type(value).__name__}",
        )
    return value


def check_duplicates(obj: dict[str, Any], modeled: Iterable[str], owner: str) -> None:
    """Reject repeated occurrences of the properties an entity models."""
    modeled = set(modeled)
    for name in getattr(obj, "duplicates", ()):
        if name in modeled:
            raise DocumentShapeError(
                DIDErrorKind.DUPLICATE_FIELD, name, f"appears more than once in {owner}"
            )


def require_field(obj: dict[str, Any], name: str, owner: str) -> Any:
    if name not in obj:
        raise DocumentShapeError(DIDErrorKind.MISSING_FIELD, name, f"required in {owner}")
    return obj[name]


def require_str(obj: dict[str, Any], name: str, owner: str) -> str:
    value = require_field(obj, name, owner)
    if not isinstance(value, str):
        raise DocumentShapeError(
            DIDErrorKind.INVALID_VALUE,
            name,
            f"expected string in {owner}, got {type(value).__name__}",
        )
    return value


def decode_uri(value: Any, name: str, *, relative: bool = False) -> Uri:
    """Parse a JSON string holding a DID URI.

    With *relative*, a relative DID URL such as ``#keys-1`` is accepted too.
    """
    if not isinstance(value, str):
        raise DocumentShapeError(
            DIDErrorKind.INVALID_VALUE,
            name,
            f"expected DID string, got {type(value).__name__}",
        )
    return parse_did_reference(value) if relative else parse_did_uri(value)


def _as_uri(value: Uri | str) -> Uri:
    return value if isinstance(value, Uri) else parse_did_reference(value)


# ------------------------------------------------------------------
# Key-bearing entities
# ------------------------------------------------------------------


@dataclass(frozen=True)
class PublicKey:
    """A key entry: either a reference to a key or the embedded key itself.

    ``reference`` is decided once, at decode time, from the JSON shape. A
    reference only carries ``id``; its other fields stay at their unknown
    defaults and are not written out.

    ``type_name`` keeps the JSON ``type`` string when it is not a known
    :class:`KeyType`, so that it is written back unchanged.
    """

    JSON_NAME: ClassVar[str] = "publicKey"

    id: Uri
    key_type: KeyType = KeyType.UNKNOWN_KEY
    controller: Uri = field(default_factory=Uri)
    key_encoding: KeyEncoding = KeyEncoding.UNKNOWN
    # A JSON object is accepted only with KeyEncoding.JWK.
    key_data: str | dict[str, Any] = ""
    reference: bool = False
    type_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _as_uri(self.id))
        object.__setattr__(self, "controller", _as_uri(self.controller))

    @classmethod
    def to_reference(cls, id: Uri | str) -> "PublicKey":
        """Build a reference entry pointing at the key *id*."""
        return cls(id=id, reference=True)

    @classmethod
    def from_value(
        cls,
        *,
        id: Uri | str,
        key_type: KeyType,
        controller: Uri | str,
        key_encoding: KeyEncoding,
        key_data: str | dict[str, Any],
    ) -> "PublicKey":
        """Build an embedded key entry."""
        return cls(
            id=id,
            key_type=key_type,
            controller=controller,
            key_encoding=key_encoding,
            key_data=key_data,
        )

    @classmethod
    def from_json(cls, value: Any) -> "PublicKey":
        """Decode a key entry from a JSON string or object.

        Raises
        ------
        DocumentShapeError
            ``MISSING_FIELD`` when ``id``, ``type``, ``controller`` or the key
            data is absent; ``DUPLICATE_FIELD`` when one of those repeats or two
            key-data properties are present; ``UNKNOWN_FIELD`` for any other
            property; ``INVALID_VALUE`` for a value of the wrong JSON kind.
        InvalidDIDUriError
            When ``id`` or ``controller`` is neither a DID URI nor a relative
            DID URL.
        """
        if isinstance(value, str):
            return cls.to_reference(decode_uri(value, "id", relative=True))
        if not isinstance(value, dict):
            raise DocumentShapeError(
                DIDErrorKind.INVALID_VALUE,
                cls.JSON_NAME,
                f"expected string or object, got {type(value).__name__}",
            )

        owner = f"{cls.JSON_NAME} entry"
        check_duplicates(value, _KEY_FIELDS, owner)
        for name in getattr(value, "duplicates", ()):
            if name in _ENCODINGS_BY_PROPERTY:
                raise DocumentShapeError(
                    DIDErrorKind.DUPLICATE_FIELD, KEY_DATA, f"appears more than once in {owner}"
                )

        key_encoding: KeyEncoding | None = None
        key_data: Any = None
        for name, item in value.items():
            if name in _KEY_FIELDS:
                continue
            # Unlike unknown key types, unknown property names are rejected.
            encoding = _ENCODINGS_BY_PROPERTY.get(name)
            if encoding is None:
                raise DocumentShapeError(
                    DIDErrorKind.UNKNOWN_FIELD,
                    name,
                    f"unknown property in {owner}; expected one of "
                    f"{', '.join(_KEY_FIELDS + tuple(_ENCODINGS_BY_PROPERTY))}",
                )
            if key_encoding is not None:
                raise DocumentShapeError(
                    DIDErrorKind.DUPLICATE_FIELD,
                    KEY_DATA,
                    f"both {key_encoding.property_name!r} and {name!r} present in {owner}",
                )
            key_encoding, key_data = encoding, item

        key_id = decode_uri(require_field(value, "id", owner), "id", relative=True)
        type_name = require_str(value, "type", owner)
        controller = decode_uri(
            require_field(value, "controller", owner), "controller", relative=True
        )
        if key_encoding is None:
            raise DocumentShapeError(DIDErrorKind.MISSING_FIELD, KEY_DATA, f"required in {owner}")

        if not isinstance(key_data, str) and not (
            key_encoding is KeyEncoding.JWK and isinstance(key_data, dict)
        ):
            raise DocumentShapeError(
                DIDErrorKind.INVALID_VALUE,
                key_encoding.property_name,
                f"unexpected {type(key_data).__name__} in {owner}",
            )

        key_type = KeyType.from_json(type_name)
        if key_type is KeyType.UNKNOWN_KEY and type_name != KeyType.UNKNOWN_KEY.value:
            logger.debug(f"Unrecognised key type {type_name!r} for {key_id}, kept as UnknownKey")

        return cls(
            id=key_id,
            key_type=key_type,
            controller=controller,
            key_encoding=key_encoding,
            key_data=key_data,
            type_name=type_name if key_type is KeyType.UNKNOWN_KEY else "",
        )

    def to_json(self) -> str | dict[str, Any]:
        """Encode as a bare string (reference) or an object (embedded key)."""
        if self.reference:
            return str(self.id)
        return {
            "id": str(self.id),
            "type": self._type_json(),
            "controller": str(self.controller),
            self.key_encoding.property_name: self.key_data,
        }

    def _type_json(self) -> str:
        if self.key_type is KeyType.UNKNOWN_KEY and self.type_name:
            return self.type_name
        return self.key_type.value


class Authentication(PublicKey):
    """An ``authentication`` entry. Same shapes and rules as :class:`PublicKey`."""

    JSON_NAME: ClassVar[str] = "authentication"


# ------------------------------------------------------------------
# Service endpoints
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ServiceEndpoint:
    """A service entry of a DID document.

    ``extra`` holds every property other than ``@context``, ``id``, ``type``
    and ``serviceEndpoint``, in the order it was read.
    """

    service_type: str
    endpoint: str
    id: Uri = field(default_factory=Uri)
    context: Context = field(default_factory=Context)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _as_uri(self.id))
        if not isinstance(self.context, Context):
            context = (self.context,) if isinstance(self.context, str) else self.context
            object.__setattr__(self, "context", Context(context))
        clashing = [name for name in _SERVICE_FIELDS if name in self.extra]
        if clashing:
            raise ValueError(f"ServiceEndpoint: extra must not contain {clashing}")

    @classmethod
    def from_json(cls, value: Any) -> "ServiceEndpoint":
        """Decode a service entry from a JSON object."""
        owner = "service entry"
        obj = require_object(value, "service")
        check_duplicates(obj, _SERVICE_FIELDS, owner)

        context = Context.from_json(obj["@context"]) if "@context" in obj else Context()
        subject = decode_uri(obj["id"], "id", relative=True) if "id" in obj else Uri()
        service_type = require_str(obj, "type", owner)
        endpoint = require_str(obj, "serviceEndpoint", owner)
        extra = {name: item for name, item in obj.items() if name not in _SERVICE_FIELDS}

        return cls(
            service_type=service_type,
            endpoint=endpoint,
            id=subject,
            context=context,
            extra=extra,
        )

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if not self.context.is_missing():
            out["@context"] = self.context.to_json()
        if not self.id.is_empty():
            out["id"] = str(self.id)
        out["type"] = self.service_type
        out["serviceEndpoint"] = self.endpoint
        for name, item in self.extra.items():
            if name not in _SERVICE_FIELDS:
                out[name] = item
        return out
