# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""The DID document aggregate and its whole-document JSON codec."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from . import config
from .context import Context
from .did import Uri, parse_did_uri
from .fields import (
    Authentication,
    PublicKey,
    ServiceEndpoint,
    check_duplicates,
    decode_uri,
    load_json,
    require_field,
    require_object,
)
from .types import DIDError, DIDErrorKind, DocumentShapeError

logger = logging.getLogger(__name__)

# Wire order of the modeled properties.
_DOCUMENT_FIELDS = ("@context", "id", "publicKey", "authentication", "service")

_T = TypeVar("_T")


@dataclass
class Document:
    """W3C DID Document.

    ``public_key``, ``authentication`` and ``service`` may be appended to
    before serialization; each is left out of the JSON while empty.
    ``extra`` keeps unmodeled top-level properties in the order they were
    read and is written after the modeled ones. It may not hold a modeled
    property name: construction rejects one, and encoding skips one added
    later.
    """

    context: Context
    id: Uri
    public_key: list[PublicKey] = field(default_factory=list)
    authentication: list[Authentication] = field(default_factory=list)
    service: list[ServiceEndpoint] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.id, str):
            self.id = parse_did_uri(self.id)
        if isinstance(self.context, str):
            self.context = Context((self.context,))
        elif not isinstance(self.context, Context):
            self.context = Context(self.context)
        clashing = [name for name in _DOCUMENT_FIELDS if name in self.extra]
        if clashing:
            raise ValueError(f"Document: extra must not contain {clashing}")

    @classmethod
    def new(
        cls,
        subject: Uri | str,
        context: Context | str | Iterable[str] | None = None,
    ) -> "Document":
        """Build a document holding only a context and a subject.

        Parameters
        ----------
        subject:
            The DID the document describes.
        context:
            The ``@context``. Defaults to :data:`~did_doc.config.DEFAULT_CONTEXT`.
        """
        if context is None:
            context = config.DEFAULT_CONTEXT
        return cls(context=context, id=subject)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @classmethod
    def from_json(cls, text: str | bytes) -> "Document":
        """Parse and decode a DID document from JSON text.

        Raises
        ------
        DIDError
            ``INVALID_JSON`` if *text* is not JSON; see :meth:`from_dict` for
            the rest.
        """
        return cls.from_dict(load_json(text))

    @classmethod
    def from_dict(cls, raw: Any) -> "Document":
        """Decode an already-loaded JSON object.

        Decoding is all-or-nothing: the first malformed field aborts it.

        Raises
        ------
        DocumentShapeError
            On a missing, repeated or malformed property.
        InvalidDIDUriError
            When an identifier does not match the DID URI grammar.
        """
        owner = "document"
        obj = require_object(raw, owner)
        check_duplicates(obj, _DOCUMENT_FIELDS, owner)

        context = Context.from_json(require_field(obj, "@context", owner))
        subject = decode_uri(require_field(obj, "id", owner), "id")

        return cls(
            context=context,
            id=subject,
            public_key=_decode_list(obj, "publicKey", PublicKey.from_json),
            authentication=_decode_list(obj, "authentication", Authentication.from_json),
            service=_decode_list(obj, "service", ServiceEndpoint.from_json),
            extra={name: item for name, item in obj.items() if name not in _DOCUMENT_FIELDS},
        )

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Encode as a JSON-ready ``dict`` in wire order."""
        out: dict[str, Any] = {}
        if not self.context.is_missing():
            out["@context"] = self.context.to_json()
        out["id"] = str(self.id)
        if self.public_key:
            out["publicKey"] = [key.to_json() for key in self.public_key]
        if self.authentication:
            out["authentication"] = [entry.to_json() for entry in self.authentication]
        if self.service:
            out["service"] = [service.to_json() for service in self.service]
        for name, item in self.extra.items():
            if name in _DOCUMENT_FIELDS:
                logger.debug(f"Skipping extra property {name!r}, it names a modeled property")
                continue
            out[name] = item
        return out

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to JSON text.

        Without *indent* the output is compact and byte-stable; with it the
        output is pretty-printed.
        """
        separators = config.JSON_SEPARATORS if indent is None else None
        return json.dumps(
            self.to_dict(),
            indent=indent,
            separators=separators,
            ensure_ascii=False,
        )


def _decode_list(
    obj: dict[str, Any],
    name: str,
    decode: Callable[[Any], _T],
) -> list[_T]:
    if name not in obj:
        return []
    items = obj[name]
    if not isinstance(items, list):
        raise DocumentShapeError(
            DIDErrorKind.INVALID_VALUE,
            name,
            f"expected array, got {type(items).__name__}",
        )
    decoded: list[_T] = []
    for index, item in enumerate(items):
        try:
            decoded.append(decode(item))
        except DIDError as exc:
            logger.debug(f"Failed to decode {name}[{index}]: {exc}")
            raise
    return decoded
