# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""did-doc — parse, model and re-serialize DID URIs and DID Documents.

Quickstart
----------
>>> from did_doc import Document, Uri
>>> doc = Document.from_json(
...     '{"@context":"https://w3id.org/did/v1","id":"did:example:123456789abcdefghi"}'
... )
>>> doc.id.method
'example'
>>> doc.to_json()
'{"@context":"https://w3id.org/did/v1","id":"did:example:123456789abcdefghi"}'

Identifiers on their own:

>>> uri = Uri.parse("did:sov:wjb4bjwb1235kbg1235/spec/tree/d7879f5e/text")
>>> uri.path
('spec', 'tree', 'd7879f5e', 'text')
"""

from .context import Context
from .did import Uri, parse_did_method, parse_did_reference, parse_did_uri, render_did_uri
from .document import Document
from .fields import Authentication, PublicKey, ServiceEndpoint, load_json
from .types import (
    DIDError,
    DIDErrorKind,
    DocumentShapeError,
    InvalidDIDUriError,
    KeyEncoding,
    KeyType,
    UnsupportedDIDMethodError,
)

__all__ = [
    # Identifiers
    "Uri",
    "parse_did_uri",
    "render_did_uri",
    "parse_did_method",
    "parse_did_reference",
    # Document model
    "Document",
    "Context",
    "PublicKey",
    "Authentication",
    "ServiceEndpoint",
    "KeyType",
    "KeyEncoding",
    "load_json",
    # Exceptions
    "DIDError",
    "DIDErrorKind",
    "InvalidDIDUriError",
    "UnsupportedDIDMethodError",
    "DocumentShapeError",
]
