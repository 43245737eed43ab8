# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Shared enums and exceptions for the did-doc Python library."""

from __future__ import annotations

from enum import Enum


class KeyType(str, Enum):
    """Verification key suite named by the ``type`` property of a key entry."""

    UNKNOWN_KEY = "UnknownKey"
    ED25519_2018 = "Ed25519VerificationKey2018"
    RSA_2018 = "RsaVerificationKey2018"
    ECDSA_SECP256K1_2019 = "EcdsaSecp256k1VerificationKey2019"

    @classmethod
    def from_json(cls, value: str) -> "KeyType":
        """Map a ``type`` literal to a member, falling back to ``UNKNOWN_KEY``."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN_KEY


class KeyEncoding(str, Enum):
    """How ``key_data`` is encoded.

    Each member's value is the JSON property name that carries the key data,
    so the enum doubles as the lookup table used while decoding.
    """

    UNKNOWN = "publicKeyUnknown"
    PEM = "publicKeyPem"
    JWK = "publicKeyJwk"
    HEX = "publicKeyHex"
    BASE64 = "publicKeyBase64"
    BASE58 = "publicKeyBase58"
    MULTIBASE = "publicKeyMultibase"
    ETHEREUM_ADDRESS = "ethereumAddress"

    @property
    def property_name(self) -> str:
        return self.value


class DIDErrorKind(str, Enum):
    """Stable failure category carried by every :class:`DIDError`."""

    INVALID_URI = "invalid_uri"
    UNKNOWN_METHOD = "unknown_method"
    MISSING_FIELD = "missing_field"
    DUPLICATE_FIELD = "duplicate_field"
    UNKNOWN_FIELD = "unknown_field"
    INVALID_VALUE = "invalid_value"
    INVALID_JSON = "invalid_json"


class DIDError(Exception):
    """Base class for every error raised by did-doc.

    Branch on :attr:`kind` rather than on the message text.
    """

    kind: DIDErrorKind = DIDErrorKind.INVALID_VALUE

    def __init__(self, message: str, *, kind: DIDErrorKind | None = None) -> None:
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class InvalidDIDUriError(DIDError):
    """Raised when a string does not match the DID URI grammar."""

    kind = DIDErrorKind.INVALID_URI

    def __init__(self, value: str | bytes) -> None:
        self.value = value
        super().__init__(f"invalid DID URI: {value!r}")


class UnsupportedDIDMethodError(DIDError):
    """Raised when a DID method is not in the caller's supported set."""

    kind = DIDErrorKind.UNKNOWN_METHOD


class DocumentShapeError(DIDError):
    """Raised when a JSON value does not have the shape a field requires."""

    def __init__(self, kind: DIDErrorKind, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}", kind=kind)
