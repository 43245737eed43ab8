"""
Shared pytest fixtures for did-doc tests.
"""

import pytest


SUBJECT = "did:example:123456789abcdefghi"
SECURITY_CONTEXTS = ["https://w3id.org/did/v1", "https://w3id.org/security/v1"]


@pytest.fixture
def subject() -> str:
    """The DID used as the document subject throughout the tests."""
    return SUBJECT


@pytest.fixture
def embedded_key() -> dict:
    """An embedded Ed25519 key object as it appears on the wire."""
    return {
        "id": f"{SUBJECT}#keys-2",
        "type": "Ed25519VerificationKey2018",
        "controller": SUBJECT,
        "publicKeyBase58": "H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
    }


@pytest.fixture
def authentication_document() -> str:
    """A document whose authentication mixes references and an embedded key."""
    return """
    {
        "@context": ["https://w3id.org/did/v1", "https://w3id.org/security/v1"],
        "id": "did:example:123456789abcdefghi",
        "authentication": [
            "did:example:123456789abcdefghi#keys-1",
            "did:example:123456789abcdefghi#biometric-1",
            {
                "id": "did:example:123456789abcdefghi#keys-2",
                "type": "Ed25519VerificationKey2018",
                "controller": "did:example:123456789abcdefghi",
                "publicKeyBase58": "H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV"
            }
        ]
    }
    """


@pytest.fixture
def social_inbox_service() -> dict:
    """A service entry carrying unmodeled properties."""
    return {
        "id": f"{SUBJECT}#inbox",
        "type": "SocialWebInboxService",
        "serviceEndpoint": "https://social.example.com/83hfh37dj",
        "description": "My public social inbox",
        "spamCost": {"amount": "0.50", "currency": "USD"},
    }
