# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Centralized configuration for did-doc.

Configurable values are read from environment variables once, at import time.

Environment Variables:
    DID_DOC_DEFAULT_CONTEXT: ``@context`` given to documents built with
        :meth:`~did_doc.document.Document.new` when no context is passed
        (default: https://w3id.org/did/v1)
"""

from __future__ import annotations

import os
from typing import Final

# =============================================================================
# Document defaults
# =============================================================================

DEFAULT_CONTEXT: Final[str] = os.getenv(
    "DID_DOC_DEFAULT_CONTEXT",
    "https://w3id.org/did/v1",
)

# =============================================================================
# Serialization
# =============================================================================

# Compact separators; byte-stable output depends on them.
JSON_SEPARATORS: Final[tuple[str, str]] = (",", ":")
