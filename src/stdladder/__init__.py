"""
stdladder: C/C++ Language Standard Classifier

Given the signals a toolchain exposes about its language-standard
conformance, computes:
    - the single highest revision it supports ("C11", "C++17", ...)
    - every revision it supports at least (always a ladder prefix)
    - the non-standard dialect in effect, if any (C++/CLI, C++/CX,
      Embedded C++), with the capabilities that dialect removes

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - How to invoke a compiler
    - Architecture, vendor or OS detection
    - Source code parsing

Classification is a pure function of a SignalSnapshot.
"""

__version__ = "0.1.0"

from stdladder.model import (  # noqa: E402
    Capability,
    ClassificationResult,
    InvalidLanguageFamily,
    LanguageFamily,
    ResolutionSource,
    Revision,
    SignalSnapshot,
    StdLadderError,
)
from stdladder.quirks import DEFAULT_TABLE, QuirksTable, QuirksTableError  # noqa: E402
from stdladder.resolver import classify  # noqa: E402

__all__ = [
    "Capability",
    "ClassificationResult",
    "DEFAULT_TABLE",
    "InvalidLanguageFamily",
    "LanguageFamily",
    "QuirksTable",
    "QuirksTableError",
    "ResolutionSource",
    "Revision",
    "SignalSnapshot",
    "StdLadderError",
    "classify",
]
