"""
Macro Dump Parser (Raw Input → SignalSnapshot).

Converts a compiler's predefined-macro dump into a SignalSnapshot.

Input format (as printed by `cc -dM -E - </dev/null`):
    #define __STDC__ 1
    #define __STDC_VERSION__ 201710L
    #define __GNUC__ 13

Mapping:
    - __cplusplus defined      → family CPP, token = its value
    - else __STDC__ defined    → family C, token = __STDC_VERSION__
    - neither                  → family NONE
    - presence flags, dialect flags and vendor id are read from
      the macros named in PRESENCE_MACROS, DIALECT_MACROS, VENDOR_MACROS
"""

import re
import warnings
from pathlib import Path
from typing import Dict, Optional, Union

from stdladder.model import LanguageFamily, SignalSnapshot, StdLadderError


class MacroParseError(StdLadderError):
    """Raised when a macro dump cannot be turned into a snapshot."""
    pass


PRESENCE_MACROS = ("__STDC__", "__STDC_HOSTED__", "__cplusplus")

DIALECT_MACROS = ("__cplusplus_cli", "__cplusplus_winrt", "__embedded_cplusplus")

# First match wins: clang also defines __GNUC__
VENDOR_MACROS = (
    ("__HP_aCC", "hp_acc"),
    ("__clang__", "clang"),
    ("__INTEL_COMPILER", "intel"),
    ("__GNUC__", "gcc"),
    ("_MSC_VER", "msvc"),
)

_DEFINE_RE = re.compile(r'^\s*#\s*define\s+([A-Za-z_][A-Za-z0-9_]*)(\([^)]*\))?(?:\s+(.*?))?\s*$')
_INT_RE = re.compile(r'^\(?\s*(\d+)\s*(?:[uU]?[lL]{0,2}|[lL]{1,2}[uU]?)\s*\)?$')


def parse_defines(text: str) -> Dict[str, str]:
    """
    Collect object-like macro definitions from a dump.

    Function-like macros are skipped. Lines that are not #define
    directives are ignored; malformed #define lines warn and are skipped.

    Returns:
        Macro name -> replacement text ("" when empty)
    """
    macros: Dict[str, str] = {}
    for line_num, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or not stripped.startswith("#"):
            continue
        if not re.match(r'^#\s*define\b', stripped):
            continue
        m = _DEFINE_RE.match(stripped)
        if m is None:
            warnings.warn(f"Malformed #define on line {line_num}: {stripped}", UserWarning)
            continue
        name, params, value = m.group(1), m.group(2), m.group(3)
        if params is not None:
            continue
        macros[name] = value or ""
    return macros


def parse_int_value(name: str, value: str) -> int:
    """
    Parse an integer macro value such as 201710L or (199711UL).

    Raises:
        MacroParseError: If the value is not an integer literal
    """
    m = _INT_RE.match(value.strip())
    if m is None:
        raise MacroParseError(f"Macro {name} has non-integer value: {value!r}")
    return int(m.group(1))


def detect_vendor(macros: Dict[str, str]) -> Optional[str]:
    for macro, vendor_id in VENDOR_MACROS:
        if macro in macros:
            return vendor_id
    return None


def snapshot_from_macros(macros: Dict[str, str], vendor_id: Optional[str] = None) -> SignalSnapshot:
    """
    Build a SignalSnapshot from parsed macro definitions.

    Args:
        macros: Output of parse_defines()
        vendor_id: Vendor identifier; detected from VENDOR_MACROS if None

    Returns:
        SignalSnapshot
    """
    if "__cplusplus" in macros:
        family = LanguageFamily.CPP
        token_macro = "__cplusplus"
    elif "__STDC__" in macros:
        family = LanguageFamily.C
        token_macro = "__STDC_VERSION__"
    else:
        family = LanguageFamily.NONE
        token_macro = None

    token = None
    if token_macro is not None and macros.get(token_macro):
        token = parse_int_value(token_macro, macros[token_macro])

    return SignalSnapshot(
        language_family=family,
        presence_flags=frozenset(m for m in PRESENCE_MACROS if m in macros),
        version_token=token,
        dialect_flags=frozenset(m for m in DIALECT_MACROS if m in macros),
        vendor_id=vendor_id if vendor_id is not None else detect_vendor(macros),
    )


def parse_macro_dump(text: str, vendor_id: Optional[str] = None) -> SignalSnapshot:
    """
    Parse a predefined-macro dump into a SignalSnapshot.

    Args:
        text: Macro dump
        vendor_id: Optional vendor identifier override

    Returns:
        SignalSnapshot

    Raises:
        MacroParseError: If the version macro holds a non-integer value
    """
    return snapshot_from_macros(parse_defines(text), vendor_id=vendor_id)


def parse_macro_file(filepath: Union[str, Path], vendor_id: Optional[str] = None) -> SignalSnapshot:
    """
    Parse a macro dump file into a SignalSnapshot.

    Raises:
        FileNotFoundError: If file doesn't exist
        MacroParseError: If parsing fails
    """
    path = Path(filepath)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Macro dump not found: {filepath}")
    return parse_macro_dump(content, vendor_id=vendor_id)


__all__ = [
    "parse_macro_dump",
    "parse_macro_file",
    "parse_defines",
    "snapshot_from_macros",
    "MacroParseError",
]
