"""
Preprocessor defines generator for classification results.

Renders a ClassificationResult as the macro set a C/C++ build consumes:

    STANDARD_C 2011          resolved revision's year
    STANDARD_C_1989          one per revision in the "at least" prefix
    ...
    STANDARD_C_2011
    STANDARD_CPP_CLI         one per active dialect

Unknown results produce no defines. The pre-standard C++ floor has
year 0 and gets only the main constant, no per-revision macro.
"""

from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Union

from stdladder.model import ClassificationResult, LanguageFamily


DEFAULT_PREFIX = "STANDARD_"

DIALECT_SUFFIXES: Dict[str, str] = {
    "cli": "CLI",
    "winrt": "CX",
    "embedded": "EMB",
}


def result_to_defines(result: ClassificationResult, prefix: str = DEFAULT_PREFIX) -> "OrderedDict[str, str]":
    """
    Compute the macro set for a result.

    Args:
        result: Classification result
        prefix: Prefix for every macro name

    Returns:
        Ordered mapping of macro name -> replacement text ("" for flags)
    """
    defines: "OrderedDict[str, str]" = OrderedDict()
    if result.is_unknown or result.family is LanguageFamily.NONE:
        return defines

    family = f"{prefix}{result.family.value}"
    defines[family] = str(result.resolved.year)

    for rev in result.at_least:
        if rev.year:
            defines[f"{family}_{rev.year}"] = ""

    for name in sorted(result.dialects):
        suffix = DIALECT_SUFFIXES.get(name, name.upper())
        defines[f"{family}_{suffix}"] = ""

    for capability in sorted(c.value for c in result.excluded_capabilities):
        defines[f"{family}_NO_{capability.upper()}"] = ""

    return defines


def generate_header(result: ClassificationResult, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Render a result as #define lines.

    Returns:
        Header text (no include guard), newline-terminated
    """
    lines: List[str] = []
    for name, value in result_to_defines(result, prefix).items():
        lines.append(f"#define {name} {value}".rstrip())
    lines.append("")
    return "\n".join(lines)


def to_compiler_flags(result: ClassificationResult, prefix: str = DEFAULT_PREFIX) -> List[str]:
    """Render a result as -D compiler flags."""
    flags = []
    for name, value in result_to_defines(result, prefix).items():
        flags.append(f"-D{name}={value}" if value else f"-D{name}")
    return flags


def save_header(result: ClassificationResult, filepath: Union[str, Path], prefix: str = DEFAULT_PREFIX) -> None:
    """Write generate_header() output to a file."""
    Path(filepath).write_text(generate_header(result, prefix), encoding="utf-8")
