"""
Example snapshots for representative toolchains.

Each entry mirrors what a real compiler reports in its predefined macros,
so demos and tests can classify something recognizable.
"""
from typing import Dict

from stdladder.model import LanguageFamily, SignalSnapshot


def build_example_snapshots() -> Dict[str, SignalSnapshot]:
    return {
        "gcc-c17": SignalSnapshot(
            language_family=LanguageFamily.C,
            presence_flags={"__STDC__", "__STDC_HOSTED__"},
            version_token=201710,
            vendor_id="gcc",
        ),
        "gcc-c89": SignalSnapshot(
            language_family=LanguageFamily.C,
            presence_flags={"__STDC__", "__STDC_HOSTED__"},
            vendor_id="gcc",
        ),
        "clang-cpp20": SignalSnapshot(
            language_family=LanguageFamily.CPP,
            presence_flags={"__STDC__", "__STDC_HOSTED__", "__cplusplus"},
            version_token=202002,
            vendor_id="clang",
        ),
        "hp-acc-cpp98": SignalSnapshot(
            language_family=LanguageFamily.CPP,
            presence_flags={"__cplusplus"},
            version_token=199710,
            vendor_id="hp_acc",
        ),
        "msvc-cli": SignalSnapshot(
            language_family=LanguageFamily.CPP,
            presence_flags={"__cplusplus"},
            version_token=199711,
            dialect_flags={"__cplusplus_cli"},
            vendor_id="msvc",
        ),
        "embedded-cpp": SignalSnapshot(
            language_family=LanguageFamily.CPP,
            presence_flags={"__cplusplus"},
            version_token=1,
            dialect_flags={"__embedded_cplusplus"},
        ),
        "no-language": SignalSnapshot(),
    }


def get_example_snapshot(name: str) -> SignalSnapshot:
    """
    Raises:
        KeyError: If no example has this name
    """
    examples = build_example_snapshots()
    if name not in examples:
        raise KeyError(f"Unknown example {name!r}; choose from {', '.join(sorted(examples))}")
    return examples[name]
