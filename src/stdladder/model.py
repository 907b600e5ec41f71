"""
Core Classification Model Objects

Defines the fundamental data structures of the standard-version classifier.

These are pure data classes representing:
    - Language families (C, C++, or undetected)
    - Revisions (named positions on a family's ladder)
    - Signal snapshots (what the toolchain reports)
    - Dialects and vendor quirks (table entries)
    - Classification results (what the classifier concludes)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about how signals are gathered
        - Are immutable
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


UNKNOWN_REVISION_NAME = "unknown"


class StdLadderError(Exception):
    """Base class for all errors raised by stdladder."""
    pass


class InvalidLanguageFamily(StdLadderError, ValueError):
    """Raised when a caller passes a language family that is not C, CPP or NONE."""
    pass


class LanguageFamily(Enum):
    """
    The language a toolchain is compiling.

    NONE means neither C nor C++ could be detected. It is a valid
    input and always classifies as "unknown".
    """

    C = "C"
    CPP = "CPP"
    NONE = "none"

    @classmethod
    def coerce(cls, value) -> "LanguageFamily":
        """
        Accept a LanguageFamily, its value or a common spelling.

        Raises:
            InvalidLanguageFamily: If value does not name a family
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        if isinstance(value, str):
            key = value.strip().upper()
            aliases = {"C": cls.C, "CPP": cls.CPP, "C++": cls.CPP, "CXX": cls.CPP, "NONE": cls.NONE}
            if key in aliases:
                return aliases[key]
        raise InvalidLanguageFamily(f"Invalid language family: {value!r}")


class Capability(Enum):
    """Language features a dialect may strip from its fixed revision."""

    EXCEPTIONS = "exceptions"
    MULTIPLE_INHERITANCE = "multiple_inheritance"
    RTTI = "rtti"
    TEMPLATES = "templates"
    NAMESPACES = "namespaces"


class ResolutionSource(Enum):
    """How a classification result was reached."""

    UNKNOWN = "unknown"  # no family or no base indicator
    FLOOR = "floor"      # base indicator only, oldest revision
    TOKEN = "token"      # version token scanned against the ladder
    DIALECT = "dialect"  # fixed by a dialect recognition


def _frozen(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(values)


@dataclass(frozen=True)
class Revision:
    """
    One named entry in a family's ladder.

    Properties:
        name:
            Canonical identifier (e.g., "C99", "C++14")

        family:
            LanguageFamily this revision belongs to

        year:
            Value historically published for this revision (e.g., 1999).
            The pre-standard C++ floor uses 0.

        threshold:
            Minimum version token required to claim this revision.
            None means the revision is never selected by a token scan and
            is only reachable as a floor or through prefix inclusion.

        aliases:
            Other names for the same revision (e.g., "C18" for "C17")

        implied_by:
            Presence flags that claim this revision when a version token
            is reported (e.g., __STDC_HOSTED__ first appeared in C99)

        description:
            Formal document reference
    """

    name: str
    family: LanguageFamily
    year: int
    threshold: Optional[int] = None
    aliases: Tuple[str, ...] = ()
    implied_by: FrozenSet[str] = frozenset()
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "family", LanguageFamily.coerce(self.family))
        object.__setattr__(self, "aliases", tuple(self.aliases))
        object.__setattr__(self, "implied_by", _frozen(self.implied_by))

    def matches(self, name: str) -> bool:
        """True if name is this revision's canonical name or an alias."""
        return name == self.name or name in self.aliases


@dataclass(frozen=True)
class SignalSnapshot:
    """
    What a toolchain reports about its standard conformance.

    Provided by external collaborators (a macro dump, a compiler probe,
    a hand-written fixture). Never produced by the classifier.

    Properties:
        language_family:
            C, CPP or NONE. The classifier never infers this.

        presence_flags:
            Named boolean indicators, e.g. {"__STDC__", "__STDC_HOSTED__"}

        version_token:
            Raw value of the family's version macro, if any

        dialect_flags:
            Non-ladder dialect indicators, e.g. {"__embedded_cplusplus"}

        vendor_id:
            Identifier used to select vendor quirks, e.g. "hp_acc"
    """

    language_family: LanguageFamily = LanguageFamily.NONE
    presence_flags: FrozenSet[str] = frozenset()
    version_token: Optional[int] = None
    dialect_flags: FrozenSet[str] = frozenset()
    vendor_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "language_family", LanguageFamily.coerce(self.language_family))
        object.__setattr__(self, "presence_flags", _frozen(self.presence_flags))
        object.__setattr__(self, "dialect_flags", _frozen(self.dialect_flags))


@dataclass(frozen=True)
class NormalizedSignals:
    """
    A snapshot after vendor quirks have been applied.

    version_token holds the rewritten value used for ladder purposes;
    raw_version_token keeps what the toolchain actually reported.
    """

    family: LanguageFamily
    presence_flags: FrozenSet[str]
    version_token: Optional[int]
    raw_version_token: Optional[int]
    dialect_flags: FrozenSet[str]
    vendor_id: Optional[str] = None
    applied_quirk: Optional[str] = None


@dataclass(frozen=True)
class VendorQuirk:
    """
    A vendor-specific token rewrite.

    Properties:
        vendor_id: Vendor identifier this quirk applies to
        family: Family whose version token is rewritten
        rewrites: Raw token value -> standard token value
    """

    vendor_id: str
    family: LanguageFamily
    rewrites: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "family", LanguageFamily.coerce(self.family))

    def __hash__(self):
        return hash((self.vendor_id, self.family, tuple(sorted(self.rewrites.items()))))

    def rewrite(self, token: Optional[int]) -> Optional[int]:
        if token is None:
            return None
        return self.rewrites.get(token, token)


@dataclass(frozen=True)
class Dialect:
    """
    A non-ladder variant of a language family.

    Properties:
        name:
            Short identifier reported in results (e.g., "cli")

        flag:
            Dialect indicator that activates this recognition

        family:
            Family the dialect belongs to; it never fires for another

        revision:
            Name of the fixed revision this dialect resolves to, or None
            when the dialect is reported without overriding the ladder

        excludes:
            Capabilities the dialect removes from its revision's entitlements
    """

    name: str
    flag: str
    family: LanguageFamily
    revision: Optional[str] = None
    excludes: FrozenSet[Capability] = frozenset()
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "family", LanguageFamily.coerce(self.family))
        object.__setattr__(self, "excludes", frozenset(Capability(c) for c in self.excludes))


@dataclass(frozen=True)
class ClassificationResult:
    """
    What the classifier concludes about one snapshot.

    INVARIANTS:
        - at_least is a prefix of the family's ladder ending at resolved
        - resolved is None if and only if at_least is empty
        - a result carrying a dialect is never precise
    """

    family: LanguageFamily
    resolved: Optional[Revision] = None
    at_least: Tuple[Revision, ...] = ()
    dialects: FrozenSet[str] = frozenset()
    excluded_capabilities: FrozenSet[Capability] = frozenset()
    source: ResolutionSource = ResolutionSource.UNKNOWN
    applied_quirk: Optional[str] = None

    @property
    def is_unknown(self) -> bool:
        return self.resolved is None

    @property
    def precise(self) -> bool:
        """True when the revision was read off a version token, with no dialect involved."""
        return self.source is ResolutionSource.TOKEN and not self.dialects

    @property
    def resolved_name(self) -> str:
        return self.resolved.name if self.resolved is not None else UNKNOWN_REVISION_NAME

    @property
    def at_least_names(self) -> Tuple[str, ...]:
        return tuple(rev.name for rev in self.at_least)

    def is_at_least(self, name: str) -> bool:
        """
        Answer "is at least revision `name` enabled".

        Args:
            name: Canonical revision name or alias

        Returns:
            True if the named revision is in at_least
        """
        return any(rev.matches(name) for rev in self.at_least)

    def lacks(self, capability: Capability) -> bool:
        return capability in self.excluded_capabilities
