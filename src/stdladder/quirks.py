"""
Quirks & Dialect Table

A static, data-driven mapping consulted by the normalizer and the resolver:
    - vendor quirks rewrite a vendor's irregular version token
    - dialect recognitions fix a snapshot to one revision, bypassing the ladder

The table is the only configurable data in stdladder. New vendors and
dialects are added here (in code, or from YAML) without touching the
resolver.

YAML format:

    vendors:
      hp_acc:
        family: CPP
        rewrites:
          199710: 199711
    dialects:            # priority order, first match wins
      - name: cli
        flag: __cplusplus_cli
        family: CPP
        revision: C++98
      - name: embedded
        flag: __embedded_cplusplus
        family: CPP
        revision: C++pre
        excludes: [exceptions, templates]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

import yaml

from stdladder.ladders import get_ladder
from stdladder.model import (
    Capability,
    Dialect,
    InvalidLanguageFamily,
    LanguageFamily,
    StdLadderError,
    VendorQuirk,
)

logger = logging.getLogger(__name__)


class QuirksTableError(StdLadderError, ValueError):
    """Raised when a quirks table is malformed."""
    pass


def _check_dialect(dialect: Dialect) -> None:
    ladder = get_ladder(dialect.family)
    if ladder is None:
        raise QuirksTableError(f"Dialect {dialect.name!r} must belong to C or CPP")
    if dialect.revision is not None and ladder.get(dialect.revision) is None:
        raise QuirksTableError(
            f"Dialect {dialect.name!r} names unknown {dialect.family.value} revision {dialect.revision!r}"
        )


@dataclass(frozen=True)
class QuirksTable:
    """
    Vendor quirks and dialect recognitions.

    Properties:
        vendors:
            vendor_id -> VendorQuirk

        dialects:
            Dialect recognitions in priority order (first wins)
    """

    vendors: Dict[str, VendorQuirk] = field(default_factory=dict)
    dialects: Tuple[Dialect, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "dialects", tuple(self.dialects))
        seen = set()
        for dialect in self.dialects:
            if dialect.name in seen:
                raise QuirksTableError(f"Duplicate dialect name: {dialect.name!r}")
            seen.add(dialect.name)
            _check_dialect(dialect)
        for vendor_id, quirk in self.vendors.items():
            if vendor_id != quirk.vendor_id:
                raise QuirksTableError(f"Vendor key {vendor_id!r} does not match quirk id {quirk.vendor_id!r}")

    def vendor_quirk(self, vendor_id: Optional[str], family: LanguageFamily) -> Optional[VendorQuirk]:
        """
        Retrieve the quirk for a vendor, if it applies to this family.

        Args:
            vendor_id: Vendor identifier (may be None)
            family: Family being classified

        Returns:
            VendorQuirk or None
        """
        if vendor_id is None:
            return None
        quirk = self.vendors.get(vendor_id)
        if quirk is None or quirk.family is not family:
            return None
        return quirk

    def get_dialect(self, name: str) -> Optional[Dialect]:
        for dialect in self.dialects:
            if dialect.name == name:
                return dialect
        return None

    def select_dialect(self, dialect_flags: FrozenSet[str], family: LanguageFamily) -> Optional[Dialect]:
        """
        Pick the one dialect recognition that fires for a snapshot.

        Dialects of another family never fire. When more than one
        flag is active the table's priority order decides.

        Returns:
            Highest-priority matching Dialect, or None
        """
        active = [d for d in self.dialects if d.family is family and d.flag in dialect_flags]
        if not active:
            return None
        if len(active) > 1:
            logger.warning(
                "Multiple dialect flags active (%s); using %r",
                ", ".join(d.flag for d in active),
                active[0].name,
            )
        return active[0]

    def override(self, other: "QuirksTable") -> "QuirksTable":
        """
        Layer another table on top of this one.

        Vendors are merged by id (other wins). A dialect in `other` with the
        same name replaces this table's entry in place; new dialects are
        appended at the lowest priority.
        """
        vendors = dict(self.vendors)
        vendors.update(other.vendors)

        replacements = {d.name: d for d in other.dialects}
        dialects = [replacements.pop(d.name, d) for d in self.dialects]
        dialects.extend(d for d in other.dialects if d.name in replacements)

        return QuirksTable(vendors=vendors, dialects=tuple(dialects))

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "QuirksTable":
        if d is None:
            return cls()
        if not isinstance(d, dict):
            raise QuirksTableError("Quirks table must be a mapping")

        vendor_entries = d.get("vendors") or {}
        dialect_entries = d.get("dialects") or []
        if not isinstance(vendor_entries, dict):
            raise QuirksTableError("'vendors' must be a mapping of vendor id to quirk")
        if not isinstance(dialect_entries, list):
            raise QuirksTableError("'dialects' must be a list in priority order")

        vendors = {}
        for vendor_id, entry in vendor_entries.items():
            vendors[str(vendor_id)] = _vendor_from_dict(str(vendor_id), entry)

        dialects = [_dialect_from_dict(entry) for entry in dialect_entries]
        return cls(vendors=vendors, dialects=tuple(dialects))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendors": {
                vendor_id: {
                    "family": quirk.family.value,
                    "rewrites": dict(sorted(quirk.rewrites.items())),
                }
                for vendor_id, quirk in sorted(self.vendors.items())
            },
            "dialects": [
                {
                    "name": d.name,
                    "flag": d.flag,
                    "family": d.family.value,
                    "revision": d.revision,
                    "excludes": sorted(c.value for c in d.excludes),
                    "description": d.description,
                }
                for d in self.dialects
            ],
        }


def _vendor_from_dict(vendor_id: str, entry: Any) -> VendorQuirk:
    if not isinstance(entry, dict):
        raise QuirksTableError(f"Vendor {vendor_id!r} must be a mapping")
    try:
        family = LanguageFamily.coerce(entry.get("family"))
        rewrites = {int(k): int(v) for k, v in (entry.get("rewrites") or {}).items()}
    except InvalidLanguageFamily as e:
        raise QuirksTableError(f"Vendor {vendor_id!r}: {e}") from e
    except (AttributeError, TypeError, ValueError) as e:
        raise QuirksTableError(f"Vendor {vendor_id!r} has a non-integer rewrite: {e}") from e
    if family is LanguageFamily.NONE:
        raise QuirksTableError(f"Vendor {vendor_id!r} must name family C or CPP")
    return VendorQuirk(vendor_id=vendor_id, family=family, rewrites=rewrites)


def _dialect_from_dict(entry: Any) -> Dialect:
    if not isinstance(entry, dict):
        raise QuirksTableError("Dialect entries must be mappings")
    try:
        name = entry["name"]
        flag = entry["flag"]
    except KeyError as e:
        raise QuirksTableError(f"Dialect entry missing {e.args[0]!r}") from e
    if not isinstance(name, str) or not isinstance(flag, str):
        raise QuirksTableError(f"Dialect {name!r}: 'name' and 'flag' must be strings")
    excludes = entry.get("excludes") or []
    if not isinstance(excludes, list):
        raise QuirksTableError(f"Dialect {name!r}: 'excludes' must be a list of capabilities")
    try:
        family = LanguageFamily.coerce(entry.get("family"))
        capabilities = frozenset(Capability(c) for c in excludes)
    except InvalidLanguageFamily as e:
        raise QuirksTableError(f"Dialect {name!r}: {e}") from e
    except ValueError as e:
        raise QuirksTableError(f"Dialect {name!r} excludes an unknown capability: {e}") from e
    return Dialect(
        name=name,
        flag=flag,
        family=family,
        revision=entry.get("revision"),
        excludes=capabilities,
        description=entry.get("description"),
    )


DEFAULT_TABLE = QuirksTable(
    vendors={
        # HP aCC reports its C++98 support one below the mandated 199711
        "hp_acc": VendorQuirk("hp_acc", LanguageFamily.CPP, {199710: 199711}),
    },
    dialects=(
        Dialect(
            name="cli",
            flag="__cplusplus_cli",
            family=LanguageFamily.CPP,
            revision="C++98",
            description="C++/CLI (ECMA-372)",
        ),
        # C++/CX needs the C++11-era MSVC toolset; /ZW builds still report
        # __cplusplus 199711, so the dialect overrides the token.
        Dialect(
            name="winrt",
            flag="__cplusplus_winrt",
            family=LanguageFamily.CPP,
            revision="C++11",
            description="C++/CX Windows Runtime extensions",
        ),
        Dialect(
            name="embedded",
            flag="__embedded_cplusplus",
            family=LanguageFamily.CPP,
            revision="C++pre",
            excludes=frozenset({
                Capability.EXCEPTIONS,
                Capability.MULTIPLE_INHERITANCE,
                Capability.RTTI,
                Capability.TEMPLATES,
                Capability.NAMESPACES,
            }),
            description="Embedded C++",
        ),
    ),
)


def load_table_string(text: str, base: Optional[QuirksTable] = DEFAULT_TABLE) -> QuirksTable:
    """
    Load a table from YAML text.

    Args:
        text: YAML document
        base: Table the loaded one overrides; None to use it standalone

    Returns:
        QuirksTable

    Raises:
        QuirksTableError: If the YAML is invalid or the table malformed
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise QuirksTableError(f"Invalid YAML in quirks table: {e}") from e
    table = QuirksTable.from_dict(data)
    if base is None:
        return table
    return base.override(table)


def load_table(path: Union[str, Path], base: Optional[QuirksTable] = DEFAULT_TABLE) -> QuirksTable:
    """
    Load a table from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        QuirksTableError: If the table is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Quirks table not found: {path}")
    logger.debug("Loading quirks table from %s", path)
    return load_table_string(path.read_text(encoding="utf-8"), base=base)


def table_to_yaml(table: QuirksTable) -> str:
    return yaml.safe_dump(table.to_dict(), sort_keys=False)
