"""
Serialization helpers for stdladder objects (SignalSnapshot, ClassificationResult).

Provides JSON/YAML round-trip via intermediate dict representation.
Revisions are serialized by name and resolved against the built-in ladders
on the way back in.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import yaml

from stdladder.ladders import get_ladder
from stdladder.model import (
    Capability,
    ClassificationResult,
    LanguageFamily,
    ResolutionSource,
    Revision,
    SignalSnapshot,
    StdLadderError,
    UNKNOWN_REVISION_NAME,
)


class SerializationError(StdLadderError, ValueError):
    """Raised when a serialized snapshot or result has the wrong shape."""
    pass


def _flag_list(d: Dict[str, Any], key: str) -> List[str]:
    value = d.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SerializationError(f"'{key}' must be a list of macro names")
    return value


def _version_token(d: Dict[str, Any]) -> Optional[int]:
    token = d.get("version_token")
    if token is None:
        return None
    if isinstance(token, bool) or not isinstance(token, int):
        raise SerializationError(f"'version_token' must be an integer, got {token!r}")
    return token


def snapshot_to_dict(s: SignalSnapshot) -> Dict[str, Any]:
    return {
        "language_family": s.language_family.value,
        "presence_flags": sorted(s.presence_flags),
        "version_token": s.version_token,
        "dialect_flags": sorted(s.dialect_flags),
        "vendor_id": s.vendor_id,
    }


def snapshot_from_dict(d: Dict[str, Any]) -> SignalSnapshot:
    if not isinstance(d, dict):
        raise SerializationError(f"Snapshot must be a mapping, got {type(d).__name__}")
    vendor_id = d.get("vendor_id")
    return SignalSnapshot(
        language_family=d.get("language_family", LanguageFamily.NONE.value),
        presence_flags=_flag_list(d, "presence_flags"),
        version_token=_version_token(d),
        dialect_flags=_flag_list(d, "dialect_flags"),
        vendor_id=str(vendor_id) if vendor_id is not None else None,
    )


def _revision_from_name(family: LanguageFamily, name: str) -> Revision:
    ladder = get_ladder(family)
    revision = ladder.get(name) if ladder is not None else None
    if revision is None:
        raise SerializationError(f"Unknown {family.value} revision: {name}")
    return revision


def result_to_dict(r: ClassificationResult) -> Dict[str, Any]:
    return {
        "family": r.family.value,
        "resolved": r.resolved_name,
        "at_least": list(r.at_least_names),
        "dialects": sorted(r.dialects),
        "excluded_capabilities": sorted(c.value for c in r.excluded_capabilities),
        "source": r.source.value,
        "precise": r.precise,
        "applied_quirk": r.applied_quirk,
    }


def result_from_dict(d: Dict[str, Any]) -> ClassificationResult:
    if not isinstance(d, dict):
        raise SerializationError(f"Result must be a mapping, got {type(d).__name__}")
    if "family" not in d:
        raise SerializationError("Result is missing 'family'")
    family = LanguageFamily.coerce(d["family"])
    name = d.get("resolved", UNKNOWN_REVISION_NAME)
    resolved = None if name == UNKNOWN_REVISION_NAME else _revision_from_name(family, name)
    at_least: List[Revision] = [_revision_from_name(family, n) for n in d.get("at_least", [])]
    return ClassificationResult(
        family=family,
        resolved=resolved,
        at_least=tuple(at_least),
        dialects=frozenset(d.get("dialects", [])),
        excluded_capabilities=frozenset(Capability(c) for c in d.get("excluded_capabilities", [])),
        source=ResolutionSource(d.get("source", ResolutionSource.UNKNOWN.value)),
        applied_quirk=d.get("applied_quirk"),
    )


def _load_yaml(s: str) -> Any:
    try:
        return yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SerializationError(f"Invalid YAML: {e}") from e


def snapshot_to_json(s: SignalSnapshot) -> str:
    return json.dumps(snapshot_to_dict(s), sort_keys=True)


def snapshot_from_json(s: str) -> SignalSnapshot:
    return snapshot_from_dict(json.loads(s))


def snapshot_to_yaml(s: SignalSnapshot) -> str:
    return yaml.safe_dump(snapshot_to_dict(s))


def snapshot_from_yaml(s: str) -> SignalSnapshot:
    return snapshot_from_dict(_load_yaml(s))


def result_to_json(r: ClassificationResult) -> str:
    return json.dumps(result_to_dict(r), sort_keys=True)


def result_from_json(s: str) -> ClassificationResult:
    return result_from_dict(json.loads(s))


def result_to_yaml(r: ClassificationResult) -> str:
    return yaml.safe_dump(result_to_dict(r), sort_keys=False)


def result_from_yaml(s: str) -> ClassificationResult:
    return result_from_dict(_load_yaml(s))
