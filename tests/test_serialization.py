"""
Tests for serialization and deserialization of stdladder objects.

These tests ensure snapshots and results survive JSON/YAML using the
explicit serialization functions in `stdladder.serialization`.
"""

import json

import pytest
from stdladder import classify
from stdladder.model import Capability, LanguageFamily, SignalSnapshot
from stdladder.serialization import (
    SerializationError,
    result_from_dict,
    result_from_json,
    result_from_yaml,
    result_to_dict,
    result_to_json,
    result_to_yaml,
    snapshot_from_dict,
    snapshot_from_json,
    snapshot_from_yaml,
    snapshot_to_dict,
    snapshot_to_json,
    snapshot_to_yaml,
)


def build_sample_snapshot() -> SignalSnapshot:
    return SignalSnapshot(
        language_family=LanguageFamily.CPP,
        presence_flags={"__cplusplus", "__STDC_HOSTED__"},
        version_token=199710,
        dialect_flags={"__embedded_cplusplus"},
        vendor_id="hp_acc",
    )


def test_snapshot_dict_shape():
    d = snapshot_to_dict(build_sample_snapshot())
    assert d == {
        "language_family": "CPP",
        "presence_flags": ["__STDC_HOSTED__", "__cplusplus"],
        "version_token": 199710,
        "dialect_flags": ["__embedded_cplusplus"],
        "vendor_id": "hp_acc",
    }


def test_snapshot_json_roundtrip():
    snapshot = build_sample_snapshot()
    assert snapshot_from_json(snapshot_to_json(snapshot)) == snapshot


def test_snapshot_yaml_roundtrip():
    snapshot = build_sample_snapshot()
    assert snapshot_from_yaml(snapshot_to_yaml(snapshot)) == snapshot


def test_snapshot_from_sparse_dict():
    """Missing keys default to an empty snapshot."""
    snapshot = snapshot_from_dict({"language_family": "C", "presence_flags": ["__STDC__"]})
    assert snapshot.language_family is LanguageFamily.C
    assert snapshot.version_token is None
    assert snapshot.dialect_flags == frozenset()


def test_snapshot_from_non_mapping():
    with pytest.raises(SerializationError):
        snapshot_from_dict(["__STDC__"])


def test_result_dict_shape():
    result = classify(build_sample_snapshot())
    d = result_to_dict(result)
    assert d["family"] == "CPP"
    assert d["resolved"] == "C++pre"
    assert d["at_least"] == ["C++pre"]
    assert d["dialects"] == ["embedded"]
    assert d["source"] == "dialect"
    assert d["precise"] is False
    assert "rtti" in d["excluded_capabilities"]


def test_result_json_roundtrip():
    result = classify(SignalSnapshot(LanguageFamily.C, {"__STDC__"}, 201112))
    restored = result_from_json(result_to_json(result))
    assert restored == result
    assert json.loads(result_to_json(result))["precise"] is True


def test_result_yaml_roundtrip():
    result = classify(build_sample_snapshot())
    restored = result_from_yaml(result_to_yaml(result))
    assert restored == result
    assert restored.lacks(Capability.NAMESPACES)


def test_unknown_result_roundtrip():
    result = classify(SignalSnapshot(LanguageFamily.C))
    d = result_to_dict(result)
    assert d["resolved"] == "unknown"
    assert d["at_least"] == []
    assert result_from_dict(d) == result


def test_unknown_revision_name_rejected():
    with pytest.raises(SerializationError):
        result_from_dict({"family": "C", "resolved": "C2y", "at_least": ["C89"]})


def test_snapshot_scalar_flag_is_one_flag():
    """A single macro name written as a scalar stays one flag."""
    snapshot = snapshot_from_yaml("language_family: C\npresence_flags: __STDC__\nversion_token: 201112\n")
    assert snapshot.presence_flags == frozenset({"__STDC__"})
    assert classify(snapshot).resolved_name == "C11"


def test_snapshot_scalar_dialect_flag():
    snapshot = snapshot_from_dict({"language_family": "CPP", "dialect_flags": "__cplusplus_cli"})
    assert snapshot.dialect_flags == frozenset({"__cplusplus_cli"})


@pytest.mark.parametrize("data", [
    {"language_family": "C", "presence_flags": {"__STDC__": 1}},
    {"language_family": "C", "presence_flags": 1},
    {"language_family": "C", "presence_flags": ["__STDC__", 2]},
    {"language_family": "CPP", "dialect_flags": 7},
    {"language_family": "C", "version_token": True},
    {"language_family": "C", "version_token": "201112L"},
    {"language_family": "C", "version_token": 2011.12},
])
def test_snapshot_bad_field_types(data):
    with pytest.raises(SerializationError):
        snapshot_from_dict(data)


def test_snapshot_invalid_yaml():
    with pytest.raises(SerializationError):
        snapshot_from_yaml("presence_flags: [__STDC__\n")


@pytest.mark.parametrize("data", [
    ["C11"],
    {"resolved": "C11"},
])
def test_result_bad_shape(data):
    with pytest.raises(SerializationError):
        result_from_dict(data)
