"""
Tests for the stdladder command-line interface.

Commands are run in-process through main() with capsys capturing output.
"""

import io
import json

import pytest
from stdladder.cli import TABLE_ENV_VAR, main


GCC_DUMP = "#define __STDC__ 1\n#define __STDC_VERSION__ 201112L\n#define __GNUC__ 13\n"


@pytest.fixture(autouse=True)
def no_table_env(monkeypatch):
    monkeypatch.delenv(TABLE_ENV_VAR, raising=False)


class TestClassifyCommand:
    """Test `stdladder classify`."""

    def test_macros_file_text(self, tmp_path, capsys):
        path = tmp_path / "gcc.txt"
        path.write_text(GCC_DUMP)
        assert main(["classify", "--macros", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Resolved:    C11" in out
        assert "C89, C90, C94, C99, C11" in out
        assert "(precise)" in out

    def test_macros_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(GCC_DUMP))
        assert main(["classify", "--macros", "-", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["resolved"] == "C11"

    def test_snapshot_yaml(self, tmp_path, capsys):
        path = tmp_path / "snapshot.yaml"
        path.write_text(
            "language_family: CPP\n"
            "presence_flags: [__cplusplus]\n"
            "version_token: 201703\n"
        )
        assert main(["classify", "--snapshot", str(path), "--format", "yaml"]) == 0
        assert "resolved: C++17" in capsys.readouterr().out

    def test_snapshot_scalar_flag(self, tmp_path, capsys):
        path = tmp_path / "snapshot.yaml"
        path.write_text("language_family: C\npresence_flags: __STDC__\nversion_token: 201112\n")
        assert main(["classify", "--snapshot", str(path), "--format", "json"]) == 0
        assert json.loads(capsys.readouterr().out)["resolved"] == "C11"

    @pytest.mark.parametrize("text", [
        "language_family: C\nversion_token: true\n",
        "language_family: C\npresence_flags: {__STDC__: 1}\n",
        "- __STDC__\n",
        "presence_flags: [__STDC__\n",
    ])
    def test_bad_snapshot(self, tmp_path, capsys, text):
        path = tmp_path / "snapshot.yaml"
        path.write_text(text)
        assert main(["classify", "--snapshot", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_example_header(self, capsys):
        assert main(["classify", "--example", "embedded-cpp", "--format", "header"]) == 0
        out = capsys.readouterr().out
        assert "#define STANDARD_CPP 0" in out
        assert "#define STANDARD_CPP_EMB" in out

    def test_flags_with_prefix(self, capsys):
        assert main(["classify", "--example", "gcc-c89", "--format", "flags", "--prefix", "MY_"]) == 0
        assert capsys.readouterr().out.strip() == "-DMY_C=1989 -DMY_C_1989"

    def test_vendor_override(self, capsys):
        assert main([
            "classify", "--example", "hp-acc-cpp98", "--vendor", "acme", "--format", "json",
        ]) == 0
        assert json.loads(capsys.readouterr().out)["resolved"] == "C++pre"

    def test_family_override(self, capsys):
        assert main(["classify", "--example", "gcc-c17", "--family", "none", "--format", "json"]) == 0
        assert json.loads(capsys.readouterr().out)["resolved"] == "unknown"

    def test_invalid_family(self, capsys):
        assert main(["classify", "--example", "gcc-c17", "--family", "Ada"]) == 1
        assert "Invalid language family" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["classify", "--macros", str(tmp_path / "nope.txt")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_table_override(self, tmp_path, capsys):
        table = tmp_path / "table.yaml"
        table.write_text("dialects:\n  - {name: cli, flag: __cplusplus_cli, family: CPP, revision: C++11}\n")
        assert main([
            "classify", "--example", "msvc-cli", "--table", str(table), "--format", "json",
        ]) == 0
        assert json.loads(capsys.readouterr().out)["resolved"] == "C++11"

    def test_table_from_environment(self, tmp_path, monkeypatch, capsys):
        table = tmp_path / "table.yaml"
        table.write_text("vendors:\n  gcc: {family: C, rewrites: {201710: 202311}}\n")
        monkeypatch.setenv(TABLE_ENV_VAR, str(table))
        assert main(["classify", "--example", "gcc-c17", "--format", "json"]) == 0
        assert json.loads(capsys.readouterr().out)["resolved"] == "C23"

    def test_bad_table(self, tmp_path, capsys):
        table = tmp_path / "table.yaml"
        table.write_text("dialects: {oops: 1}\n")
        assert main(["classify", "--example", "gcc-c17", "--table", str(table)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_table_with_non_string_dialect_name(self, tmp_path, capsys):
        table = tmp_path / "table.yaml"
        table.write_text("dialects:\n  - {name: 7, flag: __cplusplus_cli, family: CPP, revision: C++11}\n")
        assert main(["classify", "--example", "msvc-cli", "--table", str(table), "--format", "header"]) == 1
        assert "must be strings" in capsys.readouterr().err

    def test_source_required(self):
        with pytest.raises(SystemExit) as exc:
            main(["classify"])
        assert exc.value.code == 2


class TestOtherCommands:
    """Test `stdladder ladder` and `stdladder table`."""

    def test_ladder_all(self, capsys):
        assert main(["ladder"]) == 0
        out = capsys.readouterr().out
        assert "C (base indicator __STDC__)" in out
        assert "C++23" in out

    def test_ladder_one_family(self, capsys):
        assert main(["ladder", "C"]) == 0
        out = capsys.readouterr().out
        assert "C17" in out
        assert "C++" not in out

    def test_ladder_none(self, capsys):
        assert main(["ladder", "none"]) == 0
        assert "no ladder" in capsys.readouterr().out

    def test_table(self, capsys):
        assert main(["table"]) == 0
        out = capsys.readouterr().out
        assert "hp_acc" in out
        assert "__embedded_cplusplus" in out

    def test_no_command(self, capsys):
        assert main([]) == 2
