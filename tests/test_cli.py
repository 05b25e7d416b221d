"""Tests for the editstruct command line and per-file orchestration."""

import pytest

from editstruct.cli import main, process_file
from editstruct.config import TypeConfig


EXAMPLE = """\
package test

type Example struct {
\tID    int64
\tTotal *int64
}
"""

CONFIG = """\
type: Example
fields:
  Total: time.Time
---
type: Unrelated
fields:
  ID: uuid.UUID
"""


@pytest.fixture()
def project(tmp_path, monkeypatch):
    """A working directory with edit.yaml and one Go file."""
    (tmp_path / "edit.yaml").write_text(CONFIG, encoding="utf-8")
    (tmp_path / "types.go").write_text(EXAMPLE, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    for key in ("EDITSTRUCT_CONFIG", "EDITSTRUCT_DIR",
                "EDITSTRUCT_RECURSIVE", "EDITSTRUCT_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


class TestProcessFile:
    def test_rewrites_and_adds_only_needed_imports(self, project):
        configs = [
            TypeConfig(type="Example", fields={"Total": "time.Time"}),
            TypeConfig(type="Unrelated", fields={"ID": "uuid.UUID"}),
        ]
        result = process_file(str(project / "types.go"), configs)
        assert result.modified is True
        content = (project / "types.go").read_text(encoding="utf-8")
        assert content == (
            "package test\n\n"
            'import (\n\t"time"\n)\n\n'
            "type Example struct {\n"
            "\tID    int64\n"
            "\tTotal time.Time\n"
            "}\n"
        )
        assert result.after == content.encode()

    def test_unmodified_file_not_written(self, project):
        path = project / "types.go"
        before = path.stat().st_mtime_ns
        result = process_file(str(path), [TypeConfig(type="Example", fields={"ID": "int64"})])
        assert result.modified is False
        assert path.stat().st_mtime_ns == before

    def test_later_config_for_same_type_wins(self, project):
        configs = [
            TypeConfig(type="Example", fields={"Total": "int32"}),
            TypeConfig(type="Example", fields={"Total": "uint64"}),
        ]
        process_file(str(project / "types.go"), configs)
        assert "Total uint64" in (project / "types.go").read_text()

    def test_dry_run_leaves_file(self, project):
        path = project / "types.go"
        result = process_file(
            str(path), [TypeConfig(type="Example", fields={"Total": "uint64"})],
            dry_run=True,
        )
        assert result.modified is True
        assert b"Total uint64" in result.after
        assert path.read_text() == EXAMPLE


class TestMain:
    def test_success(self, project):
        assert main([]) == 0
        assert "Total time.Time" in (project / "types.go").read_text()

    def test_missing_config(self, project, capsys):
        assert main(["--config", "nope.yaml"]) == 1
        assert "config file not found: nope.yaml" in capsys.readouterr().err

    def test_invalid_config(self, project, capsys):
        (project / "edit.yaml").write_text("type: [broken", encoding="utf-8")
        assert main([]) == 1
        assert "load config" in capsys.readouterr().err

    def test_empty_config_touches_nothing(self, project):
        (project / "edit.yaml").write_text("type: OnlyType\n", encoding="utf-8")
        assert main([]) == 0
        assert (project / "types.go").read_text() == EXAMPLE

    def test_invalid_go_file_fails(self, project, capsys):
        (project / "broken.go").write_text("package test\ntype X struct {", encoding="utf-8")
        assert main([]) == 1
        err = capsys.readouterr().err
        assert "process" in err
        assert "broken.go" in err

    def test_test_files_ignored(self, project):
        (project / "types_test.go").write_text(EXAMPLE, encoding="utf-8")
        assert main([]) == 0
        assert (project / "types_test.go").read_text() == EXAMPLE

    def test_dry_run_with_diff(self, project, capsys):
        assert main(["--dry-run", "--diff"]) == 0
        out = capsys.readouterr().out
        assert "-\tTotal *int64" in out
        assert "+\tTotal time.Time" in out
        assert (project / "types.go").read_text() == EXAMPLE

    def test_recursive_and_dir(self, project):
        sub = project / "models"
        sub.mkdir()
        (sub / "model.go").write_text(EXAMPLE, encoding="utf-8")
        assert main(["--dir", "models"]) == 0
        assert "Total time.Time" in (sub / "model.go").read_text()
        assert (project / "types.go").read_text() == EXAMPLE

        (sub / "model.go").write_text(EXAMPLE, encoding="utf-8")
        assert main(["--recursive"]) == 0
        assert "Total time.Time" in (sub / "model.go").read_text()
        assert "Total time.Time" in (project / "types.go").read_text()
