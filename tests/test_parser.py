"""
Unit tests for editstruct.parser

Tests parsing, declaration / member indexing and import extraction against
real Go syntax parsed by tree-sitter.
"""

from __future__ import annotations

import pytest

from editstruct.errors import ParseFailure, ReadFailure
from editstruct.parser import (
    ImportEntry,
    declaration_names,
    members,
    parse,
    parse_file,
    struct_members,
)


SIMPLE = b"""\
package test

type Example struct {
\tID    int64
\tTotal *int64 `json:"total"`
}
"""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParse:
    def test_buffer_is_verbatim_copy(self):
        unit = parse(SIMPLE, "types.go")
        assert unit.source() == SIMPLE
        assert unit.original == SIMPLE
        assert unit.modified is False

    def test_invalid_syntax_raises(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse(b"package test\ntype Example struct {", "broken.go")
        assert "parse file" in str(exc_info.value)
        assert "broken.go" in str(exc_info.value)

    def test_parse_file_reads_from_disk(self, tmp_path):
        p = tmp_path / "types.go"
        p.write_bytes(SIMPLE)
        unit = parse_file(str(p))
        assert unit.path == str(p)
        assert declaration_names(unit) == ["Example"]

    def test_parse_file_missing(self, tmp_path):
        with pytest.raises(ReadFailure) as exc_info:
            parse_file(str(tmp_path / "nope.go"))
        assert "read file" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class TestDeclarationNames:
    def test_file_order(self):
        src = b"""\
package test

type Example struct {
\tID int64
}

func DoSomething() {}

type Order struct {
\tCount int
}

const MaxSize = 100
"""
        unit = parse(src)
        assert declaration_names(unit) == ["Example", "Order"]

    def test_includes_non_struct_types(self):
        src = b"package test\n\ntype ID int64\n\ntype Alias = string\n"
        assert declaration_names(parse(src)) == ["ID", "Alias"]

    def test_grouped_declaration(self):
        src = b"""\
package test

type (
\tA struct {
\t\tX int
\t}
\tB int
)
"""
        assert declaration_names(parse(src)) == ["A", "B"]

    def test_restartable(self):
        unit = parse(SIMPLE)
        assert declaration_names(unit) == declaration_names(unit)

    def test_no_types(self):
        assert declaration_names(parse(b'package test\n\nconst Foo = "bar"\n')) == []


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

class TestMembers:
    def test_spans_cover_type_text_only(self):
        unit = parse(SIMPLE)
        found = members(unit, "Example")
        assert set(found) == {"ID", "Total"}
        total = found["Total"]
        assert SIMPLE[total.start:total.end] == b"*int64"
        assert total.span == (total.start, total.end)
        id_member = found["ID"]
        assert SIMPLE[id_member.start:id_member.end] == b"int64"

    def test_embedded_fields_skipped(self):
        src = b"""\
package test

type Example struct {
\tBase
\t*Other
\tName string
}
"""
        assert list(members(parse(src), "Example")) == ["Name"]

    def test_shared_type_multiple_names(self):
        src = b"package test\n\ntype P struct {\n\tX, Y int\n}\n"
        found = struct_members(parse(src), "P")
        assert [m.name for m in found] == ["X", "Y"]
        assert found[0].span == found[1].span

    def test_non_struct_yields_empty(self):
        unit = parse(b"package test\n\ntype ID int64\n")
        assert members(unit, "ID") == {}

    def test_unknown_declaration_yields_empty(self):
        assert members(parse(SIMPLE), "Missing") == {}

    def test_duplicate_names_all_visited(self):
        src = b"""\
package test

type Example struct {
\tA int
}

type Example struct {
\tB int
}
"""
        found = struct_members(parse(src), "Example")
        assert [m.name for m in found] == ["A", "B"]


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

class TestImportEntries:
    def test_default_alias_is_last_segment(self):
        src = b"""\
package test

import (
\t"fmt"
\t"github.com/google/uuid"
\tstr "strings"
)
"""
        unit = parse(src)
        assert unit.imports == [
            ImportEntry(alias="fmt", path="fmt"),
            ImportEntry(alias="uuid", path="github.com/google/uuid"),
            ImportEntry(alias="str", path="strings", explicit=True),
        ]

    def test_single_import(self):
        unit = parse(b'package test\n\nimport "time"\n')
        assert unit.imports == [ImportEntry(alias="time", path="time")]

    def test_no_imports(self):
        assert parse(SIMPLE).imports == []
