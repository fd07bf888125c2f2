"""Tests for loading and writing dex/nodes.tsv."""

import pytest

from conftest import SEED_TSV, utc
from keg.dexfile import dump_dex, load_dex, loads_tsv, parse_id, parse_timestamp
from keg.errors import ErrorCode, IdentifierParseError, KegError
from keg.models import Dex, DexEntry


class TestParseId:
    def test_plain_integer(self):
        assert parse_id("42") == 42

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_id(" 7 ") == 7

    @pytest.mark.parametrize("value", ["", "abc", "-1", "1.5", "0x10"])
    def test_invalid_identifier(self, value):
        with pytest.raises(IdentifierParseError) as exc:
            parse_id(value)
        assert exc.value.code == ErrorCode.INVALID_IDENTIFIER
        assert "could not parse identifier" in exc.value.message


class TestParseTimestamp:
    def test_valid(self):
        assert parse_timestamp("2024-02-29 13:45:07Z") == utc(2024, 2, 29, 13, 45, 7)

    @pytest.mark.parametrize(
        "value",
        ["2024-02-29T13:45:07Z", "2024-02-29 13:45Z", "2023-02-30 00:00:00Z", "yesterday"],
    )
    def test_invalid(self, value):
        with pytest.raises(KegError) as exc:
            parse_timestamp(value)
        assert exc.value.code == ErrorCode.PARSE_ERROR


class TestLoadsTsv:
    def test_keeps_file_order(self):
        dex = loads_tsv(SEED_TSV)
        assert [e.id for e in dex] == [3, 1, 12]
        assert dex[2].title == "Go <b>Generics</b> & Alphabets"
        assert dex[2].updated == utc(2024, 2, 29, 13, 45, 7)

    def test_reads_back_what_tsv_writes(self):
        assert loads_tsv(SEED_TSV).tsv() == SEED_TSV

    def test_blank_lines_are_skipped(self):
        dex = loads_tsv("\n1\t2023-01-01 00:00:00Z\tOne\n\n")
        assert len(dex) == 1

    def test_title_may_contain_tabs(self):
        dex = loads_tsv("1\t2023-01-01 00:00:00Z\ta\tb\n")
        assert dex[0].title == "a\tb"

    def test_empty_title(self):
        dex = loads_tsv("1\t2023-01-01 00:00:00Z\t\n")
        assert dex[0].title == ""

    def test_missing_columns_report_line(self):
        with pytest.raises(KegError) as exc:
            loads_tsv("1\t2023-01-01 00:00:00Z\tOne\n2\t2023-01-01 00:00:00Z\n")
        assert exc.value.code == ErrorCode.PARSE_ERROR
        assert exc.value.details["line"] == 2

    def test_bad_identifier_reports_line(self):
        with pytest.raises(IdentifierParseError) as exc:
            loads_tsv("x1\t2023-01-01 00:00:00Z\tOne\n")
        assert exc.value.details["line"] == 1


class TestLoadAndDump:
    def test_missing_file(self, tmp_path):
        with pytest.raises(KegError) as exc:
            load_dex(tmp_path / "dex" / "nodes.tsv")
        assert exc.value.code == ErrorCode.DEX_NOT_FOUND

    def test_dump_creates_parents_and_loads_back(self, tmp_path):
        path = tmp_path / "dex" / "nodes.tsv"
        dex = Dex([DexEntry(updated=utc(2023, 1, 1), title="日本 & <i>", id=5)])
        dump_dex(dex, path)
        assert path.read_text(encoding="utf-8") == "5\t2023-01-01 00:00:00Z\t日本 & <i>\n"
        assert load_dex(path) == dex

    def test_empty_file_is_empty_dex(self, tmp_path):
        path = tmp_path / "nodes.tsv"
        path.write_text("")
        assert load_dex(path) == Dex()

    @pytest.mark.parametrize(
        "title",
        [
            "a\u2028b",
            "para\u2029graph",
            "form\x0cfeed",
            "vertical\x0btab",
            "x\x1cy\x1dz\x1e",
            "nel\x85z",
            "lone\rreturn",
        ],
    )
    def test_titles_with_other_line_separators_load_back(self, tmp_path, title):
        path = tmp_path / "dex" / "nodes.tsv"
        dex = Dex(
            [
                DexEntry(updated=utc(2023, 1, 1), title=title, id=1),
                DexEntry(updated=utc(2023, 1, 2), title="After", id=2),
            ]
        )
        dump_dex(dex, path)
        assert load_dex(path) == dex
