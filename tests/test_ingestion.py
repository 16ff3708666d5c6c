"""Tests for input CSV parsing and writing."""

import pytest

from escow.domain.models import InputRecord
from escow.ingestion import parse_input_csv, parse_input_rows, write_input_csv


class TestParseInputRows:
    """Tests for parse_input_rows."""

    def test_skips_header(self):
        text = "事業所名,住所\nさくら苑,東京都港区芝1-1\nひまわり,大阪府大阪市北区梅田1-1\n"

        records = parse_input_rows(text)

        assert records == [
            InputRecord(name="さくら苑", address="東京都港区芝1-1"),
            InputRecord(name="ひまわり", address="大阪府大阪市北区梅田1-1"),
        ]

    def test_quoted_fields_with_commas_and_quotes(self):
        text = 'name,address\n"さくら苑, 本館","東京都港区芝1-1 ""A棟"""\n'

        records = parse_input_rows(text)

        assert records == [InputRecord(name="さくら苑, 本館", address='東京都港区芝1-1 "A棟"')]

    def test_blank_and_short_rows_skipped(self):
        text = "\nname,address\n\nonly-one-field\nさくら苑,東京都\n,,\n"

        records = parse_input_rows(text)

        assert records == [InputRecord(name="さくら苑", address="東京都")]

    def test_fields_are_stripped_and_extra_columns_ignored(self):
        text = "name,address,note\n  さくら苑 , 東京都 ,memo\n"

        assert parse_input_rows(text) == [InputRecord(name="さくら苑", address="東京都")]

    def test_header_only(self):
        assert parse_input_rows("name,address\n") == []

    def test_crlf_line_endings(self):
        assert len(parse_input_rows("name,address\r\na,b\r\nc,d\r\n")) == 2


class TestInputCsvFiles:
    """Tests for parse_input_csv and write_input_csv."""

    def test_reads_utf8_with_bom(self, tmp_path):
        path = tmp_path / "input.csv"
        path.write_bytes("事業所名,住所\nさくら苑,東京都\n".encode("utf-8-sig"))

        records = parse_input_csv(path)

        assert records == [InputRecord(name="さくら苑", address="東京都")]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_input_csv(tmp_path / "missing.csv")

    def test_written_file_reads_back(self, tmp_path):
        records = [
            InputRecord(name="さくら苑, 本館", address="東京都港区芝1-1"),
            InputRecord(name="ひまわり", address="大阪府"),
        ]
        path = write_input_csv(tmp_path / "out" / "failed.csv", records)

        assert path.read_bytes().startswith(b"\xef\xbb\xbf")
        assert parse_input_csv(path) == records
