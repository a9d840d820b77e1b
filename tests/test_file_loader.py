"""
Tests for file_loader module
Tests CSV/TSV order file loading and error handling
"""

import pytest
import pandas as pd
import io
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from errors import RecordParseError
from file_loader import (
    detect_delimiter,
    parse_order_text,
    read_source_text,
    safe_read_orders,
)
from conftest import ORDERS_HEADER


class TestDetectDelimiter:
    """Test CSV vs TSV detection"""

    def test_comma_header(self):
        assert detect_delimiter("a,b,c\n1,2,3\n") == ","

    def test_tab_header(self):
        assert detect_delimiter("a\tb\tc\n1\t2\t3\n") == "\t"

    def test_extension_wins(self):
        """Test .tsv is tab-separated even if the header has commas"""
        assert detect_delimiter("a,b\n", file_name="Orders.TSV") == "\t"

    def test_skips_leading_blank_lines(self):
        assert detect_delimiter("\n\na\tb\n") == "\t"

    def test_default_is_comma(self):
        assert detect_delimiter("single\n") == ","


class TestParseOrderText:
    """Test delimited text parsing"""

    def test_csv(self, mock_orders_csv):
        df = parse_order_text(mock_orders_csv[1])
        assert list(df.columns) == ORDERS_HEADER
        assert len(df) == 6

    def test_tsv(self, mock_orders_tsv):
        df = parse_order_text(mock_orders_tsv[1], file_name=mock_orders_tsv[0])
        assert list(df.columns) == ORDERS_HEADER
        assert len(df) == 6

    def test_multiline_notes_preserved(self, mock_orders_csv):
        df = parse_order_text(mock_orders_csv[1])
        assert df.loc[0, "Recovery Date"] == "ETA 6/14\nPENDING"

    def test_values_are_strings(self, mock_orders_csv):
        """Test numbers stay strings and empty cells are empty strings"""
        df = parse_order_text(mock_orders_csv[1])
        assert df.loc[0, "Order"] == "1001"
        assert df.loc[2, "ShipBy"] == ""
        assert df.loc[2, "Recovery Date"] == ""
        assert not df.isna().any().any()

    def test_header_only(self):
        df = parse_order_text("Name,ShipBy,Recovery Date\n")
        assert df.empty
        assert list(df.columns) == ["Name", "ShipBy", "Recovery Date"]

    def test_empty_text_fails(self):
        with pytest.raises(RecordParseError):
            parse_order_text("   \n\n")

    def test_extra_fields_are_dropped(self):
        """Test a row with more fields than the header keeps the row"""
        df = parse_order_text("Name,ShipBy,Recovery Date\nAcme,06/10/25,ETA 6/14\nGlobex,06/12/25,ETA 6/20,extra\nInitech,06/15/25,\n")
        assert len(df) == 3
        assert list(df.columns) == ["Name", "ShipBy", "Recovery Date"]
        assert df.loc[1, "Name"] == "Globex"
        assert df.loc[1, "Recovery Date"] == "ETA 6/20"

    def test_short_rows_padded(self):
        df = parse_order_text("Name,ShipBy,Recovery Date\nAcme\n")
        assert df.loc[0, "Name"] == "Acme"
        assert df.loc[0, "ShipBy"] == ""
        assert df.loc[0, "Recovery Date"] == ""

    def test_trailing_delimiter_does_not_shift_columns(self):
        """Test rows ending with a delimiter stay aligned with the header"""
        df = parse_order_text("Name,ShipBy,Recovery Date\nAcme,06/10/25,ETA 6/14,\nGlobex,06/12/25,ETA 6/20,\n")
        assert list(df.index) == [0, 1]
        assert df.loc[0, "Name"] == "Acme"
        assert df.loc[0, "ShipBy"] == "06/10/25"
        assert df.loc[0, "Recovery Date"] == "ETA 6/14"

    def test_trailing_tab(self):
        df = parse_order_text("Name\tShipBy\nAcme\t06/10/25\t\n", delimiter="\t")
        assert df.loc[0, "Name"] == "Acme"
        assert df.loc[0, "ShipBy"] == "06/10/25"


class TestReadSourceText:
    """Test reading paths and buffers"""

    def test_bytes_buffer_with_bom(self):
        buffer = io.BytesIO("\ufeffName,ShipBy\nAcme,06/10/25\n".encode("utf-8"))
        assert read_source_text(buffer).startswith("Name,")

    def test_string_buffer(self):
        assert read_source_text(io.StringIO("Name\nAcme\n")) == "Name\nAcme\n"

    def test_invalid_encoding(self):
        with pytest.raises(RecordParseError):
            read_source_text(b"\xff\xfe\xfa bad bytes")

    def test_missing_path(self, tmp_path):
        with pytest.raises(RecordParseError):
            read_source_text(str(tmp_path / "missing.csv"))


class TestSafeReadOrders:
    """Test safe_read_orders functionality"""

    def test_reads_existing_file(self, orders_csv_path):
        df = safe_read_orders(None, orders_csv_path)
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 6

    def test_reads_buffer(self, uploaded_orders_buffer):
        df = safe_read_orders("orders", uploaded_orders_buffer)
        assert len(df) == 6

    def test_nonexistent_file(self, tmp_path):
        with pytest.raises(RecordParseError, match="File not found"):
            safe_read_orders(None, str(tmp_path / "nonexistent_file.csv"))

    def test_forced_delimiter(self, tmp_path):
        path = tmp_path / "orders.txt"
        path.write_text("Name;ShipBy\nAcme;06/10/25\n", encoding="utf-8")
        df = safe_read_orders(None, str(path), delimiter=";")
        assert list(df.columns) == ["Name", "ShipBy"]
