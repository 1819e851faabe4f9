from __future__ import annotations

from chartprep.services.parsing.delimited import detect_delimiter, parse_text


def test_parse_csv_with_headers() -> None:
    result = parse_text("Name,Value\nAlpha,100\nBeta,200\nGamma,300")
    assert result.row_count == 3
    assert result.headers == ["Name", "Value"]
    assert result.rows[0] == {"Name": "Alpha", "Value": "100"}
    assert result.errors == []
    assert result.ok


def test_parse_tsv() -> None:
    result = parse_text("Name\tValue\nAlpha\t100\nBeta\t200")
    assert result.delimiter == "\t"
    assert result.row_count == 2
    assert result.headers == ["Name", "Value"]


def test_parse_semicolon_with_decimal_commas() -> None:
    result = parse_text("Name;Value\nAlpha;1,5\nBeta;2,5")
    assert result.delimiter == ";"
    assert result.row_count == 2
    # values stay raw; interpretation is the detector's job
    assert result.rows[0]["Value"] == "1,5"


def test_quoted_fields_keep_embedded_commas() -> None:
    result = parse_text('"Name","Amount"\n"Acme, Inc.","1,234.50"\n"Beta","10"')
    assert result.delimiter == ","
    assert result.rows[0] == {"Name": "Acme, Inc.", "Amount": "1,234.50"}


def test_headers_are_trimmed_and_blank_lines_skipped() -> None:
    result = parse_text(" Name , Value \n\nAlpha,1\n , \n\nBeta,2\n")
    assert result.headers == ["Name", "Value"]
    assert result.row_count == 2
    assert [r["Name"] for r in result.rows] == ["Alpha", "Beta"]


def test_blank_cells_stay_empty_strings() -> None:
    result = parse_text("A,B\n1,\n,2")
    assert result.rows == [{"A": "1", "B": ""}, {"A": "", "B": "2"}]


def test_short_rows_are_padded_and_reported() -> None:
    result = parse_text("A,B,C\n1,2\n3,4,5")
    assert result.row_count == 2
    assert result.rows[0] == {"A": "1", "B": "2", "C": None}
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Row 0: Too few fields")


def test_long_rows_are_truncated_and_reported() -> None:
    result = parse_text("A,B\n1,2,3\n4,5\n6,7")
    assert result.row_count == 3
    assert result.rows[0] == {"A": "1", "B": "2"}
    assert any(e.startswith("Row 0: Too many fields") for e in result.errors)


def test_duplicate_headers_are_suffixed() -> None:
    result = parse_text("A,A,B\n1,2,3")
    assert result.headers == ["A", "A_1", "B"]
    assert result.rows[0] == {"A": "1", "A_1": "2", "B": "3"}


def test_empty_input() -> None:
    for text in ["", "   \n\t  \n", "\ufeff", "\ufeff\n"]:
        result = parse_text(text)
        assert result.row_count == 0
        assert result.rows == []
        assert result.errors
        assert not result.ok


def test_whole_input_is_trimmed() -> None:
    result = parse_text("Name,Value\nA,1   ")
    assert result.rows == [{"Name": "A", "Value": "1"}]
    assert result.errors == []


def test_header_only_input_has_no_rows() -> None:
    result = parse_text("A,B\n")
    assert result.headers == ["A", "B"]
    assert result.row_count == 0
    assert not result.ok


def test_detect_delimiter_defaults_to_comma() -> None:
    assert detect_delimiter("single\ncolumn\nonly") == ","
