import pytest

from app.core.exceptions import DecodeError, UnsupportedMediaTypeError
from app.services.tabular import CSV, XLSX, decode_upload, detect_format, parse_csv, parse_excel

from conftest import XLSX_MIME


@pytest.mark.parametrize(
    "filename,content_type,expected",
    [
        ("grades.xlsx", None, XLSX),
        ("GRADES.XLSX", "application/octet-stream", XLSX),
        ("grades.csv", "application/vnd.ms-excel", CSV),
        ("upload", XLSX_MIME, XLSX),
        ("upload", "text/csv; charset=utf-8", CSV),
        (None, "application/csv", CSV),
    ],
)
def test_detect_format(filename, content_type, expected):
    assert detect_format(filename, content_type) == expected


@pytest.mark.parametrize(
    "filename,content_type",
    [("grades.pdf", "application/pdf"), ("grades.xls", None), (None, None)],
)
def test_detect_format_rejects_other_types(filename, content_type):
    with pytest.raises(UnsupportedMediaTypeError) as exc_info:
        detect_format(filename, content_type)

    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "UNSUPPORTED_MEDIA_TYPE"


def test_parse_csv_keeps_header_spelling_and_order(make_csv):
    content = make_csv([["S1", "Ada", "100", "90"], ["S2", "Bo", "50", "25"]])

    rows = parse_csv(content)

    assert rows == [
        {"Student_ID": "S1", "Student_Name": "Ada", "Total_Marks": "100", "Marks_Obtained": "90"},
        {"Student_ID": "S2", "Student_Name": "Bo", "Total_Marks": "50", "Marks_Obtained": "25"},
    ]


def test_parse_csv_skips_blank_lines_and_strips_headers():
    content = b"\xef\xbb\xbf ID , Name ,MaxMarks,ObtainedMarks\r\nS1,Ada,10,5\r\n,,,\r\n\r\nS2,Bo,10,7\r\n"

    rows = parse_csv(content)

    assert [row["ID"] for row in rows] == ["S1", "S2"]
    assert set(rows[0]) == {"ID", "Name", "MaxMarks", "ObtainedMarks"}


def test_parse_csv_ignores_surplus_cells():
    rows = parse_csv(b"ID,Name,MaxMarks,ObtainedMarks\nS1,Ada,10,5,extra\n")

    assert rows == [{"ID": "S1", "Name": "Ada", "MaxMarks": "10", "ObtainedMarks": "5"}]


def test_parse_csv_falls_back_to_latin1():
    rows = parse_csv("ID,Name,MaxMarks,ObtainedMarks\nS1,Zoë,10,5\n".encode("iso-8859-1"))

    assert rows[0]["Name"] == "Zoë"


def test_parse_csv_header_only_is_empty():
    assert parse_csv(b"Student_ID,Student_Name,Total_Marks,Marks_Obtained\n") == []


def test_parse_excel_reads_active_sheet(make_xlsx):
    content = make_xlsx([["S501", "Quinn Flores", 100, 100], [None, None, None, None], [502, "Morgan Nguyen", 100, 52]])

    rows = parse_excel(content)

    assert rows == [
        {"Student_ID": "S501", "Student_Name": "Quinn Flores", "Total_Marks": 100, "Marks_Obtained": 100},
        {"Student_ID": 502, "Student_Name": "Morgan Nguyen", "Total_Marks": 100, "Marks_Obtained": 52},
    ]


def test_parse_excel_drops_unnamed_columns(make_xlsx):
    content = make_xlsx([["S1", "Ada", 10, 5, "note"]], headers=["ID", "Name", "MaxMarks", "ObtainedMarks", None])

    assert parse_excel(content) == [{"ID": "S1", "Name": "Ada", "MaxMarks": 10, "ObtainedMarks": 5}]


def test_parse_excel_rejects_corrupt_bytes():
    with pytest.raises(DecodeError) as exc_info:
        parse_excel(b"definitely not a zip archive")

    assert exc_info.value.code == "DECODE_FAILED"


def test_decode_upload_routes_by_format(make_csv, make_xlsx):
    rows = [["S1", "Ada", 10, 5]]

    from_csv = decode_upload(make_csv(rows), "a.csv", "text/csv")
    from_xlsx = decode_upload(make_xlsx(rows), "a.xlsx", XLSX_MIME)

    assert from_csv[0]["Student_ID"] == from_xlsx[0]["Student_ID"] == "S1"
    assert from_csv[0]["Total_Marks"] == "10"
    assert from_xlsx[0]["Total_Marks"] == 10


def test_parse_csv_reads_even_length_latin1():
    content = "ID,Name,MaxMarks,ObtainedMarks\nS1,José,10,5\n".encode("iso-8859-1")
    assert len(content) % 2 == 0

    rows = parse_csv(content)

    assert rows == [{"ID": "S1", "Name": "José", "MaxMarks": "10", "ObtainedMarks": "5"}]


def test_parse_csv_reads_utf16_with_bom():
    content = "ID,Name,MaxMarks,ObtainedMarks\nS1,Zoë,10,5\n".encode("utf-16")

    rows = parse_csv(content)

    assert rows[0]["Name"] == "Zoë"


def test_detect_format_honours_allowed_extensions():
    assert detect_format("grades.xlsx", None, [".xlsx"]) == XLSX

    with pytest.raises(UnsupportedMediaTypeError):
        detect_format("grades.csv", "text/csv", [".xlsx"])
    with pytest.raises(UnsupportedMediaTypeError):
        detect_format("upload", "text/csv", [".XLSX"])


def test_detect_format_trusts_extension_over_media_type():
    with pytest.raises(UnsupportedMediaTypeError):
        detect_format("grades.xls", "application/vnd.ms-excel")
