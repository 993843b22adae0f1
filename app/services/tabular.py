"""Decode uploaded bytes into header-keyed rows."""

import codecs
import csv
import logging
import os
from collections.abc import Collection
from io import BytesIO, StringIO
from typing import Any

from openpyxl import load_workbook

from app.core.exceptions import DecodeError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

XLSX = "xlsx"
CSV = "csv"

EXTENSION_FORMATS = {".xlsx": XLSX, ".csv": CSV}

EXCEL_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
CSV_MIME_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}

# utf-16 is only tried behind a BOM; it decodes nearly any even-length input
CSV_ENCODINGS = ("utf-8-sig", "iso-8859-1")
UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def detect_format(
    filename: str | None,
    content_type: str | None,
    allowed_extensions: Collection[str] = tuple(EXTENSION_FORMATS),
) -> str:
    """Pick a decoder from the file extension, then the declared media type.

    A filename with an extension must carry one of ``allowed_extensions``; the
    media type is only consulted for names without one.
    """
    allowed = {ext.lower() for ext in allowed_extensions} & set(EXTENSION_FORMATS)
    extension = os.path.splitext(filename or "")[1].lower()
    if extension:
        if extension in allowed:
            return EXTENSION_FORMATS[extension]
        raise UnsupportedMediaTypeError(filename=filename, content_type=content_type)

    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type in EXCEL_MIME_TYPES and ".xlsx" in allowed:
        return XLSX
    if media_type in CSV_MIME_TYPES and ".csv" in allowed:
        return CSV
    raise UnsupportedMediaTypeError(filename=filename, content_type=content_type)


def _has_values(row: dict[str, Any]) -> bool:
    return any(value is not None and str(value).strip() != "" for value in row.values())


def parse_excel(file_content: bytes) -> list[dict[str, Any]]:
    """Parse the active sheet of an Excel workbook; first row is the header."""
    try:
        workbook = load_workbook(filename=BytesIO(file_content), read_only=True, data_only=True)
    except Exception as e:
        raise DecodeError(f"Failed to parse Excel file: {str(e)}")

    try:
        sheet = workbook.active
        if sheet is None:
            raise DecodeError("Excel file has no active sheet")

        rows = list(sheet.iter_rows(values_only=True))
    except Exception as e:
        if isinstance(e, DecodeError):
            raise
        raise DecodeError(f"Failed to parse Excel file: {str(e)}")
    finally:
        workbook.close()

    logger.debug(f"[EXCEL PARSE] Total raw rows in Excel (including header): {len(rows)}")
    if not rows:
        return []

    headers = [str(h).strip() if h is not None else "" for h in rows[0]]
    logger.debug(f"[EXCEL PARSE] Detected headers: {headers}")

    data = []
    for row in rows[1:]:
        row_dict = {
            headers[i]: value
            for i, value in enumerate(row)
            if i < len(headers) and headers[i]
        }
        if _has_values(row_dict):
            data.append(row_dict)

    logger.info(f"[EXCEL PARSE] {len(data)} data rows extracted")
    return data


def _decode_text(file_content: bytes) -> str:
    if file_content.startswith(UTF16_BOMS):
        try:
            return file_content.decode("utf-16")
        except UnicodeDecodeError:
            raise DecodeError("CSV file encoding is not supported. Please export as UTF-8.")

    for encoding in CSV_ENCODINGS:
        try:
            return file_content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise DecodeError("CSV file encoding is not supported. Please export as UTF-8.")


def parse_csv(file_content: bytes) -> list[dict[str, Any]]:
    """Parse delimited text; first line is the header."""
    text = _decode_text(file_content)
    if "\x00" in text:
        raise DecodeError("File is not valid CSV text")

    try:
        reader = csv.DictReader(StringIO(text, newline=""))
        data = []
        for row in reader:
            # Surplus cells land under a None key
            row_dict = {
                key.strip(): value
                for key, value in row.items()
                if key is not None and key.strip()
            }
            if _has_values(row_dict):
                data.append(row_dict)
    except csv.Error as e:
        raise DecodeError(f"Failed to parse CSV file: {str(e)}")

    logger.info(f"[CSV PARSE] {len(data)} data rows extracted")
    return data


def decode_upload(
    file_content: bytes,
    filename: str | None,
    content_type: str | None = None,
    allowed_extensions: Collection[str] = tuple(EXTENSION_FORMATS),
) -> list[dict[str, Any]]:
    """Turn upload bytes into an ordered list of header-keyed rows."""
    file_format = detect_format(filename, content_type, allowed_extensions)
    logger.debug(f"[PARSE] {filename!r} ({content_type}) decoded as {file_format}")
    if file_format == XLSX:
        return parse_excel(file_content)
    return parse_csv(file_content)
