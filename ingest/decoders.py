"""Decoding of uploaded import files into raw rows.

The format is chosen once from the file extension and mapped to a closed
set of FileFormat variants, each with its own handler. Content is never
sniffed: a mislabeled file fails as MalformedInput instead of falling back
to another parser.
"""

import csv
import io
import json
from enum import Enum
from typing import Any, Callable, Dict, List

import pandas as pd

from ingest.config import RECOGNIZED_COLUMNS, SUPPORTED_EXTENSIONS
from ingest.errors import EmptyDataset, MalformedInput, UnsupportedFormat
from ingest.logging_config import get_logger
from ingest.models import RawImportRow

__all__ = ["FileFormat", "decode", "decode_rows"]

logger = get_logger(__name__)


class FileFormat(Enum):
    TABULAR_TEXT = "tabular_text"
    OBJECT_ARRAY = "object_array"
    SPREADSHEET = "spreadsheet"

    @classmethod
    def from_extension(cls, extension: str) -> "FileFormat":
        """Map '.CSV', 'csv', 'xlsx', ... to a format, or raise UnsupportedFormat."""
        key = (extension or "").strip().lstrip(".").lower()
        if key not in SUPPORTED_EXTENSIONS:
            supported = ", ".join(sorted(SUPPORTED_EXTENSIONS))
            raise UnsupportedFormat(
                f"Unsupported file format '{extension}'. Supported: {supported}"
            )
        return cls(SUPPORTED_EXTENSIONS[key])


def _clean_cell(value: Any) -> Any:
    """Convert pandas NA values to None while leaving other types intact."""
    try:
        return None if pd.isna(value) else value
    except (TypeError, ValueError):
        return value


def _to_text(value: Any) -> Any:
    """Render a scalar cell as text; None for missing cells."""
    value = _clean_cell(value)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _make_row(record: Dict[Any, Any]) -> RawImportRow:
    row: RawImportRow = {}
    for key, value in record.items():
        if key is None:
            # csv.DictReader collects surplus cells under None
            continue
        text = _to_text(value)
        if text is not None:
            row[str(key).strip()] = text
    return row


def _has_data(row: RawImportRow) -> bool:
    return any(value.strip() for value in row.values())


def _decode_text(file_bytes: bytes) -> str:
    try:
        return file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"File is not valid UTF-8 text: {exc}") from exc


def _decode_tabular_text(file_bytes: bytes) -> List[RawImportRow]:
    text = _decode_text(file_bytes)
    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        return [row for row in (_make_row(r) for r in reader) if _has_data(row)]
    except csv.Error as exc:
        raise MalformedInput(f"Could not parse CSV: {exc}") from exc


def _decode_object_array(file_bytes: bytes) -> List[RawImportRow]:
    text = _decode_text(file_bytes)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInput(f"Could not parse JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise MalformedInput(
            f"JSON payload must be an array of objects, got {type(payload).__name__}"
        )

    rows: List[RawImportRow] = []
    for index, record in enumerate(payload, start=1):
        if not isinstance(record, dict):
            raise MalformedInput(
                f"JSON element {index} must be an object, got {type(record).__name__}"
            )
        rows.append(_make_row(record))
    return rows


def _decode_spreadsheet(file_bytes: bytes) -> List[RawImportRow]:
    try:
        # First sheet only; first row is the header
        df = pd.read_excel(io.BytesIO(file_bytes), sheet_name=0, dtype=object)
    except Exception as exc:
        raise MalformedInput(f"Could not read spreadsheet: {exc}") from exc

    df = df.dropna(how="all")
    rows = [_make_row(record) for record in df.to_dict(orient="records")]
    return [row for row in rows if _has_data(row)]


_HANDLERS: Dict[FileFormat, Callable[[bytes], List[RawImportRow]]] = {
    FileFormat.TABULAR_TEXT: _decode_tabular_text,
    FileFormat.OBJECT_ARRAY: _decode_object_array,
    FileFormat.SPREADSHEET: _decode_spreadsheet,
}


def decode_rows(file_bytes: bytes, file_format: FileFormat) -> List[RawImportRow]:
    """Decode bytes of an already-selected format.

    Raises:
        MalformedInput: content cannot be parsed as ``file_format``
        EmptyDataset: parsing succeeded but produced no data rows
    """
    rows = _HANDLERS[file_format](file_bytes)
    if not rows:
        raise EmptyDataset("No data found in file")

    ignored = sorted({key for row in rows for key in row} - set(RECOGNIZED_COLUMNS))
    if ignored:
        logger.debug("Ignoring unrecognized columns: %s", ", ".join(ignored))
    logger.debug("Decoded %d rows as %s", len(rows), file_format.value)
    return rows


def decode(file_bytes: bytes, extension: str) -> List[RawImportRow]:
    """Turn an uploaded file into an ordered list of raw string-keyed rows.

    Args:
        file_bytes: Raw file content
        extension: Declared file extension, with or without leading dot

    Raises:
        UnsupportedFormat: extension is not csv, json, xlsx or xls
        MalformedInput: content cannot be parsed as that format
        EmptyDataset: no data rows were found
    """
    return decode_rows(file_bytes, FileFormat.from_extension(extension))
