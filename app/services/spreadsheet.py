import io
import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime, time

from app.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass
class SheetRow:
    number: int  # spreadsheet row number, header row is 1
    values: dict[str, str]


@dataclass
class Sheet:
    headers: list[str]
    rows: list[SheetRow] = field(default_factory=list)


def cell_to_text(value) -> str:
    """Render a cell value the way it reads in the spreadsheet. Blank cells become ""."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value).strip()


def _unique_headers(raw_headers: tuple) -> list[str | None]:
    headers: list[str | None] = []
    seen: dict[str, int] = {}
    for raw in raw_headers:
        name = cell_to_text(raw)
        if not name:
            headers.append(None)
            continue
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def read_first_sheet(content: bytes) -> Sheet:
    """Parse the first worksheet of an .xlsx file.

    Row 1 holds the headers. Every data row maps each header to its cell text,
    with "" for blank cells; rows with no content at all are skipped but the
    remaining rows keep their spreadsheet row numbers.
    """
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, ValueError, KeyError) as e:
        raise InvalidInputError(f"Could not read spreadsheet: {e}")

    try:
        if not workbook.worksheets:
            raise InvalidInputError("Spreadsheet has no worksheets")
        rows = workbook.worksheets[0].iter_rows(values_only=True)

        header_row = next(rows, None)
        if header_row is None:
            raise InvalidInputError("Spreadsheet is empty")
        headers = _unique_headers(header_row)
        if not any(headers):
            raise InvalidInputError("Spreadsheet header row is empty")

        sheet = Sheet(headers=[h for h in headers if h])
        for number, raw_row in enumerate(rows, start=2):
            values = {header: "" for header in sheet.headers}
            for header, cell in zip(headers, raw_row):
                if header:
                    values[header] = cell_to_text(cell)
            if any(v.strip() for v in values.values()):
                sheet.rows.append(SheetRow(number=number, values=values))
    finally:
        workbook.close()

    logger.info(f"Spreadsheet parsed: headers={len(sheet.headers)} rows={len(sheet.rows)}")
    return sheet
