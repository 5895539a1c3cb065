import io
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from rating_models import COLUMN_NAMES, EMIT_FAILED_MESSAGE, EmissionError

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DATE_COLUMN_NAME = "Дата обновления"
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFD9D9D9")
# номер, согласие, приоритет, баллы, статус, дата
COLUMN_WIDTHS = (10, 12, 12, 10, 20, 25)


def _literal(value):
    return ILLEGAL_CHARACTERS_RE.sub("", "" if value is None else str(value))


def _valid_rows(snapshot):
    for row in getattr(snapshot, "rows", None) or []:
        if isinstance(row, (list, tuple)) and len(row) == len(COLUMN_NAMES):
            yield [_literal(value) for value in row]
        else:
            logger.warning(f"Skipping malformed row: {row!r}")


def build_workbook(snapshot, sheet_title="Рейтинг ПМИ"):
    """Lay out one sheet: header row, then each row with the update date appended.

    A missing or empty snapshot gives a header-only sheet.
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    headers = list(getattr(snapshot, "column_names", None) or COLUMN_NAMES)
    sheet.append(headers + [DATE_COLUMN_NAME])
    date = _literal(getattr(snapshot, "publication_date", ""))
    for row in _valid_rows(snapshot):
        sheet.append(row + [date])
        # Scraped text is data: "=..." must not turn into a formula
        for cell in sheet[sheet.max_row]:
            cell.data_type = "s"

    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL
    for idx, width in enumerate(COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(idx)].width = width
    return workbook


def write_workbook(snapshot, stream, sheet_title="Рейтинг ПМИ"):
    try:
        build_workbook(snapshot, sheet_title).save(stream)
    except Exception as e:
        raise EmissionError(EMIT_FAILED_MESSAGE) from e


def workbook_bytes(snapshot, sheet_title="Рейтинг ПМИ"):
    buffer = io.BytesIO()
    write_workbook(snapshot, buffer, sheet_title)
    buffer.seek(0)
    return buffer
