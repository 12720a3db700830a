"""
CSV import/export of activity records.

Exported distances are in each type's canonical unit and dates are ISO
calendar dates, so an export can be imported back unchanged.
"""

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from dateutil import parser as date_parser
from pydantic import ValidationError as SchemaError

from ridewitus.domain.models import ActivityRecord, ActivityType
from ridewitus.infrastructure.db.models.base import new_id
from ridewitus.infrastructure.exceptions import ErrorCode, ValidationError


logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["ID", "Date", "Type", "Distance", "Duration", "Maintenance Cost", "Notes"]
REQUIRED_HEADERS = ["ID", "Date", "Type", "Distance", "Duration"]
MIN_ROW_VALUES = 5


@dataclass
class ParsedCsv:
    records: List[ActivityRecord] = field(default_factory=list)
    skipped: int = 0


def _format_number(value: Optional[float]) -> str:
    if value is None:
        return ""
    return repr(float(value))


def export_csv(records: Iterable[ActivityRecord]) -> str:
    """Serialize records with the export header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for record in records:
        writer.writerow([
            record.id,
            record.date.date().isoformat(),
            ActivityType(record.type).value,
            _format_number(record.distance),
            _format_number(record.duration),
            _format_number(record.maintenance_cost),
            record.notes or "",
        ])
    return buffer.getvalue()


def _invalid(message: str) -> ValidationError:
    return ValidationError(message, error_code=ErrorCode.INVALID_CSV)


def _parse_number(raw: str, column: str, line: int, required: bool = True) -> Optional[float]:
    raw = raw.strip()
    if not raw:
        if required:
            raise _invalid(f"Missing {column} on line {line}")
        return None
    try:
        value = float(raw)
    except ValueError:
        raise _invalid(f"Invalid {column} '{raw}' on line {line}")
    if not math.isfinite(value):
        raise _invalid(f"{column} must be a finite number on line {line}")
    if value < 0:
        raise _invalid(f"{column} must not be negative on line {line}")
    return value


def parse_csv(text: str) -> ParsedCsv:
    """
    Parse an activity CSV.

    Blank lines are ignored. Rows with fewer than five values, an unknown
    activity type, or an id already seen earlier in the file are skipped
    and counted.

    Raises:
        ValidationError: INVALID_CSV for missing headers, an unparseable
            date or number, or a file without any valid row
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header = next(reader, None)
    if header is None:
        raise _invalid("CSV file is empty")

    columns = {name.strip().lower(): index for index, name in enumerate(header)}
    missing = [name for name in REQUIRED_HEADERS if name.lower() not in columns]
    if missing:
        raise _invalid(f"Missing CSV headers: {', '.join(missing)}")

    def value(row: List[str], name: str) -> str:
        index = columns.get(name.lower())
        if index is None or index >= len(row):
            return ""
        return row[index]

    parsed = ParsedCsv()
    seen_ids = set()
    for row in reader:
        line = reader.line_num
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < MIN_ROW_VALUES:
            parsed.skipped += 1
            continue

        try:
            activity_type = ActivityType(value(row, "Type"))
        except ValueError:
            parsed.skipped += 1
            continue

        record_id = value(row, "ID").strip() or new_id()
        if record_id in seen_ids:
            parsed.skipped += 1
            continue

        raw_date = value(row, "Date").strip()
        try:
            record_date = date_parser.parse(raw_date)
        except (ValueError, OverflowError):
            raise _invalid(f"Invalid date '{raw_date}' on line {line}")

        notes = value(row, "Notes").strip()
        try:
            record = ActivityRecord(
                id=record_id,
                date=record_date,
                type=activity_type,
                distance=_parse_number(value(row, "Distance"), "Distance", line),
                duration=_parse_number(value(row, "Duration"), "Duration", line),
                maintenance_cost=_parse_number(
                    value(row, "Maintenance Cost"), "Maintenance Cost", line, required=False
                ),
                notes=notes or None,
            )
        except SchemaError as e:
            raise _invalid(f"Invalid activity on line {line}: {e.errors()[0]['msg']}")
        parsed.records.append(record)
        seen_ids.add(record_id)

    if not parsed.records:
        raise _invalid("CSV file contains no valid activities")

    logger.debug(f"Parsed {len(parsed.records)} activities, skipped {parsed.skipped} rows")
    return parsed
