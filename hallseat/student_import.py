import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


STUDENT_COLUMNS = {
    "roll_number": ["roll_number", "Roll_Number", "RollNumber"],
    "name": ["name", "Name"],
    "department": ["department", "Department"],
    "semester": ["semester", "Semester"],
    "section": ["section", "Section"],
    "email": ["email", "Email"],
}
STUDENT_REQUIRED = {"roll_number", "name", "department", "semester"}

ROOM_COLUMNS = {
    "room_number": ["room_number", "Room_Number", "RoomNumber"],
    "building": ["building", "Building"],
    "floor": ["floor", "Floor"],
    "capacity": ["capacity", "Capacity"],
    "rows": ["rows", "Rows"],
    "columns": ["columns", "Columns"],
}
ROOM_REQUIRED = {"room_number", "capacity"}


class ImportFormatError(ValueError):
    pass


def read_table(file_path):
    path = Path(file_path)
    try:
        if path.suffix.lower() == ".csv":
            return pd.read_csv(path)
        return pd.read_excel(path)
    except Exception as e:
        raise ImportFormatError(f"Could not read {path.name}: {e}") from e


def _resolve_columns(df, aliases, required):
    resolved = {}
    for field, names in aliases.items():
        for name in names:
            if name in df.columns:
                resolved[field] = name
                break

    missing = required - set(resolved)
    if missing:
        raise ImportFormatError(f"Missing columns: {sorted(missing)}")
    return resolved


def _cell(row, column):
    if column is None:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    return value


def _optional_int(row, column, field, line):
    value = _cell(row, column)
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ImportFormatError(f"Row {line}: {field} must be a number, got {value!r}") from None


def student_import_excel(file_path):
    df = read_table(file_path)
    columns = _resolve_columns(df, STUDENT_COLUMNS, STUDENT_REQUIRED)

    students = []
    for index, row in df.iterrows():
        line = index + 2
        roll_number = _cell(row, columns["roll_number"])
        if roll_number is None:
            continue

        section = _cell(row, columns.get("section"))
        email = _cell(row, columns.get("email"))
        students.append({
            "roll_number": str(roll_number),
            "name": str(_cell(row, columns["name"]) or ""),
            "department": str(_cell(row, columns["department"]) or ""),
            "semester": _optional_int(row, columns["semester"], "semester", line) or 0,
            "section": str(section) if section is not None else None,
            "email": str(email) if email is not None else None,
        })

    logger.info("Read %d student rows from %s", len(students), file_path)
    return students


def room_import_excel(file_path):
    df = read_table(file_path)
    columns = _resolve_columns(df, ROOM_COLUMNS, ROOM_REQUIRED)

    rooms = []
    for index, row in df.iterrows():
        line = index + 2
        room_number = _cell(row, columns["room_number"])
        if room_number is None:
            continue

        building = _cell(row, columns.get("building"))
        rooms.append({
            "room_number": str(room_number),
            "building": str(building) if building is not None else None,
            "floor": _optional_int(row, columns.get("floor"), "floor", line),
            "capacity": max(0, _optional_int(row, columns["capacity"], "capacity", line) or 0),
            "rows": _optional_int(row, columns.get("rows"), "rows", line),
            "columns": _optional_int(row, columns.get("columns"), "columns", line),
        })

    logger.info("Read %d room rows from %s", len(rooms), file_path)
    return rooms
