"""
tests/test_import.py

Spreadsheet import and the command-line seat list.
"""
import pandas as pd
import pytest

from hallseat.main import main
from hallseat.student_import import ImportFormatError, room_import_excel, student_import_excel


def test_student_columns_accept_aliases(tmp_path):
    path = tmp_path / "students.xlsx"
    pd.DataFrame({
        "RollNumber": ["R1", "R2"],
        "Name": ["Asha", "Bilal"],
        "Department": ["CS", "EE"],
        "Semester": [3, 5],
        "Email": ["asha@example.edu", None],
    }).to_excel(path, index=False)

    students = student_import_excel(path)

    assert students[0] == {
        "roll_number": "R1", "name": "Asha", "department": "CS",
        "semester": 3, "section": None, "email": "asha@example.edu",
    }
    assert students[1]["email"] is None
    assert students[1]["semester"] == 5


def test_missing_required_columns(tmp_path):
    path = tmp_path / "rooms.csv"
    path.write_text("room_number,rows\nA1,3\n")

    with pytest.raises(ImportFormatError, match="capacity"):
        room_import_excel(path)


def test_room_negative_capacity_clamped(tmp_path):
    path = tmp_path / "rooms.csv"
    path.write_text("room_number,capacity\nA1,-4\n")

    assert room_import_excel(path)[0]["capacity"] == 0


def test_cli_prints_seats(tmp_path, capsys):
    students = tmp_path / "students.csv"
    students.write_text(
        "roll_number,name,department,semester\n"
        "R1,Asha,CS,3\nR2,Bilal,CS,3\nR3,Chen,EE,3\n"
    )
    rooms = tmp_path / "rooms.csv"
    rooms.write_text("room_number,capacity,rows,columns\nA101,3,1,3\n")

    assert main([str(students), str(rooms)]) == 0

    out = capsys.readouterr().out
    assert "R1 Asha -> Room A101 | Seat 1 | Row 1 | Column 1" in out
    assert "R3 Chen -> Room A101 | Seat 2 | Row 1 | Column 2" in out


def test_cli_reports_unseated(tmp_path, capsys):
    students = tmp_path / "students.csv"
    students.write_text("roll_number,name,department,semester\nR1,A,CS,3\nR2,B,CS,3\n")
    rooms = tmp_path / "rooms.csv"
    rooms.write_text("room_number,capacity\nA101,1\n")

    assert main([str(students), str(rooms), "--no-mix"]) == 2
    assert "1 students could not be seated" in capsys.readouterr().out


def test_non_numeric_semester_rejected(tmp_path):
    path = tmp_path / "students.csv"
    path.write_text(
        "roll_number,name,department,semester\n"
        "R1,Asha,CS,3\n"
        "R2,Bilal,CS,third\n"
    )

    with pytest.raises(ImportFormatError, match="Row 3: semester must be a number"):
        student_import_excel(path)


def test_non_numeric_room_fields_rejected(tmp_path):
    path = tmp_path / "rooms.csv"
    path.write_text("room_number,capacity,rows,columns\nA1,thirty,5,6\n")
    with pytest.raises(ImportFormatError, match="Row 2: capacity"):
        room_import_excel(path)

    path.write_text("room_number,capacity,rows,columns\nA1,30,five,6\n")
    with pytest.raises(ImportFormatError, match="rows must be a number"):
        room_import_excel(path)


def test_cli_bad_number_exits_cleanly(tmp_path, capsys):
    students = tmp_path / "students.csv"
    students.write_text("roll_number,name,department,semester\nR1,A,CS,x\n")
    rooms = tmp_path / "rooms.csv"
    rooms.write_text("room_number,capacity\nA101,1\n")

    assert main([str(students), str(rooms)]) == 1
    assert "semester must be a number" in capsys.readouterr().err
