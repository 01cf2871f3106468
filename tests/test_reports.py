from pypdf import PdfReader

from hallseat.exports import export_room_wise_pdf, export_student_wise_pdf
from hallseat.reports import room_wise, student_wise


def row(room_id, room_number, seat, roll, dept="CS"):
    return {
        "room_id": room_id, "room_number": room_number, "building": None,
        "seat_number": seat, "seat_row": None, "seat_col": None,
        "roll_number": roll, "name": f"Name {roll}", "department": dept,
    }


ROWS = [
    row(2, "B2", 1, "R004"),
    row(1, "A1", 2, "R001"),
    row(1, "A1", 1, "R003", "EE"),
    row(2, "B2", 2, "R002"),
]


def test_room_wise_groups_and_orders():
    rooms = room_wise(ROWS)

    assert [r["room_number"] for r in rooms] == ["A1", "B2"]
    assert [s["roll_number"] for s in rooms[0]["students"]] == ["R003", "R001"]
    assert [s["seat_number"] for s in rooms[1]["students"]] == [1, 2]


def test_student_wise_sorted_by_roll_number():
    students = student_wise(ROWS)
    assert [s["roll_number"] for s in students] == ["R001", "R002", "R003", "R004"]
    assert students[0]["room_number"] == "A1"


class Exam:
    course_code = "CS301"
    course_name = "Operating Systems"
    exam_date = "2026-11-02"
    exam_time = "09:30"


def page_texts(path):
    return [page.extract_text() for page in PdfReader(str(path)).pages]


def test_room_wise_pdf_numbers_every_page(tmp_path):
    many = [row(1, "A1", i, f"R{i:03d}") for i in range(1, 101)]
    few = [row(2, "B2", i, f"S{i:03d}") for i in range(1, 6)]

    path = export_room_wise_pdf(room_wise(many + few), Exam, tmp_path / "rooms.pdf")
    texts = page_texts(path)

    # room A1 spills over three pages, B2 starts a fresh one
    assert len(texts) == 4
    for number, text in enumerate(texts, start=1):
        assert f"Page {number} of 4" in text
    assert "A1 (continued)" in texts[1]
    assert "Room: B2" in texts[3]


def test_student_wise_pdf_numbers_every_page(tmp_path):
    many = [row(1, "A1", i, f"R{i:03d}") for i in range(1, 101)]

    path = export_student_wise_pdf(student_wise(many), Exam, tmp_path / "students.pdf")
    texts = page_texts(path)

    assert len(texts) == 3
    for number, text in enumerate(texts, start=1):
        assert f"Page {number} of 3" in text


def test_long_names_are_shortened_with_ellipsis(tmp_path):
    long_name = row(1, "A1", 1, "R001")
    long_name["name"] = "Maximiliana Alexandrovna Konstantinopolskaya"

    path = export_room_wise_pdf(room_wise([long_name]), Exam, tmp_path / "rooms.pdf")
    text = page_texts(path)[0]

    assert "Maximiliana Alexandrovna ..." in text
    assert "Konstantinopolskaya" not in text
