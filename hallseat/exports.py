import logging

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)


def _seat_label(seat):
    if seat.get("seat_row") is None:
        return str(seat["seat_number"])
    return f"{seat['seat_number']} (R{seat['seat_row']}-C{seat['seat_col']})"


def export_room_wise_excel(rooms, file_path):
    data = []
    for room in rooms:
        for s in room["students"]:
            data.append({
                "room_number": room["room_number"],
                "building": room["building"],
                "seat_number": s["seat_number"],
                "row": s["seat_row"],
                "column": s["seat_col"],
                "roll_number": s["roll_number"],
                "name": s["name"],
                "department": s["department"],
            })

    df = pd.DataFrame(data)
    df.to_excel(file_path, index=False)
    return file_path


def export_student_wise_excel(students, file_path):
    df = pd.DataFrame(students)
    df.to_excel(file_path, index=False)
    return file_path


class NumberedCanvas(canvas.Canvas):
    """Canvas that holds pages back until save() so each footer knows the total."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_pages = []

    def showPage(self):
        self._saved_pages.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_pages)
        for state in self._saved_pages:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total):
        self.saveState()
        width, _ = self._pagesize
        self.setFont("Helvetica", 9)
        self.drawCentredString(width / 2, 25, f"Page {self._pageNumber} of {total}")
        self.restoreState()


def _clip(text, limit):
    text = str(text)
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def _exam_header(c, exam, y):
    c.setFont("Helvetica", 11)
    c.drawString(50, y, f"Course: {exam.course_code} {exam.course_name}")
    y -= 15
    c.drawString(50, y, f"Date: {exam.exam_date} | Time: {exam.exam_time}")
    return y - 25


def _room_table_header(c, y):
    c.setFont("Helvetica", 10)
    c.drawString(50, y, "Seat")
    c.drawString(160, y, "Roll Number")
    c.drawString(270, y, "Name")
    c.drawString(440, y, "Department")
    y -= 15

    c.line(50, y, 550, y)
    return y - 15


def export_room_wise_pdf(rooms, exam, file_path):
    """Each room starts on a new page; long rooms continue on following pages."""
    c = NumberedCanvas(str(file_path), pagesize=A4)
    width, height = A4

    for room in rooms:
        y = height - 50
        c.setFont("Helvetica-Bold", 14)
        c.drawCentredString(width / 2, y, "Exam Hall Seating Arrangement")
        y -= 25

        c.setFont("Helvetica-Bold", 12)
        building = f" ({room['building']})" if room["building"] else ""
        c.drawString(50, y, f"Room: {room['room_number']}{building}")
        y -= 18
        y = _exam_header(c, exam, y)
        y = _room_table_header(c, y)

        for s in room["students"]:
            if y < 60:
                c.showPage()
                c.setFont("Helvetica-Bold", 12)
                c.drawString(50, height - 50, f"Room: {room['room_number']} (continued)")
                y = _room_table_header(c, height - 75)

            c.drawString(50, y, _seat_label(s))
            c.drawString(160, y, str(s["roll_number"]))
            c.drawString(270, y, _clip(s["name"], 28))
            c.drawString(440, y, str(s["department"] or ""))
            y -= 15

        c.showPage()

    c.save()
    logger.info("Wrote room-wise PDF for %d rooms to %s", len(rooms), file_path)
    return file_path


def export_student_wise_pdf(students, exam, file_path, rows_per_page=40):
    c = NumberedCanvas(str(file_path), pagesize=A4)
    width, height = A4

    pages = max(1, -(-len(students) // rows_per_page))
    for page in range(pages):
        y = height - 50
        if page == 0:
            c.setFont("Helvetica-Bold", 14)
            c.drawCentredString(width / 2, y, "Student Seating List")
            y -= 25
            y = _exam_header(c, exam, y)

        c.setFont("Helvetica", 10)
        c.drawString(50, y, "Roll Number")
        c.drawString(150, y, "Name")
        c.drawString(310, y, "Department")
        c.drawString(410, y, "Room")
        c.drawString(480, y, "Seat")
        y -= 15

        c.line(50, y, 550, y)
        y -= 15

        for s in students[page * rows_per_page:(page + 1) * rows_per_page]:
            c.drawString(50, y, str(s["roll_number"]))
            c.drawString(150, y, _clip(s["name"], 26))
            c.drawString(310, y, str(s["department"] or ""))
            c.drawString(410, y, str(s["room_number"]))
            c.drawString(480, y, str(s["seat_number"]))
            y -= 15

        c.showPage()

    c.save()
    logger.info("Wrote student-wise PDF for %d students to %s", len(students), file_path)
    return file_path
