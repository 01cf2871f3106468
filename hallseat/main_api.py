import logging
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hallseat.allocator import allocate_students, total_capacity
from hallseat.config import settings
from hallseat.database import Base, engine, get_db
from hallseat.db_models import StudentDB, RoomDB, ExamDB, SeatAllocationDB
from hallseat.exports import (
    export_room_wise_excel,
    export_room_wise_pdf,
    export_student_wise_excel,
    export_student_wise_pdf,
)
from hallseat.layouts import generate_layout
from hallseat.reports import room_wise, student_wise
from hallseat.student_import import ImportFormatError, room_import_excel, student_import_excel

logger = logging.getLogger(__name__)

app = FastAPI(title = "Exam Hall Seating API")

Base.metadata.create_all(bind = engine)


class StudentIn(BaseModel):
    roll_number: str
    name: str
    department: str
    semester: int
    section: Optional[str] = None
    email: Optional[str] = None


class RoomIn(BaseModel):
    room_number: str
    building: Optional[str] = None
    floor: Optional[int] = None
    capacity: int = Field(..., ge=0)
    rows: Optional[int] = Field(None, ge=0)
    columns: Optional[int] = Field(None, ge=0)


class ExamIn(BaseModel):
    course_code: str
    course_name: str
    exam_date: str
    exam_time: str
    department: str
    semester: int
    duration_minutes: int = Field(..., gt=0)


class ImportRequest(BaseModel):
    file_path: str


class GenerateRequest(BaseModel):
    exam_id: int
    mix_departments: Optional[bool] = None


def student_out(s):
    return {
        "id": s.id,
        "roll_number": s.roll_number,
        "name": s.name,
        "department": s.department,
        "semester": s.semester,
        "section": s.section,
        "email": s.email
    }


def room_out(r):
    return {
        "id": r.id,
        "room_number": r.room_number,
        "building": r.building,
        "floor": r.floor,
        "capacity": r.capacity,
        "rows": r.rows,
        "columns": r.columns
    }


def exam_out(e):
    return {
        "id": e.id,
        "course_code": e.course_code,
        "course_name": e.course_name,
        "exam_date": e.exam_date,
        "exam_time": e.exam_time,
        "department": e.department,
        "semester": e.semester,
        "duration_minutes": e.duration_minutes
    }


def get_exam_or_404(db, exam_id):
    exam = db.query(ExamDB).filter(ExamDB.id == exam_id).first()
    if not exam:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


def exam_students(db, exam):
    return (
        db.query(StudentDB)
        .filter(StudentDB.department == exam.department)
        .filter(StudentDB.semester == exam.semester)
        .order_by(StudentDB.roll_number)
        .all()
    )


def allocation_rows(db, exam_id):
    results = (
        db.query(SeatAllocationDB, StudentDB, RoomDB)
        .join(StudentDB, SeatAllocationDB.student_id == StudentDB.id)
        .join(RoomDB, SeatAllocationDB.room_id == RoomDB.id)
        .filter(SeatAllocationDB.exam_id == exam_id)
        .order_by(RoomDB.room_number, SeatAllocationDB.seat_number)
        .all()
    )

    return [
        {
            "room_id": room.id,
            "room_number": room.room_number,
            "building": room.building,
            "seat_number": alloc.seat_number,
            "seat_row": alloc.seat_row,
            "seat_col": alloc.seat_col,
            "student_id": student.id,
            "roll_number": student.roll_number,
            "name": student.name,
            "department": student.department
        }
        for alloc, student, room in results
    ]


def report_rows_or_404(db, exam_id):
    rows = allocation_rows(db, exam_id)
    if not rows:
        raise HTTPException(status_code=404, detail="No allocation found. Run /seating/generate first.")
    return rows


def add_or_conflict(db, obj, conflict_message):
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=conflict_message)
    db.refresh(obj)
    return obj


@app.get("/")
def root():
    return {"message": "Exam Hall Seating API is running !"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    return {
        "total_students": db.query(StudentDB).count(),
        "total_rooms": db.query(RoomDB).count(),
        "total_exams": db.query(ExamDB).count(),
        "total_allocations": db.query(SeatAllocationDB).count()
    }


@app.get("/students")
def get_students(db: Session = Depends(get_db)):
    students = db.query(StudentDB).order_by(StudentDB.roll_number).all()
    return [student_out(s) for s in students]


@app.post("/students", status_code=201)
def create_student(body: StudentIn, db: Session = Depends(get_db)):
    student = add_or_conflict(db, StudentDB(**body.model_dump()), "Roll number exists")
    return student_out(student)


@app.post("/students/import")
def import_students(req: ImportRequest, db: Session = Depends(get_db)):
    try:
        rows = student_import_excel(req.file_path)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    inserted = 0
    skipped = 0
    seen = set()

    for row in rows:
        existing = db.query(StudentDB).filter(StudentDB.roll_number == row["roll_number"]).first()
        if existing or row["roll_number"] in seen:
            skipped += 1
            continue

        db.add(StudentDB(**row))
        seen.add(row["roll_number"])
        inserted += 1

    db.commit()
    logger.info("Student import: %d inserted, %d skipped", inserted, skipped)

    return {
        "message": "Student import completed",
        "inserted": inserted,
        "skipped_duplicates": skipped
    }


@app.get("/rooms")
def get_rooms(db: Session = Depends(get_db)):
    rooms = db.query(RoomDB).order_by(RoomDB.room_number).all()
    return [room_out(r) for r in rooms]


@app.post("/rooms", status_code=201)
def create_room(body: RoomIn, db: Session = Depends(get_db)):
    room = add_or_conflict(db, RoomDB(**body.model_dump()), "Room number exists")
    return room_out(room)


@app.post("/rooms/import")
def import_rooms(req: ImportRequest, db: Session = Depends(get_db)):
    try:
        rows = room_import_excel(req.file_path)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    inserted = 0
    skipped = 0
    seen = set()

    for row in rows:
        existing = db.query(RoomDB).filter(RoomDB.room_number == row["room_number"]).first()
        if existing or row["room_number"] in seen:
            skipped += 1
            continue

        db.add(RoomDB(**row))
        seen.add(row["room_number"])
        inserted += 1

    db.commit()
    logger.info("Room import: %d inserted, %d skipped", inserted, skipped)

    return {
        "message": "Room import completed",
        "inserted": inserted,
        "skipped_duplicates": skipped
    }


@app.get("/rooms/{room_id}/seats")
def get_room_seats(room_id: int, db: Session = Depends(get_db)):
    room = db.query(RoomDB).filter(RoomDB.id == room_id).first()
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    seats = generate_layout(room.to_room())
    return {
        "room_number": room.room_number,
        "total_seats": len(seats),
        "seats": seats
    }


@app.get("/exams")
def get_exams(db: Session = Depends(get_db)):
    exams = db.query(ExamDB).order_by(ExamDB.exam_date, ExamDB.exam_time).all()
    return [exam_out(e) for e in exams]


@app.get("/exams/{exam_id}")
def get_exam(exam_id: int, db: Session = Depends(get_db)):
    return exam_out(get_exam_or_404(db, exam_id))


@app.post("/exams", status_code=201)
def create_exam(body: ExamIn, db: Session = Depends(get_db)):
    exam = ExamDB(**body.model_dump())
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam_out(exam)


@app.get("/capacity-check")
def capacity_check(exam_id: int, db: Session = Depends(get_db)):
    exam = get_exam_or_404(db, exam_id)

    total_students = len(exam_students(db, exam))
    total_seats = total_capacity([r.to_room() for r in db.query(RoomDB).all()])
    shortage = max(0, total_students - total_seats)

    return {
        "exam_id": exam.id,
        "total_students": total_students,
        "total_seats": total_seats,
        "shortage_students": shortage
    }


@app.post("/seating/generate")
def generate_seating(req: GenerateRequest, db: Session = Depends(get_db)):
    exam = get_exam_or_404(db, req.exam_id)

    students = exam_students(db, exam)
    if not students:
        raise HTTPException(status_code=400, detail="No students found for this exam")

    rooms = db.query(RoomDB).order_by(RoomDB.room_number).all()
    if not rooms:
        raise HTTPException(status_code=400, detail="No rooms configured")

    mix = settings.mix_departments if req.mix_departments is None else req.mix_departments
    allocations = allocate_students(
        [s.to_student() for s in students],
        [r.to_room() for r in rooms],
        mix_groups=mix
    )

    if len(allocations) < len(students):
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Not enough room capacity",
                "allocated": len(allocations),
                "total": len(students)
            }
        )

    # replace the previous allocation for this exam in one transaction
    try:
        db.query(SeatAllocationDB).filter(SeatAllocationDB.exam_id == exam.id).delete()
        for a in allocations:
            db.add(SeatAllocationDB(
                exam_id=exam.id,
                student_id=a.student_id,
                room_id=a.room_id,
                seat_number=a.seat_number,
                seat_row=a.row_number,
                seat_col=a.column_number
            ))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Saving seating for exam %s failed", exam.id)
        raise HTTPException(status_code=500, detail="Error generating seating")

    rooms_used = len({a.room_id for a in allocations})
    logger.info(
        "Generated seating for exam %s: %d students in %d rooms",
        exam.id, len(allocations), rooms_used
    )

    return {
        "message": "Seating generated",
        "total_allocated": len(allocations),
        "rooms_used": rooms_used
    }


@app.get("/seating/allocations")
def get_allocations(exam_id: int, db: Session = Depends(get_db)):
    return allocation_rows(db, exam_id)


@app.delete("/seating/allocations")
def delete_allocations(exam_id: int, db: Session = Depends(get_db)):
    deleted = db.query(SeatAllocationDB).filter(SeatAllocationDB.exam_id == exam_id).delete()
    db.commit()
    return {"deleted": deleted}


@app.get("/reports/room-wise")
def report_room_wise(exam_id: int, db: Session = Depends(get_db)):
    get_exam_or_404(db, exam_id)
    return room_wise(allocation_rows(db, exam_id))


@app.get("/reports/student-wise")
def report_student_wise(exam_id: int, db: Session = Depends(get_db)):
    get_exam_or_404(db, exam_id)
    return student_wise(allocation_rows(db, exam_id))


def export_path(name):
    export_dir = settings.export_dir
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir / name


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@app.get("/export/room-wise/excel")
def export_room_wise_xlsx(exam_id: int, db: Session = Depends(get_db)):
    get_exam_or_404(db, exam_id)
    rooms = room_wise(report_rows_or_404(db, exam_id))

    file_path = export_room_wise_excel(rooms, export_path(f"room_wise_{exam_id}.xlsx"))
    return FileResponse(path=str(file_path), filename=file_path.name, media_type=XLSX_MEDIA_TYPE)


@app.get("/export/student-wise/excel")
def export_student_wise_xlsx(exam_id: int, db: Session = Depends(get_db)):
    get_exam_or_404(db, exam_id)
    students = student_wise(report_rows_or_404(db, exam_id))

    file_path = export_student_wise_excel(students, export_path(f"student_wise_{exam_id}.xlsx"))
    return FileResponse(path=str(file_path), filename=file_path.name, media_type=XLSX_MEDIA_TYPE)


@app.get("/export/room-wise/pdf")
def export_room_wise_report_pdf(exam_id: int, db: Session = Depends(get_db)):
    exam = get_exam_or_404(db, exam_id)
    rooms = room_wise(report_rows_or_404(db, exam_id))

    file_path = export_room_wise_pdf(rooms, exam, export_path(f"room_wise_{exam_id}.pdf"))
    return FileResponse(path=str(file_path), filename=file_path.name, media_type="application/pdf")


@app.get("/export/student-wise/pdf")
def export_student_wise_report_pdf(exam_id: int, db: Session = Depends(get_db)):
    exam = get_exam_or_404(db, exam_id)
    students = student_wise(report_rows_or_404(db, exam_id))

    file_path = export_student_wise_pdf(students, exam, export_path(f"student_wise_{exam_id}.pdf"))
    return FileResponse(path=str(file_path), filename=file_path.name, media_type="application/pdf")


@app.get("/public/seat-lookup")
def seat_lookup(roll_number: str, exam_id: int, db: Session = Depends(get_db)):
    student = db.query(StudentDB).filter(StudentDB.roll_number == roll_number).first()
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    result = (
        db.query(SeatAllocationDB, RoomDB)
        .join(RoomDB, SeatAllocationDB.room_id == RoomDB.id)
        .filter(SeatAllocationDB.exam_id == exam_id)
        .filter(SeatAllocationDB.student_id == student.id)
        .first()
    )
    if not result:
        raise HTTPException(status_code=404, detail="Seat not allocated yet")

    allocation, room = result
    return {
        "roll_number": student.roll_number,
        "name": student.name,
        "room_number": room.room_number,
        "building": room.building,
        "seat_number": allocation.seat_number,
        "row": allocation.seat_row,
        "column": allocation.seat_col
    }
