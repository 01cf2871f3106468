from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from hallseat.database import Base
from hallseat.models import Room, Student


class StudentDB(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key = True, index = True)
    roll_number = Column(String, unique = True, index = True, nullable = False)
    name = Column(String, nullable = False)
    department = Column(String, nullable = False)
    semester = Column(Integer, nullable = False)
    section = Column(String, nullable = True)
    email = Column(String, nullable = True)

    def to_student(self):
        return Student(
            id = self.id,
            roll_number = self.roll_number,
            name = self.name,
            department = self.department
        )


class RoomDB(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String, unique=True, index=True, nullable=False)
    building = Column(String, nullable=True)
    floor = Column(Integer, nullable=True)
    capacity = Column(Integer, nullable=False)

    # optional grid, both set or the room is a flat list of seats
    rows = Column(Integer, nullable=True)
    columns = Column(Integer, nullable=True)

    def to_room(self):
        return Room(
            id=self.id,
            capacity=self.capacity,
            rows=self.rows,
            columns=self.columns,
            room_number=self.room_number
        )


class ExamDB(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    course_code = Column(String, nullable=False)
    course_name = Column(String, nullable=False)
    exam_date = Column(String, nullable=False)
    exam_time = Column(String, nullable=False)
    department = Column(String, nullable=False)
    semester = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    allocations = relationship("SeatAllocationDB", back_populates="exam", cascade="all, delete")


class SeatAllocationDB(Base):
    __tablename__ = "seat_allocations"
    __table_args__ = (
        UniqueConstraint("exam_id", "student_id", name="uq_exam_student"),
        UniqueConstraint("exam_id", "room_id", "seat_number", name="uq_exam_room_seat"),
    )

    id = Column(Integer, primary_key=True, index=True)

    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    seat_number = Column(Integer, nullable=False)
    seat_row = Column(Integer, nullable=True)
    seat_col = Column(Integer, nullable=True)

    exam = relationship("ExamDB", back_populates="allocations")
    student = relationship("StudentDB")
    room = relationship("RoomDB")
