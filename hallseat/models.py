from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    id: int
    roll_number: Optional[str] = None
    name: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Room:
    id: int
    capacity: int
    rows: Optional[int] = None
    columns: Optional[int] = None
    room_number: Optional[str] = None

    @property
    def seats(self):
        # negative capacity counts as an empty room
        return max(0, int(self.capacity or 0))


@dataclass(frozen=True)
class SeatingAllocation:
    student_id: int
    room_id: int
    seat_number: int
    row_number: Optional[int] = None
    column_number: Optional[int] = None
