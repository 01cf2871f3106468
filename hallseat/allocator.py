import logging
import random
from typing import Dict, List, Optional

from hallseat.layouts import seat_position
from hallseat.models import Room, SeatingAllocation, Student

logger = logging.getLogger(__name__)


def group_key(student: Student) -> Optional[str]:
    """Department label of a student; None is the shared ungrouped bucket."""
    return student.department or None


def order_rooms(rooms: List[Room]) -> List[Room]:
    # sorted() is stable, so equal capacities keep their input order
    return sorted(rooms, key=lambda room: room.seats, reverse=True)


def total_capacity(rooms: List[Room]) -> int:
    return sum(room.seats for room in rooms)


def interleave_by_group(students: List[Student]) -> List[Student]:
    """Round-robin students across departments.

    Departments are visited in the order they first appear and each one keeps
    its members in input order, so the result only depends on the input order.
    """
    groups: Dict[Optional[str], List[Student]] = {}
    for student in students:
        groups.setdefault(group_key(student), []).append(student)

    if not groups:
        return []

    ordered = []
    longest = max(len(members) for members in groups.values())
    for i in range(longest):
        for members in groups.values():
            if i < len(members):
                ordered.append(members[i])

    return ordered


def shuffle_students(students: List[Student], rng=None) -> List[Student]:
    rng = rng or random.Random()
    shuffled = list(students)
    rng.shuffle(shuffled)
    return shuffled


def _check_unique_ids(students):
    seen = set()
    for student in students:
        if student.id in seen:
            raise ValueError(f"Duplicate student id: {student.id}")
        seen.add(student.id)


def allocate_students(students, rooms, mix_groups=True, rng=None):
    """Assign students to seats, filling the largest rooms first.

    With ``mix_groups`` the students are interleaved by department and the
    result is fully determined by the input order. Without it they are
    shuffled using ``rng`` (a ``random.Random``), or a fresh generator when
    none is given.

    When the rooms cannot hold everyone the leading students that fit are
    seated and the rest are left out; compare the length of the result with
    ``len(students)`` to detect that.
    """
    _check_unique_ids(students)

    if mix_groups:
        queue = interleave_by_group(students)
    else:
        queue = shuffle_students(students, rng)

    allocation = []
    index = 0

    for room in order_rooms(rooms):
        if index >= len(queue):
            break

        for seat in range(1, room.seats + 1):
            if index >= len(queue):
                break

            row, column = seat_position(seat, room.rows, room.columns)
            allocation.append(
                SeatingAllocation(
                    student_id=queue[index].id,
                    room_id=room.id,
                    seat_number=seat,
                    row_number=row,
                    column_number=column,
                )
            )
            index += 1

    logger.debug(
        "Allocated %d of %d students across %d rooms",
        len(allocation), len(students), len({a.room_id for a in allocation}),
    )
    if len(allocation) < len(students):
        logger.warning(
            "Room capacity %d is short of %d students; %d left unseated",
            total_capacity(rooms), len(students), len(students) - len(allocation),
        )

    return allocation
