import argparse
import sys

from hallseat.allocator import allocate_students
from hallseat.config import configure_logging
from hallseat.models import Room, Student
from hallseat.student_import import ImportFormatError, room_import_excel, student_import_excel


def main(argv=None):
    parser = argparse.ArgumentParser(description="Allocate exam seats from spreadsheets.")
    parser.add_argument("students", help="students .xlsx or .csv")
    parser.add_argument("rooms", help="rooms .xlsx or .csv")
    parser.add_argument("--no-mix", action="store_true", help="shuffle instead of interleaving departments")
    args = parser.parse_args(argv)

    configure_logging()

    try:
        student_rows = student_import_excel(args.students)
        room_rows = room_import_excel(args.rooms)
    except ImportFormatError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    students = [
        Student(id=i, roll_number=r["roll_number"], name=r["name"], department=r["department"])
        for i, r in enumerate(student_rows, start=1)
    ]
    rooms = [
        Room(id=i, capacity=r["capacity"], rows=r["rows"], columns=r["columns"], room_number=r["room_number"])
        for i, r in enumerate(room_rows, start=1)
    ]

    allocations = allocate_students(students, rooms, mix_groups=not args.no_mix)

    by_student = {s.id: s for s in students}
    by_room = {r.id: r for r in rooms}

    print("\n--- Seat Allocation ---")
    for a in allocations:
        s = by_student[a.student_id]
        position = ""
        if a.row_number is not None:
            position = f" | Row {a.row_number} | Column {a.column_number}"
        print(
            f"{s.roll_number} {s.name} -> Room {by_room[a.room_id].room_number} | Seat {a.seat_number}{position}"
        )

    unseated = len(students) - len(allocations)
    if unseated:
        print(f"\nWARNING: {unseated} students could not be seated, add rooms and rerun.")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
