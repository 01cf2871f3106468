"""Report shaping over joined allocation rows.

Each row is a dict with the allocation's seat fields (``seat_number``,
``seat_row``, ``seat_col``) plus the student's ``roll_number``, ``name``,
``department`` and the room's ``room_id``, ``room_number``, ``building``.
"""


def room_wise(rows):
    rooms = {}
    for row in sorted(rows, key=lambda r: (str(r["room_number"]), r["seat_number"])):
        room = rooms.setdefault(row["room_id"], {
            "room_id": row["room_id"],
            "room_number": row["room_number"],
            "building": row.get("building"),
            "students": [],
        })
        room["students"].append({
            "seat_number": row["seat_number"],
            "seat_row": row.get("seat_row"),
            "seat_col": row.get("seat_col"),
            "roll_number": row["roll_number"],
            "name": row["name"],
            "department": row.get("department"),
        })

    return list(rooms.values())


def student_wise(rows):
    return [
        {
            "roll_number": row["roll_number"],
            "name": row["name"],
            "department": row.get("department"),
            "room_number": row["room_number"],
            "seat_number": row["seat_number"],
            "seat_row": row.get("seat_row"),
            "seat_col": row.get("seat_col"),
        }
        for row in sorted(rows, key=lambda r: str(r["roll_number"]))
    ]
