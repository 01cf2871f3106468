from hallseat.models import Room


def seat_position(seat_number, rows, columns):
    """Row-major (row, column) of a 1-based seat, or (None, None) without a grid.

    ``rows`` only gates whether the room has a grid; seats past
    ``rows * columns`` still get a position.
    """
    if not (rows and columns and rows > 0 and columns > 0):
        return None, None

    seat_index = seat_number - 1
    return seat_index // columns + 1, seat_index % columns + 1


def generate_layout(room: Room):
    seats = []

    for seat in range(1, room.seats + 1):
        row, column = seat_position(seat, room.rows, room.columns)
        seats.append({"seat_number": seat, "row": row, "column": column})

    return seats
