"""
Availability engine.

Pure functions over bookings. A booking occupies the half-open interval
[start, end): a booking ending at 10:00 leaves 10:00 free for the next one.
Anything exposing ``id``, ``room_id``, ``start`` and ``end`` can be checked,
so these work on model instances as well as plain records.
"""


def overlaps(start, end, other_start, other_end):
    """Conflict predicate for two half-open intervals"""
    return start < other_end and end > other_start


def _same_id(left, right):
    return str(left) == str(right)


def conflicting_bookings(room_id, start, end, bookings, exclude_booking_id=None):
    """Every booking of ``room_id`` that overlaps [start, end)"""
    conflicts = []
    for booking in bookings:
        if exclude_booking_id is not None and _same_id(booking.id, exclude_booking_id):
            continue
        if not _same_id(booking.room_id, room_id):
            continue
        # Zero-length bookings can't be stored, but never let one block a slot
        if booking.start >= booking.end:
            continue
        if overlaps(start, end, booking.start, booking.end):
            conflicts.append(booking)
    return conflicts


def is_available(room_id, start, end, bookings, exclude_booking_id=None):
    return not conflicting_bookings(room_id, start, end, bookings, exclude_booking_id)


def in_progress(room_id, moment, bookings):
    """Bookings of ``room_id`` running at ``moment`` (start <= moment < end)"""
    return [
        booking for booking in bookings
        if _same_id(booking.room_id, room_id) and booking.start <= moment < booking.end
    ]
