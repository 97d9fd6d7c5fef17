"""JSON representations of rooms and bookings. Unset optional fields are left out."""

from .utils import format_timestamp


def room_to_dict(room):
    data = {
        'id': str(room.id),
        'name': room.name,
        'createdAt': format_timestamp(room.created_at),
    }
    if room.capacity:
        data['capacity'] = room.capacity
    if room.description:
        data['description'] = room.description
    return data


def booking_to_dict(booking):
    data = {
        'id': str(booking.id),
        'roomId': str(booking.room_id),
        'roomName': booking.room_name,
        'title': booking.title,
        'start': format_timestamp(booking.start),
        'end': format_timestamp(booking.end),
        'bookedBy': booking.booked_by,
        'createdAt': format_timestamp(booking.created_at),
    }
    if booking.description:
        data['description'] = booking.description
    if booking.booked_for:
        data['bookedFor'] = booking.booked_for
    return data
