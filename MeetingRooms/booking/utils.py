import uuid
from datetime import datetime, time, timedelta, timezone as dt_timezone

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .availability import overlaps


# Rooms created on first migrate (and by `manage.py seed_rooms`)
DEFAULT_ROOMS = [
    {
        'name': 'Conference Room A',
        'capacity': 8,
        'description': 'Main conference room with projector',
    },
    {
        'name': 'Meeting Room B',
        'capacity': 4,
        'description': 'Small meeting room for team discussions',
    },
    {
        'name': 'Board Room',
        'capacity': 12,
        'description': 'Executive board room with video conferencing',
    },
]


def parse_uuid(value):
    """UUID from any value, or None when it is not one"""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


# ============= TIMESTAMPS =============

def parse_timestamp(value):
    """
    Parse an ISO 8601 string into an aware datetime.
    Naive values are read in the configured TIME_ZONE. The result is in
    UTC. Returns None when the value can't be parsed or falls outside the
    representable range once converted.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
        except ValueError:
            return None
        if parsed is None:
            # A bare date means midnight
            day = parse_day(value)
            if day is None:
                return None
            parsed = datetime.combine(day, time.min)
    else:
        return None

    try:
        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed.astimezone(dt_timezone.utc)
    except (OverflowError, ValueError):
        return None


def parse_day(value):
    if not isinstance(value, str):
        return None
    try:
        return parse_date(value.strip())
    except ValueError:
        return None


def format_timestamp(value):
    """UTC, millisecond precision, 'Z' suffix: 2026-10-19T09:00:00.000Z"""
    if value is None:
        return None
    return value.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def day_bounds(day):
    """Aware [midnight, next midnight) for a date in the current time zone"""
    start = timezone.make_aware(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


# ============= TIMELINE GRID =============

def build_timeline(rooms, bookings, day, first_hour=None, last_hour=None):
    """
    One row per room, one cell per hour from first_hour to last_hour.
    A cell is 'free', 'booking' (first hour a booking touches, with its
    span in cells) or 'covered' (later hours of a booking already placed).
    """
    first_hour = settings.TIMELINE_FIRST_HOUR if first_hour is None else first_hour
    last_hour = settings.TIMELINE_LAST_HOUR if last_hour is None else last_hour
    hours = range(first_hour, last_hour + 1)
    midnight, _ = day_bounds(day)

    def slot_bounds(hour):
        slot_start = midnight + timedelta(hours=hour)
        return slot_start, slot_start + timedelta(hours=1)

    rows = []
    for room in rooms:
        room_bookings = [b for b in bookings if str(b.room_id) == str(room.id)]
        placed = set()
        slots = []

        for h in hours:
            slot_start, slot_end = slot_bounds(h)
            booking = next(
                (b for b in room_bookings if overlaps(slot_start, slot_end, b.start, b.end)),
                None,
            )

            if booking is None:
                slots.append({'hour': h, 'type': 'free'})
            elif booking.id in placed:
                slots.append({'hour': h, 'type': 'covered', 'bookingId': str(booking.id)})
            else:
                placed.add(booking.id)
                span = sum(
                    1 for later in hours
                    if later >= h and overlaps(*slot_bounds(later), booking.start, booking.end)
                )
                slots.append({
                    'hour': h,
                    'type': 'booking',
                    'bookingId': str(booking.id),
                    'title': booking.title,
                    'bookedBy': booking.booked_by,
                    'span': span,
                })

        rows.append({'roomId': str(room.id), 'roomName': room.name, 'slots': slots})

    return {
        'date': day.isoformat(),
        'hours': [f"{h:02d}:00" for h in hours],
        'rooms': rows,
    }
