"""
Room and booking services.

Views call into these; they validate input, enforce the booking rules and
raise errors from ``booking.exceptions``. Every read of the booking
collection first runs the retention sweep.
"""
import logging
import threading
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from . import availability
from .exceptions import ConflictError, ConstraintError, NotFoundError, ValidationError
from .forms import RoomForm
from .models import Booking, Room
from .utils import day_bounds, parse_timestamp, parse_uuid

logger = logging.getLogger(__name__)

# Serializes "check availability + insert" inside this process
_booking_lock = threading.Lock()


def _text(value):
    if value is None:
        return ''
    return str(value).strip()


# ============= RETENTION =============

def retention_cutoff(now=None):
    now = now or timezone.now()
    return now - timedelta(days=settings.BOOKING_RETENTION_DAYS)


def purge_expired_bookings(now=None, dry_run=False):
    """
    Delete bookings that started before the retention cutoff.
    Returns how many were (or, with dry_run, would be) removed.
    """
    expired = Booking.objects.expired(retention_cutoff(now))
    if dry_run:
        return expired.count()

    removed, _ = expired.delete()
    if removed:
        logger.info("Cleaned up %d old bookings", removed)
    return removed


# ============= ROOMS =============

class RoomService:

    def list_rooms(self):
        try:
            return list(Room.objects.all())
        except DatabaseError:
            logger.exception("Error reading rooms")
            return []

    def get_room(self, room_id):
        pk = parse_uuid(room_id)
        room = Room.objects.filter(pk=pk).first() if pk else None
        if room is None:
            raise NotFoundError("Room not found")
        return room

    def create_room(self, data):
        form = RoomForm(data)
        if not form.is_valid():
            raise ValidationError(form.first_error())

        room = form.save()
        logger.info("Room created", extra={'room_id': str(room.id), 'room_name': room.name})
        return room

    def delete_room(self, room_id, now=None):
        """
        Expired bookings are purged before the reference check, so a room
        whose only bookings have aged out can be deleted right away.
        """
        pk = parse_uuid(room_id)
        purge_expired_bookings(now)

        if pk and Booking.objects.for_room(pk).exists():
            raise ConstraintError("Cannot delete room with active bookings")

        try:
            deleted, _ = Room.objects.filter(pk=pk).delete() if pk else (0, {})
        except ProtectedError:
            # A booking slipped in between the check and the delete
            raise ConstraintError("Cannot delete room with active bookings")

        if not deleted:
            raise NotFoundError("Room not found")
        logger.info("Room deleted", extra={'room_id': str(pk)})

    def available_rooms(self, start, end=None, now=None):
        """
        Rooms with no booking overlapping [start, end). Without ``end``,
        rooms with no booking in progress at ``start``.
        """
        if end is None:
            rooms = self.list_rooms()
            bookings = BookingService().list_bookings(start=start, now=now)
            return [
                room for room in rooms
                if not availability.in_progress(room.id, start, bookings)
            ]

        if start >= end:
            raise ValidationError("Start time must be before end time")

        rooms = self.list_rooms()
        bookings = BookingService().list_bookings(start=start, end=end, now=now)
        return [
            room for room in rooms
            if availability.is_available(room.id, start, end, bookings)
        ]


# ============= BOOKINGS =============

class BookingService:
    REQUIRED_FIELDS = ('roomId', 'title', 'start', 'end', 'bookedBy')

    def list_bookings(self, room_id=None, start=None, end=None, now=None):
        try:
            purge_expired_bookings(now)
            bookings = Booking.objects.all()
            if room_id is not None:
                bookings = bookings.for_room(parse_uuid(room_id))
            if start is not None and end is not None:
                bookings = bookings.overlapping(start, end)
            elif start is not None:
                bookings = bookings.filter(end__gt=start)
            elif end is not None:
                bookings = bookings.filter(start__lt=end)
            return list(bookings)
        except DatabaseError:
            logger.exception("Error reading bookings")
            return []

    def bookings_for_day(self, day, now=None):
        start, end = day_bounds(day)
        return self.list_bookings(start=start, end=end, now=now)

    def create_booking(self, data, now=None):
        """
        Validate and store a booking. Checks run in a fixed order and the
        first failure wins: required fields, start/end, not in the past,
        room exists, slot free.
        """
        now = now or timezone.now()

        if any(not _text(data.get(field)) for field in self.REQUIRED_FIELDS):
            raise ValidationError(
                "Missing required fields: " + ", ".join(self.REQUIRED_FIELDS)
            )

        start = parse_timestamp(data['start'])
        end = parse_timestamp(data['end'])
        if start is None or end is None:
            raise ValidationError("Invalid start or end time")
        if start >= end:
            raise ValidationError("Start time must be before end time")
        if start < now:
            raise ValidationError("Cannot book in the past")

        room_pk = parse_uuid(data['roomId'])

        with _booking_lock, transaction.atomic():
            room = Room.objects.select_for_update().filter(pk=room_pk).first() if room_pk else None
            if room is None:
                raise NotFoundError("Room not found")

            purge_expired_bookings(now)
            candidates = Booking.objects.for_room(room.pk).overlapping(start, end)
            conflicts = availability.conflicting_bookings(room.pk, start, end, candidates)
            if conflicts:
                logger.warning(
                    "Booking rejected: slot already booked",
                    extra={
                        'room_id': str(room.pk),
                        'start': start.isoformat(),
                        'end': end.isoformat(),
                        'conflicts': [str(b.id) for b in conflicts],
                    },
                )
                raise ConflictError("Time slot is already booked")

            booking = Booking.objects.create(
                room=room,
                room_name=room.name,
                title=_text(data['title']),
                description=_text(data.get('description')),
                start=start,
                end=end,
                booked_by=_text(data['bookedBy']),
                booked_for=_text(data.get('bookedFor')),
                created_at=now,
            )

        logger.info(
            "Booking created",
            extra={'booking_id': str(booking.id), 'room_id': str(room.pk)},
        )
        return booking

    def delete_booking(self, booking_id, now=None):
        """Expired bookings are swept first, so they can't be cancelled"""
        pk = parse_uuid(booking_id)
        purge_expired_bookings(now)
        deleted, _ = Booking.objects.filter(pk=pk).delete() if pk else (0, {})
        if not deleted:
            raise NotFoundError("Booking not found")
        logger.info("Booking cancelled", extra={'booking_id': str(pk)})

    def statistics(self, now=None):
        now = now or timezone.now()
        bookings = self.list_bookings(now=now)
        today = timezone.localdate(now)
        return {
            'totalRooms': len(RoomService().list_rooms()),
            'totalBookings': len(bookings),
            'upcomingBookings': sum(1 for b in bookings if b.start >= now),
            # Counted by start date, a booking running past midnight is yesterday's
            'todayBookings': sum(1 for b in bookings if timezone.localdate(b.start) == today),
        }
