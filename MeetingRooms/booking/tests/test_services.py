"""
Service Tests

Booking and room lifecycle rules, called directly on the services.
"""
from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from booking import services
from booking.exceptions import ConflictError, ConstraintError, NotFoundError, ValidationError
from booking.models import Booking, Room
from booking.services import BookingService, RoomService


@pytest.fixture
def booking_service():
    return BookingService()


@pytest.fixture
def room_service():
    return RoomService()


# =============================================================================
# Create Booking
# =============================================================================

@pytest.mark.django_db
class TestCreateBooking:

    def test_creates_booking_with_room_name_snapshot(self, booking_service, booking_payload, room):
        booking = booking_service.create_booking(booking_payload(roomName='whatever the client says'))

        assert booking.room_id == room.id
        assert booking.room_name == 'R1'
        assert booking.title == 'Standup'
        assert booking.booked_for == ''
        assert Booking.objects.count() == 1

    def test_room_rename_does_not_touch_existing_bookings(self, booking_service, booking_payload, room):
        booking = booking_service.create_booking(booking_payload())
        Room.objects.filter(pk=room.pk).update(name='Renamed')

        booking.refresh_from_db()
        assert booking.room_name == 'R1'

    @pytest.mark.parametrize('field', ['roomId', 'title', 'start', 'end', 'bookedBy'])
    def test_missing_required_field(self, booking_service, booking_payload, field):
        data = booking_payload()
        data[field] = '   '

        with pytest.raises(ValidationError, match='Missing required fields'):
            booking_service.create_booking(data)
        assert not Booking.objects.exists()

    def test_unparseable_timestamp(self, booking_service, booking_payload):
        with pytest.raises(ValidationError, match='Invalid start or end time'):
            booking_service.create_booking(booking_payload(start='not-a-date'))

    def test_timestamp_out_of_range_in_utc(self, booking_service, booking_payload):
        # Valid ISO text, but past datetime.max once shifted to UTC
        payload = booking_payload(start='9999-12-31T20:00:00-10:00', end='9999-12-31T21:00:00-10:00')

        with pytest.raises(ValidationError, match='Invalid start or end time'):
            booking_service.create_booking(payload)
        assert not Booking.objects.exists()

    @pytest.mark.parametrize('start_hour, end_hour', [(10, 10), (11, 10)])
    def test_start_must_precede_end(self, booking_service, booking_payload, at, start_hour, end_hour):
        with pytest.raises(ValidationError, match='Start time must be before end time'):
            booking_service.create_booking(booking_payload(start=at(start_hour), end=at(end_hour)))
        assert not Booking.objects.exists()

    def test_cannot_book_in_the_past(self, booking_service, booking_payload):
        start = timezone.now() - timedelta(minutes=5)
        with pytest.raises(ValidationError, match='Cannot book in the past'):
            booking_service.create_booking(booking_payload(start=start, end=start + timedelta(hours=1)))
        assert not Booking.objects.exists()

    def test_validation_order_end_before_start_wins_over_past(self, booking_service, booking_payload):
        start = timezone.now() - timedelta(hours=1)
        with pytest.raises(ValidationError, match='Start time must be before end time'):
            booking_service.create_booking(booking_payload(start=start, end=start - timedelta(hours=1)))

    @pytest.mark.parametrize('room_id', ['00000000-0000-0000-0000-000000000000', 'not-a-uuid'])
    def test_room_not_found(self, booking_service, booking_payload, room_id):
        with pytest.raises(NotFoundError, match='Room not found'):
            booking_service.create_booking(booking_payload(roomId=room_id))

    def test_conflict(self, booking_service, booking_payload, at):
        booking_service.create_booking(booking_payload())

        with pytest.raises(ConflictError, match='Time slot is already booked'):
            booking_service.create_booking(booking_payload(start=at(9, 30), end=at(10, 30)))
        assert Booking.objects.count() == 1

    def test_same_slot_in_other_room_is_fine(self, booking_service, booking_payload, other_room):
        booking_service.create_booking(booking_payload())
        booking_service.create_booking(booking_payload(roomId=str(other_room.id)))
        assert Booking.objects.count() == 2

    def test_back_to_back_bookings(self, booking_service, booking_payload, at):
        booking_service.create_booking(booking_payload(start=at(9), end=at(10)))
        booking_service.create_booking(booking_payload(start=at(10), end=at(11)))
        booking_service.create_booking(booking_payload(start=at(8), end=at(9)))
        assert Booking.objects.count() == 3

    def test_stored_bookings_never_overlap(self, booking_service, booking_payload, at):
        attempts = [(9, 11), (10, 12), (11, 12), (8, 9), (8, 10), (12, 13), (12, 14)]
        for start_hour, end_hour in attempts:
            try:
                booking_service.create_booking(booking_payload(start=at(start_hour), end=at(end_hour)))
            except ConflictError:
                pass

        stored = list(Booking.objects.order_by('start'))
        for current, following in zip(stored, stored[1:]):
            assert current.end <= following.start

    def test_optional_fields_are_stored(self, booking_service, booking_payload):
        booking = booking_service.create_booking(
            booking_payload(description='Daily sync', bookedFor='Team A')
        )
        assert booking.description == 'Daily sync'
        assert booking.booked_for == 'Team A'

    def test_naive_timestamps_use_configured_timezone(self, booking_service, booking_payload, at):
        naive_start = timezone.make_naive(at(13))
        naive_end = timezone.make_naive(at(14))
        booking = booking_service.create_booking(
            booking_payload(start=naive_start.isoformat(), end=naive_end.isoformat())
        )
        assert booking.start == at(13)


# =============================================================================
# Delete Booking
# =============================================================================

@pytest.mark.django_db
class TestDeleteBooking:

    def test_delete_frees_the_slot(self, booking_service, booking_payload):
        booking = booking_service.create_booking(booking_payload())
        booking_service.delete_booking(str(booking.id))

        assert not Booking.objects.exists()
        booking_service.create_booking(booking_payload())

    def test_second_delete_is_not_found(self, booking_service, booking_payload):
        booking = booking_service.create_booking(booking_payload())
        booking_service.delete_booking(booking.id)

        with pytest.raises(NotFoundError, match='Booking not found'):
            booking_service.delete_booking(booking.id)

    def test_malformed_id_is_not_found(self, booking_service):
        with pytest.raises(NotFoundError):
            booking_service.delete_booking('nope')

    def test_expired_booking_is_not_found(self, booking_service, room, make_booking):
        start = timezone.now() - timedelta(days=31)
        booking = make_booking(room, start, start + timedelta(hours=1))

        with pytest.raises(NotFoundError, match='Booking not found'):
            booking_service.delete_booking(booking.id)
        assert not Booking.objects.exists()


# =============================================================================
# Rooms
# =============================================================================

@pytest.mark.django_db
class TestRooms:

    def test_seed_rooms_exist(self, room_service):
        names = [r.name for r in room_service.list_rooms()]
        assert names[:3] == ['Conference Room A', 'Meeting Room B', 'Board Room']

    def test_create_room(self, room_service):
        room = room_service.create_room({'name': 'Huddle', 'capacity': 3, 'description': 'Tiny'})
        assert room.name == 'Huddle'
        assert room.capacity == 3
        assert room.created_at is not None

    def test_create_room_without_optional_fields(self, room_service):
        room = room_service.create_room({'name': 'Huddle', 'capacity': 0, 'description': None})
        assert room.capacity is None
        assert room.description == ''

    def test_duplicate_names_are_allowed(self, room_service):
        room_service.create_room({'name': 'Huddle'})
        room_service.create_room({'name': 'Huddle'})
        assert Room.objects.filter(name='Huddle').count() == 2

    @pytest.mark.parametrize('data', [{}, {'name': ''}, {'name': '   '}])
    def test_name_is_required(self, room_service, data):
        with pytest.raises(ValidationError, match='Room name is required'):
            room_service.create_room(data)

    @pytest.mark.parametrize('capacity', [-2, 'many', 2.5])
    def test_capacity_must_be_positive_integer(self, room_service, capacity):
        with pytest.raises(ValidationError, match='Capacity must be a positive integer'):
            room_service.create_room({'name': 'Huddle', 'capacity': capacity})

    def test_delete_room_without_bookings(self, room_service, room):
        room_service.delete_room(str(room.id))
        assert room not in room_service.list_rooms()

    def test_delete_room_with_bookings_is_blocked(self, room_service, room, make_booking, at):
        booking = make_booking(room, at(9), at(10))

        with pytest.raises(ConstraintError, match='Cannot delete room with active bookings'):
            room_service.delete_room(room.id)
        assert Room.objects.filter(pk=room.pk).exists()
        assert Booking.objects.filter(pk=booking.pk).exists()

    @pytest.mark.parametrize('room_id', ['00000000-0000-0000-0000-000000000000', 'bad'])
    def test_delete_missing_room(self, room_service, room_id):
        with pytest.raises(NotFoundError, match='Room not found'):
            room_service.delete_room(room_id)

    def test_available_rooms(self, room_service, room, other_room, make_booking, at):
        make_booking(room, at(9), at(10))

        free = room_service.available_rooms(at(9, 30), at(10, 30))
        assert room not in free
        assert other_room in free

        assert room in room_service.available_rooms(at(10), at(11))

    def test_available_at_a_moment(self, room_service, room, make_booking, at):
        make_booking(room, at(9), at(10))

        assert room not in room_service.available_rooms(at(9))
        assert room not in room_service.available_rooms(at(9, 59))
        assert room in room_service.available_rooms(at(10))
        assert room in room_service.available_rooms(at(8, 59))

    def test_available_rooms_rejects_inverted_window(self, room_service, at):
        with pytest.raises(ValidationError):
            room_service.available_rooms(at(11), at(10))


# =============================================================================
# Reads fail soft
# =============================================================================

@pytest.mark.django_db
class TestReadFailures:

    def test_booking_read_error_returns_empty_list(self, booking_service, room, make_booking, at):
        make_booking(room, at(9), at(10))

        with mock.patch.object(services, 'purge_expired_bookings', side_effect=DatabaseError('disk gone')):
            assert booking_service.list_bookings() == []

    def test_room_read_error_returns_empty_list(self, room_service):
        with mock.patch.object(services.Room.objects, 'all', side_effect=DatabaseError('disk gone')):
            assert room_service.list_rooms() == []


@pytest.mark.django_db
def test_statistics(booking_service, room, make_booking, at):
    now = timezone.now()
    make_booking(room, now - timedelta(days=2), now - timedelta(days=2) + timedelta(hours=1))
    make_booking(room, at(9), at(10))
    make_booking(room, at(11), at(12))

    stats = booking_service.statistics(now=now)

    assert stats['totalRooms'] == 4
    assert stats['totalBookings'] == 3
    assert stats['upcomingBookings'] == 2
    assert stats['todayBookings'] == 0


@pytest.mark.django_db
def test_today_counts_bookings_by_start_date(booking_service, room, other_room, make_booking, at):
    # Runs over midnight into "today": yesterday's booking, not today's
    make_booking(room, at(9) - timedelta(hours=12), at(8), title='Overnight')
    make_booking(room, at(9), at(10))
    make_booking(other_room, at(15), at(16))

    stats = booking_service.statistics(now=at(12))

    assert stats['todayBookings'] == 2
    assert stats['upcomingBookings'] == 1
