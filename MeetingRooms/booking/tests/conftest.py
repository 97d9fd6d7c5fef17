"""
Pytest Configuration and Fixtures

Shared fixtures for booking tests. The test database is migrated, so the
three example rooms from the seed migration are always present.
"""
from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from booking.auth import issue_token
from booking.models import Booking, Room


# =============================================================================
# Time Fixtures
# =============================================================================

@pytest.fixture
def tomorrow_9am():
    """09:00 tomorrow in the configured time zone, always in the future."""
    tomorrow = timezone.localtime() + timedelta(days=1)
    return tomorrow.replace(hour=9, minute=0, second=0, microsecond=0)


@pytest.fixture
def at(tomorrow_9am):
    """Build tomorrow's timestamps: at(9, 30) -> tomorrow 09:30."""
    def _at(hour, minute=0):
        return tomorrow_9am.replace(hour=hour, minute=minute)
    return _at


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def room(db):
    return Room.objects.create(name='R1', capacity=4, description='Fourth floor')


@pytest.fixture
def other_room(db):
    return Room.objects.create(name='R2', capacity=10)


@pytest.fixture
def make_booking(db):
    """Insert a booking directly, skipping validation (e.g. for past dates)."""
    def _make(room, start, end, title='Standup', booked_by='alice', **extra):
        return Booking.objects.create(
            room=room,
            room_name=room.name,
            title=title,
            start=start,
            end=end,
            booked_by=booked_by,
            **extra,
        )
    return _make


@pytest.fixture
def booking_payload(room, at):
    """
    Valid POST /api/bookings body for 09:00-10:00 tomorrow in R1.
    start/end may be datetimes or raw strings sent as-is.
    """
    def _as_text(value):
        return value.isoformat() if isinstance(value, datetime) else value

    def _payload(start=None, end=None, **overrides):
        data = {
            'roomId': str(room.id),
            'roomName': room.name,
            'title': 'Standup',
            'start': _as_text(start or at(9)),
            'end': _as_text(end or at(10)),
            'bookedBy': 'alice',
        }
        data.update(overrides)
        return data
    return _payload


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def admin_headers(admin_user):
    """Bearer token headers for pytest-django's staff superuser."""
    return {'Authorization': f'Bearer {issue_token(admin_user)}'}
