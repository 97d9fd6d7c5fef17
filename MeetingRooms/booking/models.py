import uuid

from django.db import models
from django.utils import timezone


# ============= ROOM MODEL =============
class Room(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    capacity = models.PositiveIntegerField(null=True, blank=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        if self.capacity:
            return f"{self.name} (Capacity: {self.capacity})"
        return self.name

    class Meta:
        ordering = ['created_at']


# ============= BOOKING MODEL =============
class BookingQuerySet(models.QuerySet):

    def for_room(self, room_id):
        return self.filter(room_id=room_id)

    def overlapping(self, start, end):
        """Bookings whose [start, end) intersects the given window"""
        return self.filter(start__lt=end, end__gt=start)

    def expired(self, cutoff):
        return self.filter(start__lt=cutoff)

    def upcoming(self, now):
        return self.filter(start__gte=now)


class Booking(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # PROTECT: a room cannot disappear while bookings still point at it
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name='bookings')

    # Snapshot of the room name when the booking was made, not a lookup
    room_name = models.CharField(max_length=100)

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField()
    booked_by = models.CharField(max_length=100)
    booked_for = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    objects = BookingQuerySet.as_manager()

    def __str__(self):
        return f"{self.title} - {self.room_name} ({self.start:%Y-%m-%d %H:%M}-{self.end:%H:%M})"

    class Meta:
        ordering = ['start']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start__lt=models.F('end')),
                name='booking_start_before_end',
            ),
        ]
