from django.contrib import admin, messages

from .models import Room, Booking
from .services import purge_expired_bookings


# ============= ROOM ADMIN =============
@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['name', 'capacity', 'description', 'created_at']
    search_fields = ['name']


# ============= BOOKING ADMIN =============
@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['title', 'room_name', 'start', 'end', 'booked_by', 'booked_for', 'created_at']
    list_filter = ['room']
    search_fields = ['title', 'booked_by', 'booked_for']
    date_hierarchy = 'start'
    actions = ['purge_expired']

    # Bookings are never edited after creation
    def has_change_permission(self, request, obj=None):
        return False

    def purge_expired(self, request, queryset):
        removed = purge_expired_bookings()
        self.message_user(request, f"Removed {removed} expired booking(s).", messages.SUCCESS)
    purge_expired.short_description = "Purge bookings past the retention window"
