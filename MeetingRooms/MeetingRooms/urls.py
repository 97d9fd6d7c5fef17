"""
URL configuration for the MeetingRooms project.

/api/...  JSON API used by the booking client (see booking.urls)
/health   liveness check
/admin/   Django admin for rooms and bookings
"""
from django.contrib import admin
from django.urls import include, path
from booking import views


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', views.health, name='health'),
    path('api/', include('booking.urls')),
]
