from django.urls import path
from . import views

urlpatterns = [
    # Rooms ("available" must come before the id route)
    path('rooms', views.rooms, name='rooms'),
    path('rooms/available', views.available_rooms, name='available_rooms'),
    path('rooms/<str:room_id>', views.room_detail, name='room_detail'),

    # Bookings
    path('bookings', views.bookings, name='bookings'),
    path('bookings/export', views.export_bookings, name='export_bookings'),
    path('bookings/<str:booking_id>', views.booking_detail, name='booking_detail'),

    # Timeline & dashboard numbers
    path('timeline', views.timeline, name='timeline'),
    path('stats', views.stats, name='stats'),

    # Admin authentication
    path('auth/login', views.login, name='login'),
    path('auth/password', views.change_password, name='change_password'),
]
