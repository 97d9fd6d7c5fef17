"""
WSGI config for the MeetingRooms project.

`runserver` loads this module too, so the retention sweeper starts with
either server.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'MeetingRooms.settings')

application = get_wsgi_application()

from booking.scheduler import start_retention_sweeper  # noqa: E402

start_retention_sweeper()
