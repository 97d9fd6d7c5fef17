import json
import uuid
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from booking import availability
from booking.models import Booking, Room
from booking.utils import parse_timestamp, parse_uuid


class Command(BaseCommand):
    help = 'Imports rooms.json and bookings.json written by the old file-based server'

    def add_arguments(self, parser):
        parser.add_argument('rooms_file', type=Path)
        parser.add_argument('bookings_file', type=Path, nargs='?')

    def _load(self, path):
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}")
        except ValueError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}")
        if not isinstance(data, list):
            raise CommandError(f"{path} must contain a JSON array")
        return data

    def handle(self, *args, **options):
        rooms = self._load(options['rooms_file'])
        bookings = self._load(options['bookings_file']) if options['bookings_file'] else []

        with transaction.atomic():
            created_rooms = self.import_rooms(rooms)
            created_bookings = self.import_bookings(bookings)

        self.stdout.write(self.style.SUCCESS(
            f"Imported {created_rooms} room(s) and {created_bookings} booking(s)."
        ))

    def import_rooms(self, records):
        created = 0
        for record in records:
            name = (record.get('name') or '').strip()
            if not name:
                self.stdout.write(self.style.WARNING(f"   Skipping room without a name: {record.get('id')}"))
                continue

            room_id = parse_uuid(record.get('id')) or uuid.uuid4()
            if Room.objects.filter(pk=room_id).exists():
                continue

            defaults = {
                'name': name,
                'capacity': record.get('capacity') or None,
                'description': record.get('description') or '',
            }
            created_at = parse_timestamp(record.get('createdAt'))
            if created_at:
                defaults['created_at'] = created_at

            Room.objects.create(id=room_id, **defaults)
            created += 1
        return created

    def import_bookings(self, records):
        created = 0
        for record in records:
            label = record.get('title') or record.get('id')
            room_pk = parse_uuid(record.get('roomId'))
            room = Room.objects.filter(pk=room_pk).first() if room_pk else None
            booking_id = parse_uuid(record.get('id')) or uuid.uuid4()
            start = parse_timestamp(record.get('start'))
            end = parse_timestamp(record.get('end'))

            if room is None:
                self.stdout.write(self.style.WARNING(f"   Skipping '{label}': room {record.get('roomId')} not found"))
                continue
            if start is None or end is None or start >= end:
                self.stdout.write(self.style.WARNING(f"   Skipping '{label}': invalid start/end"))
                continue
            if Booking.objects.filter(pk=booking_id).exists():
                continue

            existing = Booking.objects.for_room(room.pk).overlapping(start, end)
            if not availability.is_available(room.pk, start, end, existing):
                self.stdout.write(self.style.WARNING(f"   Skipping '{label}': overlaps an imported booking"))
                continue

            Booking.objects.create(
                id=booking_id,
                room=room,
                room_name=record.get('roomName') or room.name,
                title=record.get('title') or 'Untitled',
                description=record.get('description') or '',
                start=start,
                end=end,
                booked_by=record.get('bookedBy') or 'unknown',
                booked_for=record.get('bookedFor') or '',
                created_at=parse_timestamp(record.get('createdAt')) or start,
            )
            created += 1
        return created
