from django.core.management.base import BaseCommand
from django.db import transaction

from booking.models import Room
from booking.utils import DEFAULT_ROOMS


class Command(BaseCommand):
    help = 'Creates the three example rooms when the room table is empty'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force', action='store_true',
            help='Add the example rooms even if rooms already exist',
        )

    def handle(self, *args, **options):
        if Room.objects.exists() and not options['force']:
            self.stdout.write(self.style.WARNING("Rooms already exist, nothing to do (use --force to add anyway)."))
            return

        with transaction.atomic():
            for data in DEFAULT_ROOMS:
                room = Room.objects.create(**data)
                self.stdout.write(f"   Created {room}")

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_ROOMS)} rooms."))
