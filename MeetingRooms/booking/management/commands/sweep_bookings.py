from django.core.management.base import BaseCommand

from booking.services import purge_expired_bookings, retention_cutoff


class Command(BaseCommand):
    help = 'Deletes bookings that started before the retention window (for cron)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run', action='store_true',
            help='Only report how many bookings would be removed',
        )

    def handle(self, *args, **options):
        cutoff = retention_cutoff()
        if options['dry_run']:
            count = purge_expired_bookings(dry_run=True)
            self.stdout.write(f"{count} booking(s) started before {cutoff:%Y-%m-%d %H:%M} and would be removed.")
            return

        removed = purge_expired_bookings()
        self.stdout.write(self.style.SUCCESS(f"Removed {removed} booking(s) started before {cutoff:%Y-%m-%d %H:%M}."))
