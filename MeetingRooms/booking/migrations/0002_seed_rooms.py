from django.db import migrations


def seed_rooms(apps, schema_editor):
    from booking.utils import DEFAULT_ROOMS

    Room = apps.get_model('booking', 'Room')
    if Room.objects.exists():
        return
    for room in DEFAULT_ROOMS:
        Room.objects.create(**room)


class Migration(migrations.Migration):

    dependencies = [
        ('booking', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_rooms, migrations.RunPython.noop),
    ]
