# ============= IMPORTS =============
# Django Core
from django.conf import settings
from django.db import DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt

# Python Standard Library
import json
import logging
from functools import wraps

# Local Imports
from . import auth
from .exceptions import BookingError, MethodNotAllowedError, ValidationError
from .exports import EXPORTERS
from .forms import AdminPasswordChangeForm
from .serializers import booking_to_dict, room_to_dict
from .services import BookingService, RoomService
from .utils import build_timeline, format_timestamp, parse_day, parse_timestamp

logger = logging.getLogger(__name__)

room_service = RoomService()
booking_service = BookingService()


# ============= HELPERS =============

def api_view(methods, admin_methods=()):
    """
    JSON endpoint wrapper: method check, admin token check for
    ``admin_methods``, and BookingError -> {"message": ...} responses.
    Token auth only, so CSRF does not apply.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                if request.method not in methods:
                    raise MethodNotAllowedError(f"Method {request.method} not allowed")
                if request.method in admin_methods:
                    request.admin = auth.admin_from_request(request)
                return view(request, *args, **kwargs)
            except BookingError as exc:
                return JsonResponse({'message': exc.message}, status=exc.status_code)
            except DatabaseError:
                logger.exception("Storage error", extra={'path': request.path})
                return JsonResponse({'message': 'Storage error, the change was not saved'}, status=500)
        return csrf_exempt(wrapper)
    return decorator


def json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_timestamp(request, name):
    value = request.GET.get(name)
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValidationError(f"Invalid '{name}' timestamp")
    return parsed


# ============= HEALTH =============

@api_view(['GET'])
def health(request):
    return JsonResponse({'status': 'OK', 'timestamp': format_timestamp(timezone.now())})


# ============= ROOMS =============

@api_view(['GET', 'POST'], admin_methods=['POST'])
def rooms(request):
    if request.method == 'POST':
        room = room_service.create_room(json_body(request))
        return JsonResponse(room_to_dict(room), status=201)

    return JsonResponse([room_to_dict(r) for r in room_service.list_rooms()], safe=False)


@api_view(['DELETE'], admin_methods=['DELETE'])
def room_detail(request, room_id):
    room_service.delete_room(room_id)
    return JsonResponse({'message': 'Room deleted successfully'})


@api_view(['GET'])
def available_rooms(request):
    """
    Rooms free for the whole [start, end) window. Without ``end``, rooms
    with nothing in progress at ``start`` (default: now).
    """
    start = query_timestamp(request, 'start') or timezone.now()
    end = query_timestamp(request, 'end')
    free = room_service.available_rooms(start, end)
    return JsonResponse([room_to_dict(r) for r in free], safe=False)


# ============= BOOKINGS =============

@api_view(['GET', 'POST'])
def bookings(request):
    if request.method == 'POST':
        booking = booking_service.create_booking(json_body(request))
        return JsonResponse(booking_to_dict(booking), status=201)

    found = booking_service.list_bookings(
        room_id=request.GET.get('roomId') or None,
        start=query_timestamp(request, 'from'),
        end=query_timestamp(request, 'to'),
    )
    return JsonResponse([booking_to_dict(b) for b in found], safe=False)


@api_view(['DELETE'])
def booking_detail(request, booking_id):
    booking_service.delete_booking(booking_id)
    return JsonResponse({'message': 'Booking deleted successfully'})


@api_view(['GET'])
def export_bookings(request):
    fmt = request.GET.get('format', 'csv').lower()
    exporter = EXPORTERS.get(fmt)
    if exporter is None:
        raise ValidationError(f"Unsupported export format '{fmt}', use one of: {', '.join(EXPORTERS)}")

    found = booking_service.list_bookings(
        room_id=request.GET.get('roomId') or None,
        start=query_timestamp(request, 'from'),
        end=query_timestamp(request, 'to'),
    )
    return exporter(found)


# ============= TIMELINE & STATS =============

@api_view(['GET'])
def timeline(request):
    """Hourly room grid for one day"""
    day = timezone.localdate()
    if request.GET.get('date'):
        day = parse_day(request.GET['date'])
        if day is None:
            raise ValidationError("Invalid date, expected YYYY-MM-DD")

    grid = build_timeline(
        room_service.list_rooms(),
        booking_service.bookings_for_day(day),
        day,
    )
    return JsonResponse(grid)


@api_view(['GET'])
def stats(request):
    return JsonResponse(booking_service.statistics())


# ============= ADMIN AUTH =============

@api_view(['POST'])
def login(request):
    data = json_body(request)
    user, token = auth.login(data.get('username'), data.get('password'))
    return JsonResponse({
        'token': token,
        'expiresIn': settings.ADMIN_TOKEN_MAX_AGE,
        'username': user.get_username(),
    })


@api_view(['POST'], admin_methods=['POST'])
def change_password(request):
    form = AdminPasswordChangeForm(request.admin, json_body(request))
    if not form.is_valid():
        raise ValidationError(form.first_error())

    user = form.save()
    logger.info("Admin password changed", extra={'username': user.get_username()})
    # Old tokens stop working once the password hash changes
    return JsonResponse({
        'message': 'Password updated successfully',
        'token': auth.issue_token(user),
    })
