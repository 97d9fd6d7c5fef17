"""
Admin authentication.

Admins are staff users from Django's auth tables. Logging in returns a
signed, expiring token; admin endpoints expect it as
``Authorization: Bearer <token>``. The token carries the user's session
auth hash, so changing the password invalidates older tokens.
"""
import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.core import signing
from django.utils.crypto import constant_time_compare

from .exceptions import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

TOKEN_SALT = 'booking.admin-token'


def issue_token(user):
    signer = signing.TimestampSigner(salt=TOKEN_SALT)
    return signer.sign_object({'uid': str(user.pk), 'hash': user.get_session_auth_hash()})


def user_from_token(token):
    signer = signing.TimestampSigner(salt=TOKEN_SALT)
    try:
        payload = signer.unsign_object(token, max_age=settings.ADMIN_TOKEN_MAX_AGE)
    except signing.SignatureExpired:
        raise AuthenticationError("Session expired, please log in again")
    except signing.BadSignature:
        raise AuthenticationError("Invalid token")

    user = get_user_model().objects.filter(pk=payload.get('uid')).first()
    if user is None or not user.is_active:
        raise AuthenticationError("Invalid token")
    if not constant_time_compare(payload.get('hash', ''), user.get_session_auth_hash()):
        raise AuthenticationError("Session expired, please log in again")
    return user


def login(username, password):
    if not username or not password:
        raise AuthenticationError("Username and password are required")

    user = authenticate(username=username, password=password)
    if user is None:
        logger.warning("Failed admin login", extra={'username': username})
        raise AuthenticationError("Invalid username or password")
    if not user.is_staff:
        raise PermissionDeniedError("Admin access required")

    logger.info("Admin logged in", extra={'username': user.get_username()})
    return user, issue_token(user)


def admin_from_request(request):
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise AuthenticationError()

    user = user_from_token(token.strip())
    if not user.is_staff:
        raise PermissionDeniedError("Admin access required")
    return user
