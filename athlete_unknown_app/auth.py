import base64
import binascii
from functools import wraps

from django.conf import settings
from django.http import HttpResponse


def basic_auth_required(view_func):
    """
    Protect a view with HTTP Basic Authentication.

    Used for the Prometheus metrics endpoint; credentials come from
    PROMETHEUS_METRICS_AUTH_USERNAME and PROMETHEUS_METRICS_AUTH_PASSWORD.
    """

    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not settings.PROMETHEUS_METRICS_ENABLED:
            return HttpResponse("Metrics collection is disabled", status=404)

        credentials = parse_basic_auth(request.META.get("HTTP_AUTHORIZATION"))
        if credentials is None:
            return unauthorized_response()

        username, password = credentials
        if username == settings.PROMETHEUS_METRICS_AUTH_USERNAME and password == settings.PROMETHEUS_METRICS_AUTH_PASSWORD:
            return view_func(request, *args, **kwargs)

        return unauthorized_response()

    return _wrapped_view


def parse_basic_auth(auth_header):
    """
    Decode a Basic Authorization header.

    Returns:
        tuple: (username, password), or None if the header is missing or malformed
    """
    if not auth_header or " " not in auth_header:
        return None

    auth_type, auth_string = auth_header.split(" ", 1)
    if auth_type.lower() != "basic":
        return None

    try:
        auth_decoded = base64.b64decode(auth_string).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    if ":" not in auth_decoded:
        return None
    username, password = auth_decoded.split(":", 1)
    return username, password


def unauthorized_response():
    """Return a 401 Unauthorized response with WWW-Authenticate header"""
    response = HttpResponse("Unauthorized: Authentication credentials were not provided or are invalid.", status=401)
    response["WWW-Authenticate"] = 'Basic realm="Prometheus Metrics"'
    return response
