"""
Request ID tracking.

Reuses an incoming X-Request-ID (so calls can be traced across services) or
generates one, exposes it as ``g.request_id`` for log records and echoes it
on the response.
"""
import uuid
from flask import Flask, g, request

REQUEST_ID_HEADER = 'X-Request-ID'


def init_request_id_tracking(app: Flask) -> None:
    """Register the before/after request hooks."""

    @app.before_request
    def assign_request_id():
        incoming = request.headers.get(REQUEST_ID_HEADER, '').strip()
        g.request_id = incoming[:64] if incoming else uuid.uuid4().hex

    @app.after_request
    def echo_request_id(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
