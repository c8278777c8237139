from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import ErrorKind
from ..core.exceptions import AuthorizationError, DomainError, NoFaceDetected, Unauthenticated
from .validators import decode_image_payload

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BIOMETRIC_REJECTION: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


def error_response(e: DomainError):
    status = 422 if isinstance(e, NoFaceDetected) else STATUS_BY_KIND.get(e.kind, 500)
    return jsonify({"error": e.message, "kind": e.kind.value, "code": e.code}), status


def current_employee_id() -> int:
    """Identity claim placed in the session by the external auth layer."""
    raw = session.get("employee_id")
    if raw is None:
        raise Unauthenticated()
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise Unauthenticated()


def identity_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_employee_id()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_employee_id()
        if not session.get("is_admin"):
            raise AuthorizationError()
        return view(*args, **kwargs)

    return wrapper


def read_image() -> Optional[bytes]:
    """Image from a multipart ``image`` file, or a base64 ``image`` field."""
    upload = request.files.get("image")
    if upload is not None:
        return upload.read() or None

    data = request.get_json(silent=True) or {}
    return decode_image_payload(data.get("image") or request.form.get("image"))
