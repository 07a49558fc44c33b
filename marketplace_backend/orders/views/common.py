# orders/views/common.py

from rest_framework.response import Response


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int, **extra):
    body = {"error": {"code": code, "message": message}}
    body.update(extra)
    return Response(body, status=http_status)


def iso(dt):
    return dt.isoformat() if dt is not None else None
