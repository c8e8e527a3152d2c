"""HTTP middleware applied in visita.main."""

from visita.middleware.request_id import RequestIDMiddleware, get_request_id

__all__ = ["RequestIDMiddleware", "get_request_id"]
