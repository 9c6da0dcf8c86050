from http import HTTPStatus
from typing import Any

from fastapi.responses import JSONResponse

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem_response(status_code: int, detail: str, **extra: Any) -> JSONResponse:
    """Build an RFC 7807 problem response.

    Extra keyword arguments become additional members of the problem body.
    """
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Unknown Error"

    content = {
        "type": f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
        "detail": detail,
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, media_type=PROBLEM_MEDIA_TYPE)
