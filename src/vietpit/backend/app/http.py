"""Problem-detail error bodies shared by the application and its blueprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping

from flask import Response, jsonify

PROBLEM_MIMETYPE = "application/problem+json"


@dataclass(frozen=True)
class ProblemResponse:
    """RFC 7807-style body keyed by an ``error`` slug.

    ``title`` is derived from the HTTP status phrase so that clients can show
    something readable even when ``message`` is omitted. Additional members
    (for example ``supported_years`` on unknown tax years) are merged into the
    top level of the payload.
    """

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error,
            "title": self.title,
            "status": self.status,
        }
        if self.message:
            payload["message"] = self.message
        payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Response, int]:
        response = jsonify(self.as_dict())
        response.mimetype = PROBLEM_MIMETYPE
        return response, self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message, extra=extra)


__all__ = ["PROBLEM_MIMETYPE", "ProblemResponse", "problem_response"]
