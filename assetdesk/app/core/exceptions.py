"""Application exceptions.

Services raise these internally; ``service_boundary`` turns them into
non-succeeded response envelopes, and the app-level handler covers anything
raised outside a service.
"""

from typing import List, Optional


class AppException(Exception):
    """Base exception for all AssetDesk errors."""

    status_code = 400

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppException):
    """A referenced user, asset, assignment or return request does not exist."""

    status_code = 404


class BusinessRuleViolation(AppException):
    """A request that breaks a domain rule, e.g. changing a terminal state."""

    status_code = 400


class RequestValidationFailed(AppException):
    """One or more field-level validation errors."""

    status_code = 400

    def __init__(self, errors: List[str]):
        super().__init__("Validation failed")
        self.errors = list(errors)
