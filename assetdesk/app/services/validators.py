"""Validation rules for AssetDesk write requests.

This module provides the business validation that runs before a service
touches the database:
- Generic field checks (length, range)
- User rules (names, minimum age, joined date)
- Assignment rules (note length, assigned date)

Every ``validate_*`` request function returns ``(is_valid, errors)`` where
``errors`` is a list of human-readable strings. Shape validation (types,
required fields) is left to the Pydantic request models.
"""

from datetime import date
from typing import List, Optional, Tuple, Union

from app.models.domain.assignment import AddAssignmentRequest
from app.models.domain.user import AddUserRequest, UpdateUserRequest

# Type definitions
ValidationResult = Tuple[bool, Optional[str]]
RequestValidation = Tuple[bool, List[str]]

NAME_MAX_LENGTH = 50
NOTE_MAX_LENGTH = 600
MINIMUM_AGE = 18

# Generic validators
def validate_length(
    value: str,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None
) -> ValidationResult:
    """Validate string length."""
    if min_length and len(value) < min_length:
        return False, f"Must be at least {min_length} characters"

    if max_length and len(value) > max_length:
        return False, f"Must be no more than {max_length} characters"

    return True, None

def validate_range(
    value: Union[int, float],
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None
) -> ValidationResult:
    """Validate numeric range."""
    if min_value is not None and value < min_value:
        return False, f"Must be greater than or equal to {min_value}"

    if max_value is not None and value > max_value:
        return False, f"Must be less than or equal to {max_value}"

    return True, None

def age_on(date_of_birth: date, on: date) -> int:
    """Whole years between ``date_of_birth`` and ``on``."""
    before_birthday = (on.month, on.day) < (date_of_birth.month, date_of_birth.day)
    return on.year - date_of_birth.year - int(before_birthday)

def _collect(errors: List[str], field: str, result: ValidationResult):
    is_valid, error = result
    if not is_valid:
        errors.append(f"{field}: {error}")

def _validate_name(errors: List[str], field: str, value: str):
    if not value or not value.strip():
        errors.append(f"{field}: Is required")
        return
    _collect(errors, field, validate_length(value.strip(), max_length=NAME_MAX_LENGTH))

def _validate_dates(
    errors: List[str],
    date_of_birth: date,
    joined_date: date,
    today: date
):
    if date_of_birth >= today:
        errors.append("dateOfBirth: Must be in the past")
    else:
        _collect(
            errors,
            "dateOfBirth",
            validate_range(age_on(date_of_birth, today), min_value=MINIMUM_AGE)
        )

    if joined_date <= date_of_birth:
        errors.append("joinedDate: Must be later than date of birth")
    elif age_on(date_of_birth, joined_date) < MINIMUM_AGE:
        errors.append(f"joinedDate: User must be at least {MINIMUM_AGE} when joining")

    # Saturday or Sunday
    if joined_date.weekday() >= 5:
        errors.append("joinedDate: Must not be on Saturday or Sunday")

def validate_add_user(
    request: AddUserRequest,
    today: Optional[date] = None
) -> RequestValidation:
    """Validate a create-user request."""
    today = today or date.today()
    errors: List[str] = []

    _validate_name(errors, "firstName", request.first_name)
    _validate_name(errors, "lastName", request.last_name)
    _validate_dates(errors, request.date_of_birth, request.joined_date, today)

    return not errors, errors

def validate_update_user(
    request: UpdateUserRequest,
    today: Optional[date] = None
) -> RequestValidation:
    """Validate an edit-user request."""
    errors: List[str] = []
    _validate_dates(errors, request.date_of_birth, request.joined_date, today or date.today())
    return not errors, errors

def validate_add_assignment(
    request: AddAssignmentRequest,
    today: Optional[date] = None
) -> RequestValidation:
    """Validate a create-assignment request."""
    today = today or date.today()
    errors: List[str] = []

    _collect(errors, "note", validate_length(request.note or "", max_length=NOTE_MAX_LENGTH))
    if request.assigned_date < today:
        errors.append("assignedDate: Must be today or later")
    if request.assigned_to_id == request.assigned_by_id:
        errors.append("assignedToId: Cannot assign an asset to yourself")

    return not errors, errors
