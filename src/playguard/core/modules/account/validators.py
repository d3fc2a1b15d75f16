from datetime import date

from playguard.errors import ValidationError
from playguard.utils import is_email


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 8 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")


def validate_email(email: str) -> None:
    if not is_email(email):
        raise ValidationError(f"Invalid email address: '{email}'")


def validate_date_of_birth(date_of_birth: date, today: date) -> None:
    if date_of_birth >= today:
        raise ValidationError("Date of birth must be in the past")


def validate_required(**fields: str) -> None:
    """Reject blank personal data fields."""
    for name, value in fields.items():
        if not value.strip():
            raise ValidationError(f"Field '{name}' must not be blank")
