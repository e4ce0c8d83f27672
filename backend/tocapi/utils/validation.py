"""Input validation helpers for projects and password resets."""
import re
from typing import Any, Dict, Mapping, Optional

import pydantic

from tocapi.constants import (
    COLOR_FIELDS,
    MAX_PASSWORD_BYTES,
    MAX_PROJECT_TITLE_LENGTH,
    MIN_PASSWORD_LENGTH,
    ProjectStatus,
    TocSection,
)
from tocapi.schemas.project import TocContent
from tocapi.utils.exceptions import ValidationError
from tocapi.utils.logger import logger

# Simple something@something.something check, not RFC 5322 complete
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    """Check whether an email address has a plausible format."""
    return bool(EMAIL_REGEX.fullmatch(email))


def validate_email(email: Optional[str]) -> None:
    """
    Validate an email address.

    Args:
        email: Email address to validate

    Raises:
        ValidationError: If the email is missing or malformed
    """
    if not email:
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")


def check_password_strength(password: Optional[str]) -> Optional[str]:
    """
    Check a password against the strength rules.

    Rules are checked in order: present, minimum length, at most 72 UTF-8
    bytes (the bcrypt limit), a lowercase letter, an uppercase letter, a
    digit. No special character is required.

    Args:
        password: Password to check

    Returns:
        Message for the first violated rule, or None if the password is strong enough
    """
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must not exceed {MAX_PASSWORD_BYTES} bytes"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None


def validate_password(password: Optional[str]) -> None:
    """Raise ValidationError with the first violated strength rule, if any."""
    message = check_password_strength(password)
    if message:
        raise ValidationError(message)


def validate_color_config(value: Any, partial: bool = False) -> bool:
    """
    Validate a ToC color configuration.

    Keys that are not ToC sections are ignored. Each known section must map to
    an object holding both ``shape`` and ``text`` (empty strings allowed).

    Args:
        value: Color configuration to validate
        partial: Allow a section to carry only one of ``shape``/``text``

    Returns:
        True if the format is valid, False otherwise
    """
    if not isinstance(value, Mapping):
        logger.warning("Invalid tocColor: not an object")
        return False

    known_sections = TocSection.names()
    for section, pair in value.items():
        if section not in known_sections:
            continue
        if not isinstance(pair, Mapping):
            logger.warning(f"Invalid tocColor section: {section} is not an object")
            return False
        if not partial and not all(field in pair for field in COLOR_FIELDS):
            logger.warning(f"Invalid tocColor section: {section} missing shape or text property")
            return False

    return True


def _format_pydantic_error(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    message = error["msg"]
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    return f"{location}: {message}" if location else message


def parse_content(content: Any) -> Dict[str, Any]:
    """
    Validate caller-supplied ToC content.

    Args:
        content: Mapping of section name to value

    Returns:
        Only the sections the caller supplied, with validated values

    Raises:
        ValidationError: If any section has the wrong type
    """
    if content is None:
        return {}
    if not isinstance(content, Mapping):
        raise ValidationError("tocData must be an object")
    try:
        parsed = TocContent.model_validate(dict(content))
    except pydantic.ValidationError as e:
        errors = [_format_pydantic_error(error) for error in e.errors()]
        raise ValidationError("; ".join(errors), errors)
    return parsed.model_dump(exclude_unset=True)


def validate_project_fields(
    title: Optional[str],
    status: Optional[str] = None,
    color_config: Any = None,
    partial_colors: bool = False,
) -> None:
    """
    Validate the scalar fields of a create or update request.

    Raises:
        ValidationError: Listing every violation found
    """
    errors = []

    if not title or not isinstance(title, str):
        errors.append("projectTitle is required and must be a string")
    elif len(title) > MAX_PROJECT_TITLE_LENGTH:
        errors.append(f"projectTitle must not exceed {MAX_PROJECT_TITLE_LENGTH} characters")

    if status is not None and status not in ProjectStatus.ALL:
        errors.append(f"status must be one of: {', '.join(ProjectStatus.ALL)}")

    if color_config is not None and not validate_color_config(color_config, partial=partial_colors):
        errors.append("tocColor format is invalid")

    if errors:
        raise ValidationError("; ".join(errors), errors)
