"""
Input validation and sanitization utilities.
Strips markup from public free-text fields and guards AI prompts against injection.
"""

import re
from typing import Optional

from journal.shared.errors import validation_error


# Maximum lengths for public submission fields
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_PHONE_LENGTH = 20
MAX_SUBJECT_LENGTH = 200
MAX_MESSAGE_LENGTH = 5000
MAX_TOPIC_LENGTH = 120

TAG_PATTERN = re.compile(r'<[^>]*>')
# Whitespace plus ASCII/C1 control characters
WHITESPACE_PATTERN = re.compile(r'[\s\x00-\x1f\x7f-\x9f]+')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# Basic denylist for prompt injection phrases in the AI topic field
FORBIDDEN_TOPIC_PHRASES = (
    'ignore previous',
    'ignore all previous',
    'disregard instructions',
    'do not follow',
)


def sanitize_text(text, max_length: Optional[int] = None) -> str:
    """
    Sanitize free text before it is persisted.

    Args:
        text: Raw input (non-strings sanitize to "")
        max_length: Maximum allowed length (None for no limit)

    Returns:
        Text with HTML tags removed, whitespace collapsed, trimmed and truncated
    """
    if not isinstance(text, str) or not text:
        return ""

    # Removing a tag can glue two halves of another one together, so repeat
    previous = None
    while previous != text:
        previous = text
        text = TAG_PATTERN.sub('', text)
    # Unpaired angle brackets are dropped as well
    text = text.replace('<', '').replace('>', '')

    text = WHITESPACE_PATTERN.sub(' ', text).strip()

    if max_length is not None and len(text) > max_length:
        text = text[:max_length].rstrip()

    return text


def sanitize_topic(text) -> Optional[str]:
    """
    Sanitize the AI generation topic.

    Returns:
        Cleaned topic (non-strings are converted with str), "" when nothing was
        supplied, or None when the topic contains a prompt-injection phrase
        and must be rejected.
    """
    if text is None:
        return ""

    cleaned = sanitize_text(str(text), max_length=MAX_TOPIC_LENGTH)
    lowered = cleaned.lower()
    for phrase in FORBIDDEN_TOPIC_PHRASES:
        if phrase in lowered:
            return None
    return cleaned


def is_valid_email(email) -> bool:
    """Shape check only; deliverability is not verified."""
    if not isinstance(email, str):
        return False
    email = email.strip()
    return bool(email) and len(email) <= MAX_EMAIL_LENGTH and bool(EMAIL_PATTERN.match(email))


def validate_email(email, message: str = "Valid email required.") -> str:
    """
    Validate email address format and length.

    Returns:
        Normalized email (trimmed, lowercase)

    Raises:
        ApiError(validation) if validation fails
    """
    if not is_valid_email(email):
        raise validation_error(message)
    return email.strip().lower()


def require_fields(data: dict, fields) -> None:
    """Raise a validation error naming every missing or blank required field."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    if missing:
        raise validation_error(f"Missing required fields: {', '.join(missing)}.")


def validate_password(password: str) -> str:
    """
    Validate password length for admin accounts.

    Raises:
        ApiError(validation) if validation fails
    """
    if not password:
        raise validation_error("Password cannot be empty")

    if len(password) < 8:
        raise validation_error("Password must be at least 8 characters")

    # Bcrypt has a 72-byte limit
    if len(password.encode('utf-8')) > 72:
        raise validation_error("Password is too long (maximum 72 bytes). Please use a shorter password.")

    return password
