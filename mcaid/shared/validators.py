"""Shared validation utilities"""

import re
from typing import Optional

E164_PATTERN = re.compile(r"^\+[1-9]\d{7,14}$")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Accepts numbers already carrying a country code ("+254 712 345 678",
    "+1 (555) 123-4567"). Separators are stripped.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format (+XXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    phone = phone.strip()
    if not phone.startswith("+"):
        raise ValueError("Phone number must include a country code (e.g., +254712345678)")

    normalized = "+" + re.sub(r"\D", "", phone)
    if not E164_PATTERN.match(normalized):
        raise ValueError("Phone number must be 8 to 15 digits in E.164 format")

    return normalized


def is_e164(phone: Optional[str]) -> bool:
    """Check whether a phone number is already in E.164 format"""
    return bool(phone) and bool(E164_PATTERN.match(phone))


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email
