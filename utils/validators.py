"""
Input validation helper functions.
Provides validation for common input types.
"""

import re


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate Brazilian phone number format.
    Accepts: +55 (DD) 9XXXX-XXXX, 55DDXXXXXXXXX, (DD) XXXX-XXXX

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    # Remove spaces and common separators
    cleaned = re.sub(r'[\s\-\(\)]', '', phone)

    patterns = [
        r'^\+55[1-9][0-9]{9,10}$',  # +55DDXXXXXXXXX
        r'^55[1-9][0-9]{9,10}$',    # 55DDXXXXXXXXX
        r'^[1-9][0-9]{9,10}$'       # DDXXXXXXXXX
    ]

    return any(bool(re.match(pattern, cleaned)) for pattern in patterns)


def validate_room_number(room: str) -> bool:
    """
    Validate room number format.
    Accepts: digits, alphanumeric

    Args:
        room: Room number to validate

    Returns:
        True if valid room format
    """
    if not room:
        return False

    # Allow alphanumeric room numbers (e.g., "101", "A12", "CH01")
    return bool(re.match(r'^[A-Z0-9]{1,10}$', str(room).upper()))


