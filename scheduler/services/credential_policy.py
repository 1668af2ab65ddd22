SPECIAL_CHARACTERS = "!@#?"
MIN_PASSWORD_LENGTH = 8


def is_strong_password(password: str) -> bool:
    """
    A strong password is at least 8 characters long and mixes upper and lower
    case letters, digits, and at least one of `!@#?`.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False

    has_upper = any(c.isupper() for c in password)
    has_lower = any(c.islower() for c in password)
    has_digit = any(c.isdigit() for c in password)
    has_special = any(c in SPECIAL_CHARACTERS for c in password)
    return has_upper and has_lower and has_digit and has_special
