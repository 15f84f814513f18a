import secrets
import string

SYMBOLS = "!@#$%^&*-_+=?"


def generate_temporary_password(length: int = 16) -> str:
    """Random password for accounts created without one (e.g. from the CLI).

    Always contains a lower case letter, an upper case letter, a digit and a symbol.
    """
    if length < 8:
        raise ValueError("Password length must be at least 8 characters")

    pools = (string.ascii_lowercase, string.ascii_uppercase, string.digits, SYMBOLS)
    alphabet = "".join(pools)

    chars = [secrets.choice(pool) for pool in pools]
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
