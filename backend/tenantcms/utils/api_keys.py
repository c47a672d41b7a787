import secrets
import string

API_KEY_PREFIX = "sk"
API_KEY_LENGTH = 32

_ALPHABET = string.ascii_letters + string.digits


def generate_api_key(prefix: str = API_KEY_PREFIX, length: int = API_KEY_LENGTH) -> str:
    """Return e.g. ``sk_3fA9...``: the prefix plus `length` CSPRNG alphanumerics."""
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{random_part}"
