import secrets
import string

TRACKING_PREFIX = "TRK"
TRACKING_DIGITS = 10


def generate_tracking_number() -> str:
    """Generate tracking number, e.g. TRK0123456789"""
    digits = ''.join(secrets.choice(string.digits) for _ in range(TRACKING_DIGITS))
    return f"{TRACKING_PREFIX}{digits}"


def generate_mock_transaction_hash() -> str:
    """Generate a local stand-in for a transaction hash: 0x + 64 lowercase hex digits"""
    return f"0x{secrets.token_hex(32)}"


def generate_mock_address() -> str:
    """Generate a 20-byte account address in 0x-hex form"""
    return f"0x{secrets.token_hex(20)}"


def normalize_tracking_number(tracking_number: str) -> str:
    return (tracking_number or "").strip().upper()
