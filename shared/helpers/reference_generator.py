import secrets
from datetime import datetime, timezone


def generate_reference(prefix: str, kind: str) -> str:
    """Build a document reference such as ``CR-NOTE-20261018-1A2B3C``."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    suffix = secrets.token_hex(3).upper()
    return f"{prefix.strip().upper()}-{kind.strip().upper()}-{stamp}-{suffix}"


def generate_sku(item_name: str) -> str:
    """Initials of the item name plus four random hex characters."""
    initials = "".join(word[0].upper() for word in item_name.split() if word)
    return f"{initials}{secrets.token_hex(2).upper()}"
