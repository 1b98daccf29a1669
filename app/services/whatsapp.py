"""WhatsApp phone normalisation and click-to-chat links."""

import re
from urllib.parse import quote

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

# Same set encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def normalize_phone(phone: str) -> str:
    """Strip everything but digits and prefix ``+``."""
    return "+" + re.sub(r"\D", "", phone)


def is_valid_phone(phone: str) -> bool:
    return E164_PATTERN.fullmatch(phone) is not None


def whatsapp_link(phone: str, text: str = "") -> str:
    """Build a ``wa.me`` link for an already normalised E.164 number."""
    url = f"https://wa.me/{phone.lstrip('+')}"
    if text:
        url += "?text=" + quote(text, safe=_URI_COMPONENT_SAFE)
    return url
