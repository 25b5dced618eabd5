"""Canonical String Formats

Fixed-format checks are expressed as compiled patterns so every format
validates the same way: fullmatch against the pattern.
"""
import re

EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
URL = re.compile(r"https?://[^\s/$.?#][^\s]*", re.IGNORECASE)
UUID = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)
IPV4 = re.compile(r"(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)")
IPV6 = re.compile(
    r"(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"
    r"|(?:[0-9a-fA-F]{1,4}:){1,7}:"
    r"|(?:[0-9a-fA-F]{1,4}:){1,6}:[0-9a-fA-F]{1,4}"
    r"|::(?:[0-9a-fA-F]{1,4}:){0,5}[0-9a-fA-F]{1,4}"
    r"|::"
)
DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,6})?(?:Z|[+-]\d{2}:\d{2})?")
DATE = re.compile(r"\d{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12]\d|3[01])")
TIME = re.compile(r"(?:[01]\d|2[0-3]):[0-5]\d:[0-5]\d(?:\.\d{1,6})?")

# Extended registry, addressed by name through StringSchema.format()
FORMATS: dict[str, re.Pattern] = {
    "email": EMAIL,
    "url": URL,
    "uuid": UUID,
    "ipv4": IPV4,
    "ipv6": IPV6,
    "datetime": DATETIME,
    "date": DATE,
    "time": TIME,
    "mac": re.compile(r"(?:[0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}"),
    "jwt": re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*"),
    "base64": re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?"),
    "hex": re.compile(r"[0-9a-fA-F]+"),
    "nanoid": re.compile(r"[A-Za-z0-9_-]{21}"),
    "cuid": re.compile(r"c[^\s-]{8,}", re.IGNORECASE),
    "cuid2": re.compile(r"[a-z][a-z0-9]*"),
    "ulid": re.compile(r"[0-9A-HJKMNP-TV-Z]{26}"),
    "credit_card": re.compile(
        r"4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|3[47][0-9]{13}|3[0-9]{13}|6(?:011|5[0-9]{2})[0-9]{12}"
    ),
    "phone": re.compile(r"\+?[1-9]\d{1,14}"),
    "color": re.compile(r"#(?:[A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})"),
    "slug": re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*"),
    "iso8601": re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{3})?(?:Z|[+-]\d{2}:\d{2})"),
}


def get_format(name: str) -> re.Pattern:
    """Look up a named format; unknown names are a configuration error."""
    try:
        return FORMATS[name]
    except KeyError:
        raise ValueError(f"Unknown string format '{name}'. Known formats: {', '.join(sorted(FORMATS))}") from None
