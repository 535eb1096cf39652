import re
from urllib.parse import urljoin, urlparse

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def collapse_whitespace(s: str) -> str:
    return " ".join(s.split())


def humanize_name(name: str) -> str:
    """``billing_firstName`` -> ``billing first name``."""
    spaced = _CAMEL_BOUNDARY_RE.sub(r"\1 \2", name.replace("_", " ").replace("-", " "))
    return normalize_text(spaced)


def origin_of(url: str) -> str:
    """Host name a form was observed on; empty for relative or bare paths."""
    return (urlparse(url).hostname or "").lower()


def action_path(action: str, base_url: str = "") -> str:
    """Path of a form's resolved ``action`` attribute."""
    if not action:
        return ""
    resolved = urljoin(base_url, action) if base_url else action
    return urlparse(resolved).path
