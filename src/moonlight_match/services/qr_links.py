"""Classification of scanned QR payloads."""

from dataclasses import dataclass
from enum import Enum

_FORM_HOST_MARKERS = ("forms.google.com", "docs.google.com/forms")


class ScanKind(Enum):
    FORM = "form"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ScanResult:
    """What a scanned code points at."""

    kind: ScanKind
    url: str | None = None


def is_form_link(payload: str) -> bool:
    """Return True when the payload is a registration form link."""
    return any(marker in payload for marker in _FORM_HOST_MARKERS)


def parse_scan(payload: str) -> ScanResult:
    """Classify a scanned QR payload."""
    cleaned = payload.strip()
    if cleaned and is_form_link(cleaned):
        return ScanResult(kind=ScanKind.FORM, url=cleaned)
    return ScanResult(kind=ScanKind.UNSUPPORTED)
