"""Tests for scanned QR payload classification."""

from moonlight_match.services.qr_links import ScanKind, is_form_link, parse_scan


def test_google_form_links_are_detected() -> None:
    assert is_form_link("https://docs.google.com/forms/d/e/abc/viewform")
    assert is_form_link("https://forms.google.com/xyz")
    assert not is_form_link("https://example.com/forms")


def test_parse_scan_classifies_payload() -> None:
    form = parse_scan("  https://forms.google.com/xyz \n")
    other = parse_scan("WIFI:S:gala;T:WPA;P:secret;;")

    assert form.kind is ScanKind.FORM
    assert form.url == "https://forms.google.com/xyz"
    assert other.kind is ScanKind.UNSUPPORTED
    assert other.url is None
