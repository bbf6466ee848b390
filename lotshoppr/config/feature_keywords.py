"""
Feature vocabulary scanned for in dealer replies.

Detection is a plain substring match against the lower-cased reply text, so a
phrase here counts as "mentioned" whenever the dealer typed it anywhere in the
email. Order matters: detected features are reported in this order.
"""

FEATURE_KEYWORDS: tuple[str, ...] = (
    "moonroof",
    "sunroof",
    "blind spot",
    "blind-spot",
    "heated seats",
    "ventilated seats",
    "leather",
    "cloth",
    "navigation",
)


def detect_features(raw_text: str | None) -> list[str]:
    """Return every vocabulary phrase that appears in the reply text."""
    text = (raw_text or "").lower()
    return [keyword for keyword in FEATURE_KEYWORDS if keyword in text]
