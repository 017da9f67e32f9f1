"""
Text normalization utilities.

Brand labels scraped from listing markup and text returned by the model both
pass through here before they are compared or parsed.
"""

import re

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```$")


def normalize_brand_label(text: str) -> str:
    """Trim surrounding whitespace from a scraped brand label."""
    if not text:
        return ""
    return text.strip()


def unwrap_code_fence(text: str) -> str:
    """
    Strip a markdown code fence from model output.

    Removes leading ```` ``` ```` markers (optionally tagged ``json``) and
    trailing markers until none remain, then trims. Text without a fence is
    only trimmed, so unwrapping already unwrapped text returns it unchanged.
    """
    if not text:
        return ""

    unwrapped = text.strip()
    while True:
        stripped = _LEADING_FENCE_RE.sub("", unwrapped, count=1)
        stripped = _TRAILING_FENCE_RE.sub("", stripped, count=1).strip()
        if stripped == unwrapped:
            return stripped
        unwrapped = stripped
