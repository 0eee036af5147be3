# ================================================================================
# Lookup Keys
# ================================================================================
#
# Converts free-form field and page names into stable lookup keys.
#
#   "My Field", "my field", "The My Field"  ->  "myfield"
#
# Filler words (a, an, the) are only dropped when they stand alone in front of
# another word, so a key that is already normalized never changes again.
#
# ================================================================================

import re
from typing import Optional


_FILLER_WORDS = re.compile(r"(?<!\S)(?:a|an|the)\s+", re.IGNORECASE)


def to_lookup_key(source: Optional[str]) -> str:
    """
    Normalize a user-facing name into a lookup key.

    Args:
        source: Field or page name as written in a test step

    Returns:
        Lower-case alphanumeric key, or an empty string for empty input
    """
    if source is None or not source.strip():
        return ""

    stripped = _FILLER_WORDS.sub(" ", source.strip())
    return "".join(ch for ch in stripped.lower() if ch.isalnum())


def normalized_equals(source: Optional[str], compare_value: Optional[str]) -> bool:
    """
    Check whether a name matches an (already normalized) lookup key.

    Args:
        source: Free-form name
        compare_value: Key to compare against

    Returns:
        True when both normalize to the same key
    """
    return to_lookup_key(source) == to_lookup_key(compare_value)


__all__ = ["to_lookup_key", "normalized_equals"]
