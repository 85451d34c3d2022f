"""Street name normalization for tolerant matching.

"North Elm Street", "Elm St" and "elm" all normalize to "elm". Names that
would vanish entirely ("North Street", "North") fall back to progressively
less aggressive stripping so the key is never empty.
"""

import re

DIRECTIONALS = re.compile(
    r"\b(north|south|east|west|northeast|northwest|southeast|southwest"
    r"|n|s|e|w|ne|nw|se|sw)\b"
)
ALL_SUFFIXES = re.compile(
    r"\b(street|st|avenue|ave|road|rd|drive|dr|lane|ln|boulevard|blvd|place|pl"
    r"|court|ct|way|square|sq|circle|cir|trail|tr|parkway|pkwy|bridge)\b"
)
GENERIC_SUFFIXES = re.compile(r"\b(street|st|avenue|ave|road|rd|drive|dr|boulevard|blvd)\b")

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")


def _strip(text: str, suffixes: re.Pattern) -> str:
    text = DIRECTIONALS.sub("", text)
    text = suffixes.sub("", text)
    text = _NON_ALNUM.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_street_name(name: str | None) -> str:
    """Canonical matching key for a street name.

    Args:
        name: Street name or player input

    Returns:
        Lower-cased core name with directionals and street-type suffixes
        removed, or "" for empty input
    """
    if not name:
        return ""

    original_lower = name.lower()

    normalized = _strip(original_lower, ALL_SUFFIXES)
    if not normalized:
        # e.g. "North Street": keep less common suffixes like "Way" or "Lane"
        normalized = _strip(original_lower, GENERIC_SUFFIXES)

    return normalized or original_lower.strip()


def ordinal_suffix(n: int) -> str:
    """English ordinal suffix: 1 -> 'st', 12 -> 'th', 23 -> 'rd'."""
    j = n % 10
    k = n % 100
    if j == 1 and k != 11:
        return "st"
    if j == 2 and k != 12:
        return "nd"
    if j == 3 and k != 13:
        return "rd"
    return "th"


def ordinal_name(n: int) -> str:
    """Numbered street core name, e.g. 5 -> '5th'."""
    return f"{n}{ordinal_suffix(n)}"
