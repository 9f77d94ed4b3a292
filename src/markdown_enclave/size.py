"""Normalization of image size hints into CSS lengths."""

import re

SUPPORTED_UNITS = ("%", "px", "rem")

_NUMBER_PATTERN = re.compile(r"\d+")


def normalize_size(size: str) -> str:
    """Convert a raw size token into a CSS length.

    Args:
        size: Raw width or height as written by the author (e.g. "200",
            "50%", "10rem")

    Returns:
        The token unchanged if it ends with a supported unit, the leading
        number suffixed with "px" otherwise, or "auto" when no usable number
        is present
    """
    match = _NUMBER_PATTERN.search(size or "")
    if match is None or int(match.group(0)) == 0:
        return "auto"

    if size.endswith(SUPPORTED_UNITS):
        return size

    # Unknown units such as "em" are dropped
    return f"{match.group(0)}px"
