from typing import List

from celltech.services.errors import InvalidReferenceError


def parse_reference(value: str) -> int:
    """
    Coerce a client-supplied identifier into a store reference.

    Raises:
        InvalidReferenceError: If the value is not a positive integer
    """
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()) or int(text) == 0:
        raise InvalidReferenceError(f"Invalid identifier: {value!r}")
    return int(text)


def parse_reference_list(value: str) -> List[int]:
    """Parse a comma separated list such as ``"1,2,3"``; blank entries are skipped."""
    parts = [part for part in value.split(",") if part.strip()]
    if not parts:
        raise InvalidReferenceError("No identifiers supplied")
    return [parse_reference(part) for part in parts]
