"""Render an environment table for display, masking secrets."""
from typing import List

from .models import EnvironmentTable

MASK_CHAR = "*"


def mask(value: str) -> str:
    """
    Same-length run of mask characters.

    The mask shares no substring with the value unless the value itself
    contains MASK_CHAR; such values still mask to the right length.
    """
    return MASK_CHAR * len(value)


def render(table: EnvironmentTable) -> List[str]:
    """
    One NAME=VALUE line per entry, in table order.

    Secret values are masked character for character, so the operator sees
    their length but not their content. Plain values are shown as-is.
    """
    return [
        f"{entry.name}={mask(entry.value) if entry.is_secret else entry.value}"
        for entry in table.entries()
    ]
