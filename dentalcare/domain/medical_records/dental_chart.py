"""
Dental chart - FDI tooth positions and their condition tags

Quadrants: 1x upper right, 2x upper left, 3x lower left, 4x lower right.
Records store only the charted positions; reads expand to all 32.
"""

from typing import Optional

TOOTH_POSITIONS = tuple(
    f"tooth{quadrant}{tooth}" for quadrant in (1, 2, 3, 4) for tooth in range(1, 9)
)

TOOTH_CONDITIONS = ("none", "cavity", "filling", "crown", "missing", "root_canal", "extraction")

HEALTHY = "none"


def validate_chart(chart: Optional[dict]) -> Optional[dict]:
    """
    Reject unknown positions or condition tags; drop unset entries.

    Raises:
        ValueError: On an unknown tooth key or condition
    """
    if chart is None:
        return None

    cleaned = {}
    for position, condition in chart.items():
        if position not in TOOTH_POSITIONS:
            raise ValueError(f"Unknown tooth position: {position}")
        if condition is None:
            continue
        if condition not in TOOTH_CONDITIONS:
            raise ValueError(f"Unknown tooth condition for {position}: {condition}")
        cleaned[position] = condition
    return cleaned


def expand_chart(chart: Optional[dict]) -> dict:
    """All 32 positions, unset ones reported healthy"""
    chart = chart or {}
    return {position: chart.get(position) or HEALTHY for position in TOOTH_POSITIONS}
