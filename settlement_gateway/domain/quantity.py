"""Order quantity rounding for bulk import and smart order suggestions"""

import math


def round_quantity_to_multiple_of_10(quantity: int) -> int:
    """
    Round an imported quantity to the nearest multiple of 10.

    Anything up to 14 (including zero and negatives) becomes 10; above that,
    a last digit of 5 or more rounds up.

    Example:
        14 -> 10, 15 -> 20, 25 -> 30, 144 -> 140
    """
    if quantity <= 14:
        return 10
    base = (quantity // 10) * 10
    return base + 10 if quantity % 10 >= 5 else base


def ceil_quantity_to_multiple_of_10(quantity: float) -> int:
    """Suggested reorder quantity: next multiple of 10, never below 10"""
    return max(math.ceil(quantity / 10) * 10, 10)
