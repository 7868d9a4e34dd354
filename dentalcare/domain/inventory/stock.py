"""Stock rules - quantity arithmetic and derived stock status"""


def stock_status(quantity: int, min_quantity: int) -> str:
    """At or below the threshold is low stock"""
    return "low_stock" if quantity <= min_quantity else "in_stock"


def apply_quantity_change(current: int, operation: str, amount: int) -> int:
    """
    New quantity after add / subtract / set.

    Subtract never goes below zero.

    Raises:
        ValueError: On an unknown operation
    """
    if operation == "add":
        return current + amount
    if operation == "subtract":
        return max(0, current - amount)
    if operation == "set":
        return amount
    raise ValueError(f"Unknown inventory operation: {operation}")
