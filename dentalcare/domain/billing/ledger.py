"""
Billing ledger - pure invoice arithmetic and derived status

Nothing here touches the database, so the same rules apply on create, on
every read and in the daily overdue sweep.
"""

from typing import Optional

from ...shared.validators import today_iso


def round_money(amount: float) -> float:
    return round(float(amount), 2)


def compute_line_total(quantity: float, unit_price: float) -> float:
    return round_money(quantity * unit_price)


def compute_totals(
    items: list[dict],
    tax: float = 0,
    discount: float = 0,
    subtotal: Optional[float] = None,
    total: Optional[float] = None,
) -> tuple[list[dict], float, float]:
    """
    Fill in missing line totals, subtotal and total.

    Values supplied by the caller are kept as given; only omitted ones are
    computed (line total = quantity x unit price, subtotal = sum of line
    totals, total = subtotal + tax - discount).

    Returns:
        Tuple of (items, subtotal, total)
    """
    filled = []
    for item in items:
        line = dict(item)
        if line.get("total") is None:
            line["total"] = compute_line_total(line["quantity"], line["unitPrice"])
        filled.append(line)

    if subtotal is None:
        subtotal = round_money(sum(line["total"] for line in filled))
    if total is None:
        total = round_money(subtotal + (tax or 0) - (discount or 0))

    return filled, subtotal, total


def effective_status(stored_status: str, due_date: str, today: Optional[str] = None) -> str:
    """A pending invoice past its due date reads as overdue"""
    today = today or today_iso()
    if stored_status == "pending" and due_date < today:
        return "overdue"
    return stored_status


def generate_invoice_number(year: int, doctor_id: int, sequence: int) -> str:
    """INV-{year}-{doctor:04d}-{sequence:04d}"""
    return f"INV-{year}-{doctor_id:04d}-{sequence:04d}"
