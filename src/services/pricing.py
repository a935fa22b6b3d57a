"""Cart pricing: monthly/yearly totals and per-period checkout amounts.

Plans billed yearly are charged for 12 - YEARLY_DISCOUNT_MONTHS months.
Add-ons never get the discount and always cost 12 months per year.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from src.models.cart import BillingCycle, ItemType, LineItem

YEARLY_DISCOUNT_MONTHS = 2
MONTHS_PER_YEAR = 12

_CENT = Decimal("1")


def line_monthly_amount(item: LineItem) -> Decimal:
    """Monthly price of a line: unit price times quantity."""
    return Decimal(str(item["price"])) * item["quantity"]


def yearly_months(item_type: ItemType | str) -> int:
    """Number of months charged per year for an item type."""
    if ItemType(item_type) == ItemType.PLAN:
        return MONTHS_PER_YEAR - YEARLY_DISCOUNT_MONTHS
    return MONTHS_PER_YEAR


def compute_totals(items: Iterable[LineItem]) -> tuple[Decimal, Decimal]:
    """Compute the monthly and the annual-equivalent total of a set of line items.

    Both figures are independent of the cart's selected billing cycle. The
    monthly total is the plain sum of price times quantity; the yearly total
    applies the yearly plan discount.

    Args:
        items: Cart or order line items.

    Returns:
        tuple: (monthly_total, yearly_total). Both are Decimal("0") for no items.
    """
    plan_monthly = Decimal("0")
    addon_monthly = Decimal("0")

    for item in items:
        amount = line_monthly_amount(item)
        if ItemType(item["item_type"]) == ItemType.PLAN:
            plan_monthly += amount
        else:
            addon_monthly += amount

    monthly_total = plan_monthly + addon_monthly
    yearly_total = (
        plan_monthly * yearly_months(ItemType.PLAN)
        + addon_monthly * yearly_months(ItemType.ADDON)
    )
    return monthly_total, yearly_total


def period_unit_amount(item: LineItem, cycle: BillingCycle | str) -> Decimal:
    """Unit price charged once per billing period for one line item."""
    price = Decimal(str(item["price"]))
    if BillingCycle(cycle) == BillingCycle.YEARLY:
        return price * yearly_months(item["item_type"])
    return price


def period_unit_amount_cents(item: LineItem, cycle: BillingCycle | str) -> int:
    """Per-period unit amount in minor currency units, rounded half-up."""
    cents = (period_unit_amount(item, cycle) * 100).quantize(_CENT, rounding=ROUND_HALF_UP)
    return int(cents)


def recurring_interval(cycle: BillingCycle | str) -> str:
    """Stripe recurring interval for a billing cycle."""
    return "year" if BillingCycle(cycle) == BillingCycle.YEARLY else "month"
