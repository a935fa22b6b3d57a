"""Static hosting plan and add-on catalog.

Prices must match the storefront frontend pricing data.
"""

from decimal import Decimal
from types import MappingProxyType

from src.schemas.catalog import Addon, Plan

PLANS: MappingProxyType[str, Plan] = MappingProxyType(
    {
        "static-micro": Plan(
            id="static-micro",
            name="Static Micro",
            monthly_price=Decimal("3.90"),
            target_audience="React/Vue SPAs",
            limits="Shared RAM, 1GB Storage",
        ),
        "node-starter": Plan(
            id="node-starter",
            name="Node Starter",
            monthly_price=Decimal("9.90"),
            target_audience="Personal Blogs",
            limits="1 vCPU (Shared), 512MB RAM, 5GB Storage",
        ),
        "node-pro": Plan(
            id="node-pro",
            name="Node Pro",
            monthly_price=Decimal("39.90"),
            target_audience="E-commerce/SaaS",
            limits="2 vCPU (Dedicated), 4GB RAM, 20GB Storage",
        ),
    }
)

ADDONS: MappingProxyType[str, Addon] = MappingProxyType(
    {
        "de-domain": Addon(
            id="de-domain",
            name=".de Domain",
            monthly_price=Decimal("1.00"),
        ),
    }
)


def lookup_plan(plan_id: str) -> Plan | None:
    """Get a plan by id.

    Args:
        plan_id: Catalog plan identifier.

    Returns:
        Plan | None: The plan, or None if the id is not in the catalog.
    """
    return PLANS.get(plan_id)


def lookup_addon(addon_id: str) -> Addon | None:
    """Get an add-on by id, or None if unknown."""
    return ADDONS.get(addon_id)


def list_plans() -> list[Plan]:
    """All plans, cheapest first."""
    return sorted(PLANS.values(), key=lambda plan: plan.monthly_price)


def list_addons() -> list[Addon]:
    """All add-ons in catalog order."""
    return list(ADDONS.values())
