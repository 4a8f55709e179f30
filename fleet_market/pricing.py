"""Subscription tiers, add-on gating and bundle pricing."""

import math
from enum import Enum
from typing import Iterable

from pydantic import BaseModel


class AddOn(str, Enum):
    inventory = 'inventory'
    service = 'service'
    rentals = 'rentals'


class SubscriptionTier(str, Enum):
    basic = 'basic'
    inventory = 'inventory'
    service = 'service'
    rentals = 'rentals'
    inventory_service = 'inventory_service'
    inventory_rentals = 'inventory_rentals'
    service_rentals = 'service_rentals'
    enterprise = 'enterprise'


class BillingCycle(str, Enum):
    monthly = 'monthly'
    annual = 'annual'


class PricingPlan(BaseModel):
    id: SubscriptionTier
    name: str
    monthly_price: int
    annual_price: int
    annual_savings: int
    features: list[str]
    add_ons: list[AddOn]
    popular: bool = False


class PriceQuote(BaseModel):
    billing_cycle: BillingCycle
    add_ons: list[AddOn]
    monthly_total: int
    annual_total: int
    display_price: int
    monthly_savings: int
    annual_savings: int


BASE_MONTHLY_PRICE = 200
BASE_ANNUAL_PRICE = 2000  # two months free
BASE_ANNUAL_SAVINGS = 400
ADD_ON_MONTHLY_PRICE = 100
# Combined monthly price by number of add-ons selected.
BUNDLE_PRICES = {0: 0, 1: 100, 2: 185, 3: 230}
# Annual add-on billing charges 11 months.
ANNUAL_ADD_ON_MONTHS = 11

PRICING_PLANS: list[PricingPlan] = [
    PricingPlan(
        id=SubscriptionTier.basic,
        name='Base Package',
        monthly_price=200,
        annual_price=2000,
        annual_savings=400,
        features=[
            'Professional website',
            'Analytics & insights',
            'Content management',
            'Lead capture forms',
            'Contact management',
            'Custom domain support',
            '24/7 support',
        ],
        add_ons=[],
    ),
    PricingPlan(
        id=SubscriptionTier.inventory,
        name='Base + Inventory',
        monthly_price=300,
        annual_price=3300,
        annual_savings=300,
        features=[
            'Everything in Base Package',
            'Inventory management',
            'Product listings',
            'Stock tracking',
            'Image galleries',
        ],
        add_ons=[AddOn.inventory],
    ),
    PricingPlan(
        id=SubscriptionTier.service,
        name='Base + Service',
        monthly_price=300,
        annual_price=3300,
        annual_savings=300,
        features=[
            'Everything in Base Package',
            'Service request management',
            'Appointment scheduling',
            'Customer tracking',
            'Service history',
        ],
        add_ons=[AddOn.service],
    ),
    PricingPlan(
        id=SubscriptionTier.rentals,
        name='Base + Rentals',
        monthly_price=300,
        annual_price=3300,
        annual_savings=300,
        features=[
            'Everything in Base Package',
            'Rental equipment management',
            'Booking system',
            'Availability calendar',
            'Rate management',
        ],
        add_ons=[AddOn.rentals],
    ),
    PricingPlan(
        id=SubscriptionTier.inventory_service,
        name='Base + Inventory + Service',
        monthly_price=385,
        annual_price=4235,
        annual_savings=385,
        popular=True,
        features=[
            'Everything in Base Package',
            'Inventory management',
            'Service request management',
            'Product listings & stock tracking',
            'Appointment scheduling',
            'Customer tracking',
        ],
        add_ons=[AddOn.inventory, AddOn.service],
    ),
    PricingPlan(
        id=SubscriptionTier.inventory_rentals,
        name='Base + Inventory + Rentals',
        monthly_price=385,
        annual_price=4235,
        annual_savings=385,
        features=[
            'Everything in Base Package',
            'Inventory management',
            'Rental equipment management',
            'Product listings & stock tracking',
            'Booking system',
            'Availability calendar',
        ],
        add_ons=[AddOn.inventory, AddOn.rentals],
    ),
    PricingPlan(
        id=SubscriptionTier.service_rentals,
        name='Base + Service + Rentals',
        monthly_price=385,
        annual_price=4235,
        annual_savings=385,
        features=[
            'Everything in Base Package',
            'Service request management',
            'Rental equipment management',
            'Appointment scheduling',
            'Booking system',
            'Customer tracking',
        ],
        add_ons=[AddOn.service, AddOn.rentals],
    ),
    PricingPlan(
        id=SubscriptionTier.enterprise,
        name='Enterprise (All Features)',
        monthly_price=430,
        annual_price=4730,
        annual_savings=430,
        popular=True,
        features=[
            'Everything in Base Package',
            'Full inventory management',
            'Service request management',
            'Rental equipment management',
            'Complete booking system',
            'Advanced analytics',
            'Priority support',
        ],
        add_ons=[AddOn.inventory, AddOn.service, AddOn.rentals],
    ),
]

_PLANS_BY_ID = {plan.id.value: plan for plan in PRICING_PLANS}


def get_plan_by_id(tier: str) -> PricingPlan | None:
    return _PLANS_BY_ID.get(str(getattr(tier, 'value', tier)))


def has_feature(tier: str, add_on: AddOn | str) -> bool:
    plan = get_plan_by_id(tier)
    if plan is None:
        return False
    return AddOn(add_on) in plan.add_ons


def get_upgrade_options(current_tier: str) -> list[PricingPlan]:
    current_plan = get_plan_by_id(current_tier)
    if current_plan is None:
        return list(PRICING_PLANS)

    return [plan for plan in PRICING_PLANS if len(plan.add_ons) > len(current_plan.add_ons)]


def bundle_price(add_on_count: int) -> int:
    if add_on_count not in BUNDLE_PRICES:
        raise ValueError(f'Add-on count must be between 0 and {len(AddOn)}.')
    return BUNDLE_PRICES[add_on_count]


def bundle_savings(add_on_count: int) -> int:
    return ADD_ON_MONTHLY_PRICE * add_on_count - bundle_price(add_on_count)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_quote(add_ons: Iterable[AddOn | str], billing_cycle: BillingCycle | str = BillingCycle.monthly) -> PriceQuote:
    """Price the base package plus the selected add-ons.

    Repeated add-ons are counted once. Annual billing charges the base at
    ``BASE_ANNUAL_PRICE`` and the add-on bundle for 11 of 12 months.
    """
    cycle = BillingCycle(billing_cycle)
    selected: list[AddOn] = []
    for add_on in add_ons:
        normalized = AddOn(add_on)
        if normalized not in selected:
            selected.append(normalized)

    add_on_price = bundle_price(len(selected))
    monthly_total = BASE_MONTHLY_PRICE + add_on_price

    if cycle is BillingCycle.monthly:
        annual_total = monthly_total
        display_price = monthly_total
        annual_savings = 0
    else:
        annual_total = BASE_ANNUAL_PRICE + add_on_price * ANNUAL_ADD_ON_MONTHS
        display_price = _round_half_up(annual_total / 12)
        annual_savings = BASE_ANNUAL_SAVINGS + add_on_price

    return PriceQuote(
        billing_cycle=cycle,
        add_ons=selected,
        monthly_total=monthly_total,
        annual_total=annual_total,
        display_price=display_price,
        monthly_savings=bundle_savings(len(selected)),
        annual_savings=annual_savings,
    )
