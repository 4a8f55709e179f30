from fastapi import APIRouter, HTTPException, Query, status

from fleet_market.pricing import (
    AddOn,
    BillingCycle,
    PRICING_PLANS,
    PriceQuote,
    PricingPlan,
    calculate_quote,
    get_plan_by_id,
    get_upgrade_options,
)

router = APIRouter(tags=['pricing'])


@router.get('/plans', response_model=list[PricingPlan])
def list_pricing_plans():
    return PRICING_PLANS


@router.get('/plans/{tier}', response_model=PricingPlan)
def get_pricing_plan(tier: str):
    plan = get_plan_by_id(tier.strip().lower())
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Plan not found.')
    return plan


@router.get('/upgrades/{tier}', response_model=list[PricingPlan])
def list_upgrade_options(tier: str):
    return get_upgrade_options(tier.strip().lower())


@router.get('/quote', response_model=PriceQuote)
def get_price_quote(
    add_ons: list[AddOn] = Query(default=[], alias='addOns'),
    billing_cycle: BillingCycle = Query(default=BillingCycle.monthly, alias='billingCycle'),
):
    return calculate_quote(add_ons, billing_cycle)
