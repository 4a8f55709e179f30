from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fleet_market.auth.dependencies import get_current_user
from fleet_market.database import get_db
from fleet_market.models.site import Site
from fleet_market.models.user import User
from fleet_market.pricing import AddOn, has_feature

router = APIRouter(tags=['auth'])


class SiteSummaryResponse(BaseModel):
    id: int
    site_name: str
    subdomain: str | None = None
    subscription_tier: str
    add_ons: list[AddOn]


class CurrentUserResponse(BaseModel):
    email: str
    full_name: str | None = None
    role: str | None = None
    sites: list[SiteSummaryResponse]


@router.get('/me', response_model=CurrentUserResponse)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    sites = db.query(Site).filter(Site.user_id == current_user.id).order_by(Site.id.asc()).all()

    return CurrentUserResponse(
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
        sites=[
            SiteSummaryResponse(
                id=site.id,
                site_name=site.site_name,
                subdomain=site.subdomain,
                subscription_tier=site.subscription_tier,
                add_ons=[add_on for add_on in AddOn if has_feature(site.subscription_tier, add_on)],
            )
            for site in sites
        ],
    )
