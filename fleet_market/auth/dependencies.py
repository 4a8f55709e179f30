import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fleet_market.auth import jwt_handler
from fleet_market.database import get_db
from fleet_market.models.site import Site
from fleet_market.models.user import User
from fleet_market.pricing import AddOn, has_feature

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")

    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_current_site(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Site:
    site = db.query(Site).filter(Site.user_id == current_user.id).order_by(Site.id.asc()).first()
    if site is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No site")
    return site


def ensure_site_has_add_on(site: Site, add_on: AddOn) -> None:
    if not has_feature(site.subscription_tier, add_on):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"The {add_on.value} add-on is not included in this site's plan.",
        )


def get_public_site(site_id: int, add_on: AddOn, db: Session) -> Site:
    site = db.query(Site).filter(Site.id == site_id).first()
    if site is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
    ensure_site_has_add_on(site, add_on)
    return site


def require_add_on(add_on: AddOn):
    def dependency(site: Site = Depends(get_current_site)) -> Site:
        ensure_site_has_add_on(site, add_on)
        return site

    return dependency
