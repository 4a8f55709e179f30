import pytest

from fleet_market.database import Database
from fleet_market.models.service import ServiceAvailability, ServiceType
from fleet_market.models.site import Site
from fleet_market.models.user import User


@pytest.fixture
def database():
    database = Database('sqlite://')
    database.create_all()
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_site(db):
    def _make_site(tier: str = 'service', email: str = 'dealer@greenvalley.com', subdomain: str = 'green-valley') -> Site:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, full_name='Green Valley Dealer', role='dealer')
            db.add(user)
            db.commit()
            db.refresh(user)

        site = Site(
            user_id=user.id,
            site_name='Green Valley Equipment',
            subdomain=subdomain,
            template_id='green-valley-industrial',
            subscription_tier=tier,
        )
        db.add(site)
        db.commit()
        db.refresh(site)
        return site

    return _make_site


@pytest.fixture
def service_site(db, make_site):
    """A service-tier site open 08:00-12:00 on Mondays with one 60 minute service."""
    site = make_site(tier='service')
    db.add(
        ServiceAvailability(
            site_id=site.id,
            day_of_week=1,
            start_time='08:00',
            end_time='12:00',
            max_concurrent=1,
            is_available=True,
        )
    )
    db.add(
        ServiceAvailability(
            site_id=site.id,
            day_of_week=0,
            start_time='08:00',
            end_time='12:00',
            max_concurrent=1,
            is_available=False,
        )
    )
    db.add(ServiceType(site_id=site.id, name='Mower Tune-Up', duration_minutes=60, sort_order=1))
    db.commit()
    return site
