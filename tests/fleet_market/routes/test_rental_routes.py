from datetime import date

import pytest
from fastapi import HTTPException

from fleet_market.models.rental import RentalBooking, RentalItem
from fleet_market.routes.rental_routes import RentalBookingRequest, book_rental, count_rental_days


@pytest.fixture
def rental_site(db, make_site):
    site = make_site(tier='rentals')
    item = RentalItem(site_id=site.id, name='Compact Excavator', daily_rate=250.0)
    db.add(item)
    db.commit()
    db.refresh(item)
    return site, item


def booking_payload(item_id: int, **overrides) -> dict:
    payload = {
        'customerName': ' Jordan Builder ',
        'customerEmail': 'Jordan@Example.com',
        'customerPhone': '555-0100',
        'rentalItemId': item_id,
        'startDate': '2026-04-01',
        'endDate': '2026-04-03',
    }
    payload.update(overrides)
    return payload


def test_count_rental_days_includes_both_ends() -> None:
    assert count_rental_days(date(2026, 4, 1), date(2026, 4, 1)) == 1
    assert count_rental_days(date(2026, 4, 1), date(2026, 4, 3)) == 3


def test_rental_request_treats_checkbox_value_as_true() -> None:
    request = RentalBookingRequest.model_validate({'deliveryRequired': 'on'})

    assert request.delivery_required is True


def test_book_rental_requires_all_contact_and_date_fields(db, rental_site) -> None:
    site, item = rental_site
    payload = booking_payload(item.id)
    del payload['customerPhone']

    with pytest.raises(HTTPException) as exception_info:
        book_rental(site_id=site.id, data=RentalBookingRequest.model_validate(payload), db=db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Missing required fields'


def test_book_rental_rejects_return_before_pickup(db, rental_site) -> None:
    site, item = rental_site
    payload = booking_payload(item.id, startDate='2026-04-03', endDate='2026-04-01')

    with pytest.raises(HTTPException) as exception_info:
        book_rental(site_id=site.id, data=RentalBookingRequest.model_validate(payload), db=db)

    assert exception_info.value.status_code == 400


def test_book_rental_uses_item_rate_for_total(db, rental_site) -> None:
    site, item = rental_site

    result = book_rental(site_id=site.id, data=RentalBookingRequest.model_validate(booking_payload(item.id)), db=db)

    assert result.success is True
    assert result.booking.rate_amount == 250.0
    assert result.booking.total_amount == 750.0
    assert result.booking.status == 'pending'
    assert result.booking.customer_name == 'Jordan Builder'
    assert result.booking.customer_email == 'jordan@example.com'
    assert db.query(RentalBooking).count() == 1


def test_book_rental_prefers_quoted_rate(db, rental_site) -> None:
    site, item = rental_site
    payload = booking_payload(item.id, rateAmount=200, deliveryRequired=True, deliveryAddress='12 Quarry Rd')

    result = book_rental(site_id=site.id, data=RentalBookingRequest.model_validate(payload), db=db)

    assert result.booking.total_amount == 600.0
    assert result.booking.delivery_required is True


def test_book_rental_rejects_item_from_other_site(db, rental_site, make_site) -> None:
    _, item = rental_site
    other_site = make_site(tier='enterprise', email='other@dealer.com', subdomain='other')

    with pytest.raises(HTTPException) as exception_info:
        book_rental(site_id=other_site.id, data=RentalBookingRequest.model_validate(booking_payload(item.id)), db=db)

    assert exception_info.value.status_code == 404


def test_book_rental_requires_rentals_add_on(db, make_site) -> None:
    site = make_site(tier='inventory_service')

    with pytest.raises(HTTPException) as exception_info:
        book_rental(site_id=site.id, data=RentalBookingRequest.model_validate(booking_payload(1)), db=db)

    assert exception_info.value.status_code == 403
