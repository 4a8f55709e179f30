import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_market.auth.dependencies import get_public_site
from fleet_market.database import get_db
from fleet_market.models.rental import RentalBooking, RentalItem
from fleet_market.pricing import AddOn

router = APIRouter(tags=['rentals'])
logger = logging.getLogger(__name__)


class RentalBookingRequest(BaseModel):
    customer_name: str | None = Field(default=None, alias='customerName')
    customer_email: str | None = Field(default=None, alias='customerEmail')
    customer_phone: str | None = Field(default=None, alias='customerPhone')
    rental_item_id: int | None = Field(default=None, alias='rentalItemId')
    start_date: date | None = Field(default=None, alias='startDate')
    end_date: date | None = Field(default=None, alias='endDate')
    rate_amount: float | None = Field(default=None, alias='rateAmount', ge=0)
    pickup_time: str | None = Field(default=None, alias='pickupTime')
    return_time: str | None = Field(default=None, alias='returnTime')
    delivery_required: bool | str = Field(default=False, alias='deliveryRequired')
    delivery_address: str | None = Field(default=None, alias='deliveryAddress')
    notes: str | None = None

    class Config:
        populate_by_name = True

    @field_validator(
        'customer_name',
        'customer_email',
        'customer_phone',
        'pickup_time',
        'return_time',
        'delivery_address',
        'notes',
    )
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    @field_validator('delivery_required')
    @classmethod
    def validate_delivery_required(cls, value: bool | str) -> bool:
        # HTML checkboxes submit "on".
        if isinstance(value, str):
            return value.strip().lower() in {'on', 'true', '1', 'yes'}
        return value

    def missing_required_fields(self) -> bool:
        return not all(
            (
                self.customer_name,
                self.customer_email,
                self.customer_phone,
                self.start_date,
                self.end_date,
                self.rental_item_id,
            )
        )


class RentalBookingResponse(BaseModel):
    id: int
    site_id: int
    rental_item_id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    start_date: date
    end_date: date
    rental_period: str
    rate_amount: float
    total_amount: float
    quantity: int
    status: str
    pickup_time: str | None = None
    return_time: str | None = None
    delivery_required: bool
    delivery_address: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RentalBookingResult(BaseModel):
    success: bool
    booking: RentalBookingResponse


def count_rental_days(start_date: date, end_date: date) -> int:
    """Number of billable days; both the pickup and return day count."""
    return (end_date - start_date).days + 1


@router.post('/book/{site_id}', response_model=RentalBookingResult, status_code=status.HTTP_201_CREATED)
def book_rental(site_id: int, data: RentalBookingRequest, db: Session = Depends(get_db)):
    if data.missing_required_fields():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Missing required fields')

    if data.end_date < data.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='The return date must be on or after the pickup date.',
        )

    try:
        site = get_public_site(site_id, AddOn.rentals, db)

        rental_item = db.query(RentalItem).filter(
            RentalItem.id == data.rental_item_id,
            RentalItem.site_id == site.id,
        ).first()
        if rental_item is None or not rental_item.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Rental item not found')

        daily_rate = data.rate_amount if data.rate_amount is not None else (rental_item.daily_rate or 0)
        days = count_rental_days(data.start_date, data.end_date)

        booking = RentalBooking(
            site_id=site.id,
            rental_item_id=rental_item.id,
            customer_name=data.customer_name,
            customer_email=data.customer_email.lower(),
            customer_phone=data.customer_phone,
            start_date=data.start_date,
            end_date=data.end_date,
            rental_period='daily',
            rate_amount=daily_rate,
            total_amount=days * daily_rate,
            quantity=1,
            status='pending',
            pickup_time=data.pickup_time,
            return_time=data.return_time,
            delivery_required=data.delivery_required,
            delivery_address=data.delivery_address,
            notes=data.notes,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Rental booking failed for site %s', site_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Failed to submit booking request',
        ) from exc

    logger.info('Created rental booking %s for site %s (%s days)', booking.id, site.id, days)
    return RentalBookingResult(success=True, booking=RentalBookingResponse.model_validate(booking))
