import logging
import re
from contextlib import nullcontext
from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_market.auth.dependencies import get_public_site, require_add_on
from fleet_market.core import config
from fleet_market.database import get_db
from fleet_market.models.service import (
    ACTIVE_APPOINTMENT_STATUSES,
    APPOINTMENT_STATUSES,
    ServiceAppointment,
    ServiceAvailability,
    ServiceBlockedDate,
    ServiceType,
)
from fleet_market.models.site import Site
from fleet_market.pricing import AddOn
from fleet_market.scheduling.availability import CLOSURE_MESSAGES, ClosureReason, day_of_week, resolve_closure
from fleet_market.scheduling.slots import TimeSlot, generate_slots, parse_clock_time
from fleet_market.scheduling.wall_clock import combine_wall_clock, compute_scheduled_end, to_wall_clock

router = APIRouter(tags=['service'])
logger = logging.getLogger(__name__)

CLOCK_TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
CUSTOM_REQUEST_SERVICE_NAME = 'Other — Contact Requested'
MAX_APPOINTMENT_LIST_LIMIT = 500
DATABASE_ERROR_DETAIL = 'Unable to reach the database. Please try again.'

require_service_site = require_add_on(AddOn.service)


def _normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


def _validate_clock_time(value: str) -> str:
    normalized = value.strip()
    if not CLOCK_TIME_PATTERN.match(normalized):
        raise ValueError('Times must use the 24-hour HH:MM format.')
    return normalized


class SlotsResponse(BaseModel):
    slots: list[TimeSlot]
    duration: int | None = None
    blocked: bool | None = None
    closed: bool | None = None
    message: str | None = None


class ServiceTypeResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    duration_minutes: int
    price_estimate: float | None = None
    category: str | None = None

    class Config:
        from_attributes = True


class ServiceTypeListResponse(BaseModel):
    types: list[ServiceTypeResponse]


class CreateServiceTypeRequest(BaseModel):
    name: str
    description: str | None = None
    duration_minutes: int = Field(default=60, ge=1)
    price_estimate: float | None = Field(default=None, ge=0)
    category: str | None = None
    sort_order: int = 0
    is_active: bool = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Service name is required.')
        return normalized

    @field_validator('description', 'category')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)


class BookServiceRequest(BaseModel):
    customer_name: str | None = Field(default=None, alias='customerName')
    customer_email: str | None = Field(default=None, alias='customerEmail')
    customer_phone: str | None = Field(default=None, alias='customerPhone')
    service_type_id: int | None = Field(default=None, alias='serviceTypeId')
    custom_description: str | None = Field(default=None, alias='customDescription')
    equipment_type: str | None = Field(default=None, alias='equipmentType')
    equipment_make: str | None = Field(default=None, alias='equipmentMake')
    equipment_model: str | None = Field(default=None, alias='equipmentModel')
    equipment_serial: str | None = Field(default=None, alias='equipmentSerial')
    preferred_date: date | None = Field(default=None, alias='preferredDate')
    preferred_time: str | None = Field(default=None, alias='preferredTime')
    customer_notes: str | None = Field(default=None, alias='customerNotes')

    class Config:
        populate_by_name = True

    @field_validator(
        'customer_name',
        'customer_phone',
        'custom_description',
        'equipment_type',
        'equipment_make',
        'equipment_model',
        'equipment_serial',
        'customer_notes',
    )
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)

    @field_validator('customer_email')
    @classmethod
    def validate_customer_email(cls, value: str | None) -> str | None:
        normalized = _normalize_optional_text(value)
        return normalized.lower() if normalized else None

    @field_validator('preferred_time')
    @classmethod
    def validate_preferred_time(cls, value: str | None) -> str | None:
        normalized = _normalize_optional_text(value)
        if normalized is None:
            return None
        return _validate_clock_time(normalized)


class BookServiceResponse(BaseModel):
    success: bool
    appointment_id: int = Field(alias='appointmentId')
    status: str
    message: str

    class Config:
        populate_by_name = True


class AppointmentResponse(BaseModel):
    id: int
    site_id: int
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    service_type_id: int | None = None
    service_type_name: str | None = None
    is_custom_request: bool = False
    custom_description: str | None = None
    equipment_type: str | None = None
    equipment_make: str | None = None
    equipment_model: str | None = None
    equipment_serial: str | None = None
    preferred_date: date | None = None
    preferred_time: str | None = None
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    duration_minutes: int | None = None
    status: str
    customer_notes: str | None = None
    technician: str | None = None
    internal_notes: str | None = None
    cancel_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    completed_at: datetime | None = None
    canceled_at: datetime | None = None
    contacted_at: datetime | None = None

    class Config:
        from_attributes = True


class AppointmentCounts(BaseModel):
    pending: int = 0
    contact_needed: int = 0
    confirmed: int = 0
    in_progress: int = 0
    completed: int = 0
    canceled: int = 0
    today: int = 0
    this_week: int = 0


class AppointmentListResponse(BaseModel):
    appointments: list[AppointmentResponse] | None = None
    counts: AppointmentCounts


class UpdateAppointmentRequest(BaseModel):
    appointment_id: int | None = Field(default=None, alias='appointmentId')
    status: str | None = None
    cancel_reason: str | None = Field(default=None, alias='cancelReason')
    technician: str | None = None
    internal_notes: str | None = Field(default=None, alias='internalNotes')
    scheduled_start: datetime | None = Field(default=None, alias='scheduledStart')
    scheduled_end: datetime | None = Field(default=None, alias='scheduledEnd')
    duration_minutes: int | None = Field(default=None, alias='durationMinutes', ge=1)
    contacted_at: datetime | None = Field(default=None, alias='contactedAt')

    class Config:
        populate_by_name = True

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        normalized = _normalize_optional_text(value)
        if normalized is None:
            return None
        normalized = normalized.lower()
        if normalized not in APPOINTMENT_STATUSES:
            raise ValueError('Invalid appointment status.')
        return normalized

    @field_validator('cancel_reason', 'technician', 'internal_notes')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)


class AppointmentUpdateResponse(BaseModel):
    appointment: AppointmentResponse


class AvailabilityWindowRequest(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    max_concurrent: int = Field(default=1, ge=1)
    is_available: bool = True

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_times(cls, value: str) -> str:
        return _validate_clock_time(value)

    @model_validator(mode='after')
    def validate_window(self) -> 'AvailabilityWindowRequest':
        if parse_clock_time(self.end_time) <= parse_clock_time(self.start_time):
            raise ValueError('Closing time must be after opening time.')
        return self


class AvailabilityWindowResponse(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str
    max_concurrent: int
    is_available: bool

    class Config:
        from_attributes = True


class CreateBlockedDateRequest(BaseModel):
    blocked_date: date
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)


class BlockedDateResponse(BaseModel):
    id: int
    blocked_date: date
    reason: str | None = None

    class Config:
        from_attributes = True


def database_failure(exc: SQLAlchemyError, db: Session | None = None) -> HTTPException:
    if db is not None:
        db.rollback()
    logger.exception('Service database operation failed: %s', exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=DATABASE_ERROR_DETAIL,
    )


def get_day_bounds(slot_date: date) -> tuple[datetime, datetime]:
    day_start = datetime.combine(slot_date, time.min)
    return day_start, day_start + timedelta(days=1)


def get_active_appointments(site_id: int, slot_date: date, db: Session) -> list[ServiceAppointment]:
    day_start, day_end = get_day_bounds(slot_date)
    return db.query(ServiceAppointment).filter(
        ServiceAppointment.site_id == site_id,
        ServiceAppointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
        ServiceAppointment.scheduled_start.is_not(None),
        ServiceAppointment.scheduled_end.is_not(None),
        ServiceAppointment.scheduled_start < day_end,
        ServiceAppointment.scheduled_end > day_start,
    ).all()


def get_day_closure(
    site_id: int,
    slot_date: date,
    db: Session,
    lock_window: bool = False,
) -> tuple[ClosureReason | None, ServiceAvailability | None]:
    blocked = db.query(ServiceBlockedDate.id).filter(
        ServiceBlockedDate.site_id == site_id,
        ServiceBlockedDate.blocked_date == slot_date,
    ).first()
    if blocked is not None:
        return ClosureReason.blocked, None

    window_query = db.query(ServiceAvailability).filter(
        ServiceAvailability.site_id == site_id,
        ServiceAvailability.day_of_week == day_of_week(slot_date),
    )
    if lock_window:
        window_query = window_query.with_for_update()
    window = window_query.first()

    return resolve_closure(False, window), window


def get_site_service_type(site_id: int, service_type_id: int, db: Session) -> ServiceType | None:
    return db.query(ServiceType).filter(
        ServiceType.id == service_type_id,
        ServiceType.site_id == site_id,
        ServiceType.is_active.is_(True),
    ).first()


def build_slots_for_day(
    site_id: int,
    slot_date: date,
    duration_minutes: int,
    db: Session,
) -> SlotsResponse:
    closure, window = get_day_closure(site_id, slot_date, db)
    if closure is ClosureReason.blocked:
        return SlotsResponse(slots=[], blocked=True, message=CLOSURE_MESSAGES[closure])
    if closure is ClosureReason.closed:
        return SlotsResponse(slots=[], closed=True, message=CLOSURE_MESSAGES[closure])

    slots = generate_slots(
        window.start_time,
        window.end_time,
        duration_minutes,
        get_active_appointments(site_id, slot_date, db),
        window.max_concurrent or 1,
        slot_date,
    )
    return SlotsResponse(slots=slots, duration=duration_minutes)


def compute_appointment_counts(site_id: int, today: date, db: Session) -> AppointmentCounts:
    counts = {appointment_status: 0 for appointment_status in APPOINTMENT_STATUSES}

    status_rows = db.query(ServiceAppointment.status, func.count(ServiceAppointment.id)).filter(
        ServiceAppointment.site_id == site_id,
    ).group_by(ServiceAppointment.status).all()
    for appointment_status, total in status_rows:
        if appointment_status in counts:
            counts[appointment_status] = total

    def count_scheduled_between(range_start: datetime, range_end: datetime) -> int:
        return db.query(func.count(ServiceAppointment.id)).filter(
            ServiceAppointment.site_id == site_id,
            ServiceAppointment.status != 'canceled',
            ServiceAppointment.scheduled_start >= range_start,
            ServiceAppointment.scheduled_start < range_end,
        ).scalar() or 0

    today_start, today_end = get_day_bounds(today)
    week_start = today_start - timedelta(days=today.weekday())
    return AppointmentCounts(
        **counts,
        today=count_scheduled_between(today_start, today_end),
        this_week=count_scheduled_between(week_start, week_start + timedelta(days=7)),
    )


def ensure_slot_bookable(
    site_id: int,
    scheduled_start: datetime,
    duration_minutes: int,
    db: Session,
) -> None:
    slot_date = scheduled_start.date()
    closure, window = get_day_closure(site_id, slot_date, db, lock_window=True)
    if closure is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=CLOSURE_MESSAGES[closure],
        )

    requested_time = scheduled_start.strftime('%H:%M')
    slots = generate_slots(
        window.start_time,
        window.end_time,
        duration_minutes,
        get_active_appointments(site_id, slot_date, db),
        window.max_concurrent or 1,
        slot_date,
    )
    slot = next((candidate for candidate in slots if candidate.time == requested_time), None)

    if slot is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='The selected time is outside service hours.',
        )
    if not slot.available:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='The selected time is no longer available.',
        )


def booking_guard(site_id: int, scheduled_start: datetime | None, db: Session):
    """Serialise the capacity check and insert for bookings on the same site and day."""
    database = db.info.get('database')
    if scheduled_start is None or database is None:
        return nullcontext()
    return database.booking_lock(site_id, scheduled_start.date())


@router.get('/slots/{site_id}', response_model=SlotsResponse, response_model_exclude_unset=True)
def list_service_slots(
    site_id: int,
    slot_date: date | None = Query(default=None, alias='date'),
    type_id: int | None = Query(default=None, alias='typeId'),
    duration: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
):
    if slot_date is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Date required')

    try:
        site = get_public_site(site_id, AddOn.service, db)

        duration_minutes = duration or config.DEFAULT_SERVICE_DURATION_MINUTES
        if type_id is not None:
            service_type = get_site_service_type(site.id, type_id, db)
            if service_type is not None:
                duration_minutes = service_type.duration_minutes

        return build_slots_for_day(site.id, slot_date, duration_minutes, db)
    except SQLAlchemyError as exc:
        raise database_failure(exc) from exc


@router.get('/types/{site_id}', response_model=ServiceTypeListResponse)
def list_service_types(site_id: int, db: Session = Depends(get_db)):
    try:
        site = get_public_site(site_id, AddOn.service, db)
        service_types = db.query(ServiceType).filter(
            ServiceType.site_id == site.id,
            ServiceType.is_active.is_(True),
        ).order_by(ServiceType.sort_order.asc(), ServiceType.id.asc()).all()

        return ServiceTypeListResponse(
            types=[ServiceTypeResponse.model_validate(service_type) for service_type in service_types],
        )
    except SQLAlchemyError as exc:
        raise database_failure(exc) from exc


@router.post('/types', response_model=ServiceTypeResponse, status_code=status.HTTP_201_CREATED)
def create_service_type(
    data: CreateServiceTypeRequest,
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        service_type = ServiceType(site_id=site.id, **data.model_dump())
        db.add(service_type)
        db.commit()
        db.refresh(service_type)
        return service_type
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc


@router.post('/book/{site_id}', response_model=BookServiceResponse, status_code=status.HTTP_201_CREATED)
def book_service_appointment(site_id: int, data: BookServiceRequest, db: Session = Depends(get_db)):
    if not data.customer_name or not data.customer_email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Name and email are required')

    try:
        site = get_public_site(site_id, AddOn.service, db)

        is_custom = data.service_type_id is None
        service_type_name = CUSTOM_REQUEST_SERVICE_NAME
        duration_minutes = None

        if not is_custom:
            service_type = get_site_service_type(site.id, data.service_type_id, db)
            if service_type is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Service type not found')
            service_type_name = service_type.name
            duration_minutes = service_type.duration_minutes

        scheduled_start = None
        scheduled_end = None
        if data.preferred_date and data.preferred_time and duration_minutes:
            scheduled_start = combine_wall_clock(data.preferred_date, data.preferred_time)
            scheduled_end = compute_scheduled_end(scheduled_start, duration_minutes)

        if is_custom:
            appointment_status = 'contact_needed'
        elif scheduled_start is not None:
            appointment_status = 'confirmed'
        else:
            appointment_status = 'pending'

        now = datetime.now()
        appointment = ServiceAppointment(
            site_id=site.id,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            service_type_id=data.service_type_id,
            service_type_name=service_type_name,
            is_custom_request=is_custom,
            custom_description=(data.custom_description or data.customer_notes or '') if is_custom else None,
            equipment_type=data.equipment_type,
            equipment_make=data.equipment_make,
            equipment_model=data.equipment_model,
            equipment_serial=data.equipment_serial,
            preferred_date=data.preferred_date,
            preferred_time=data.preferred_time,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            duration_minutes=duration_minutes,
            status=appointment_status,
            customer_notes=data.customer_notes,
            created_at=now,
            updated_at=now,
            confirmed_at=now if appointment_status == 'confirmed' else None,
        )

        with booking_guard(site.id, scheduled_start, db):
            if scheduled_start is not None:
                ensure_slot_bookable(site.id, scheduled_start, duration_minutes, db)
            db.add(appointment)
            db.commit()
        db.refresh(appointment)
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc

    logger.info('Booked service appointment %s for site %s (%s)', appointment.id, site.id, appointment.status)

    if is_custom:
        message = "We've received your request! Our team will contact you shortly to schedule your appointment."
    elif scheduled_start is not None:
        message = (
            f'Your {service_type_name} appointment is confirmed for '
            f'{data.preferred_date.isoformat()} at {data.preferred_time}.'
        )
    else:
        message = f'Your {service_type_name} request has been received. We will confirm a time with you shortly.'

    return BookServiceResponse(
        success=True,
        appointment_id=appointment.id,
        status=appointment.status,
        message=message,
    )


@router.get('/appointments', response_model=AppointmentListResponse, response_model_exclude_unset=True)
def list_service_appointments(
    status_filter: str | None = Query(default=None, alias='status'),
    scheduled_from: datetime | None = Query(default=None, alias='from'),
    scheduled_to: datetime | None = Query(default=None, alias='to'),
    limit: int = Query(default=config.APPOINTMENT_LIST_LIMIT, ge=1, le=MAX_APPOINTMENT_LIST_LIMIT),
    counts_only: bool = Query(default=False, alias='countsOnly'),
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        counts = compute_appointment_counts(site.id, date.today(), db)
        if counts_only:
            return AppointmentListResponse(counts=counts)

        query = db.query(ServiceAppointment).filter(ServiceAppointment.site_id == site.id)
        if status_filter:
            query = query.filter(ServiceAppointment.status == status_filter.strip().lower())
        if scheduled_from is not None:
            query = query.filter(ServiceAppointment.scheduled_start >= scheduled_from.replace(tzinfo=None))
        if scheduled_to is not None:
            query = query.filter(ServiceAppointment.scheduled_start <= scheduled_to.replace(tzinfo=None))

        appointments = query.order_by(
            ServiceAppointment.created_at.desc(),
            ServiceAppointment.id.desc(),
        ).limit(limit).all()

        return AppointmentListResponse(
            appointments=[AppointmentResponse.model_validate(appointment) for appointment in appointments],
            counts=counts,
        )
    except SQLAlchemyError as exc:
        raise database_failure(exc) from exc


@router.patch('/appointments', response_model=AppointmentUpdateResponse)
def update_service_appointment(
    data: UpdateAppointmentRequest,
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    if data.appointment_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Appointment ID required')

    try:
        appointment = db.query(ServiceAppointment).filter(
            ServiceAppointment.id == data.appointment_id,
            ServiceAppointment.site_id == site.id,
        ).first()
        if appointment is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found')

        now = datetime.now()
        provided = data.model_fields_set
        appointment.updated_at = now

        if data.status:
            appointment.status = data.status
            if data.status == 'confirmed':
                appointment.confirmed_at = now
            elif data.status == 'completed':
                appointment.completed_at = now
            elif data.status == 'canceled':
                appointment.canceled_at = now
                appointment.cancel_reason = data.cancel_reason

        if 'technician' in provided:
            appointment.technician = data.technician
        if 'internal_notes' in provided:
            appointment.internal_notes = data.internal_notes

        if data.scheduled_start is not None:
            appointment.scheduled_start = to_wall_clock(data.scheduled_start)
            if data.scheduled_end is not None:
                appointment.scheduled_end = to_wall_clock(data.scheduled_end)
                if data.duration_minutes:
                    appointment.duration_minutes = data.duration_minutes
            elif data.duration_minutes:
                appointment.scheduled_end = compute_scheduled_end(data.scheduled_start, data.duration_minutes)
                appointment.duration_minutes = data.duration_minutes

        if data.contacted_at is not None:
            appointment.contacted_at = to_wall_clock(data.contacted_at)

        db.commit()
        db.refresh(appointment)
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc

    logger.info('Updated service appointment %s for site %s', appointment.id, site.id)
    return AppointmentUpdateResponse(appointment=AppointmentResponse.model_validate(appointment))


@router.get('/availability', response_model=list[AvailabilityWindowResponse])
def list_availability_windows(
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        return db.query(ServiceAvailability).filter(
            ServiceAvailability.site_id == site.id,
        ).order_by(ServiceAvailability.day_of_week.asc()).all()
    except SQLAlchemyError as exc:
        raise database_failure(exc) from exc


@router.put('/availability', response_model=list[AvailabilityWindowResponse])
def replace_availability_windows(
    data: list[AvailabilityWindowRequest],
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    days = [window.day_of_week for window in data]
    if len(days) != len(set(days)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Each day of the week may only appear once.',
        )

    try:
        existing = {
            window.day_of_week: window
            for window in db.query(ServiceAvailability).filter(ServiceAvailability.site_id == site.id).all()
        }

        for day in set(existing) - set(days):
            db.delete(existing[day])

        for window_data in data:
            window = existing.get(window_data.day_of_week)
            if window is None:
                window = ServiceAvailability(site_id=site.id, day_of_week=window_data.day_of_week)
                db.add(window)
            window.start_time = window_data.start_time
            window.end_time = window_data.end_time
            window.max_concurrent = window_data.max_concurrent
            window.is_available = window_data.is_available

        db.commit()

        return db.query(ServiceAvailability).filter(
            ServiceAvailability.site_id == site.id,
        ).order_by(ServiceAvailability.day_of_week.asc()).all()
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc


@router.get('/blocked-dates', response_model=list[BlockedDateResponse])
def list_blocked_dates(
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        return db.query(ServiceBlockedDate).filter(
            ServiceBlockedDate.site_id == site.id,
        ).order_by(ServiceBlockedDate.blocked_date.asc()).all()
    except SQLAlchemyError as exc:
        raise database_failure(exc) from exc


@router.post('/blocked-dates', response_model=BlockedDateResponse, status_code=status.HTTP_201_CREATED)
def create_blocked_date(
    data: CreateBlockedDateRequest,
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        existing = db.query(ServiceBlockedDate).filter(
            ServiceBlockedDate.site_id == site.id,
            ServiceBlockedDate.blocked_date == data.blocked_date,
        ).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='This date is already blocked.',
            )

        blocked_date = ServiceBlockedDate(site_id=site.id, blocked_date=data.blocked_date, reason=data.reason)
        db.add(blocked_date)
        db.commit()
        db.refresh(blocked_date)

        return blocked_date
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc


@router.delete('/blocked-dates/{blocked_date_id}', status_code=status.HTTP_204_NO_CONTENT)
def remove_blocked_date(
    blocked_date_id: int,
    site: Site = Depends(require_service_site),
    db: Session = Depends(get_db),
):
    try:
        blocked_date = db.query(ServiceBlockedDate).filter(
            ServiceBlockedDate.id == blocked_date_id,
            ServiceBlockedDate.site_id == site.id,
        ).first()

        if not blocked_date:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Blocked date not found.',
            )

        db.delete(blocked_date)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_failure(exc, db) from exc
