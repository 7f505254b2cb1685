import logging
import random
from contextlib import asynccontextmanager
from datetime import date as date_type, datetime, time
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException
from sqlalchemy.orm import Session

from salon_api import catalog
from salon_api.agenda import day_schedule, month_overview
from salon_api.config import LOG_LEVEL, SEED_DEMO_APPOINTMENTS, SLOT_SEED
from salon_api.database import Base, engine, SessionLocal
from salon_api.models import AppointmentStatus
from salon_api.registry import SORT_ORDERS, get_appointment, list_appointments
from salon_api.scheduler import (
    AppointmentNotFound,
    BookingError,
    BookingRejected,
    InvalidStatusTransition,
    SlotUnavailable,
    change_status,
    confirm_booking,
    generate_slots,
    get_slot,
    list_slots,
    publish_slots,
    select_slot,
    slot_id_for,
)
from salon_api.schemas import (
    AppointmentResponse,
    BookingContextResponse,
    BookingRequest,
    BookingResponse,
    CalendarDayResponse,
    DayScheduleResponse,
    GenerateSlotsResponse,
    ProfessionalDayResponse,
    ProfessionalResponse,
    ServiceResponse,
    StatusChangeRequest,
    StatusChangeResponse,
    TimeSlotResponse,
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

BOOKING_CONFIRMED = "Agendamento realizado com sucesso!"
STATUS_CHANGED = {
    AppointmentStatus.completed: "Agendamento concluído com sucesso!",
    AppointmentStatus.cancelled: "Agendamento cancelado com sucesso!",
}

ERROR_STATUS_CODES = {
    BookingRejected: 400,
    SlotUnavailable: 409,
    AppointmentNotFound: 404,
    InvalidStatusTransition: 409,
}


def seed_database(db: Session, today: Optional[date_type] = None, rng: Optional[random.Random] = None, demo: bool = SEED_DEMO_APPOINTMENTS):
    """Load the catalog, open the slot horizon and book the demo appointments."""
    if today is None:
        today = date_type.today()

    catalog.seed_catalog(db)
    publish_slots(db, generate_slots(catalog.list_professionals(db), start_date=today, rng=rng))

    if not demo or list_appointments(db):
        return

    for data in catalog.DEMO_APPOINTMENTS:
        start = datetime.strptime(data["start_time"], "%H:%M").time()
        slot = get_slot(db, slot_id_for(data["professional_id"], today, start))
        if slot is None:
            logger.info("No %s slot today for the demo appointment, skipping", data["start_time"])
            continue

        # the demo booking owns its slot even if generation left it closed
        if not slot.is_available:
            slot.is_available = True
            db.commit()

        req = BookingRequest(
            slot_id=slot.id,
            service_id=data["service_id"],
            client_name=data["client_name"],
            client_phone=data["client_phone"],
            client_email=data.get("client_email"),
            notes=data.get("notes"),
        )
        confirm_booking(db, slot, slot.professional, req)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    db = SessionLocal()
    try:
        seed_database(db, rng=random.Random(SLOT_SEED))
    finally:
        db.close()
    yield


app = FastAPI(title="Salon Booking API", lifespan=lifespan)

# Create tables
Base.metadata.create_all(bind=engine)


# Dependency for DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _parse_date(value: str) -> date_type:
    # Accept either raw YYYY-MM-DD or a quoted string (clients sometimes send %22...%22)
    raw = value.strip()
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1]

    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        # allow full ISO datetimes (take the date portion)
        try:
            return datetime.fromisoformat(raw).date()
        except ValueError:
            raise HTTPException(status_code=422, detail="date must be YYYY-MM-DD or ISO format")


def _http_error(exc: BookingError) -> HTTPException:
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logger.warning("Refused (%d): %s", status_code, exc)
    return HTTPException(status_code=status_code, detail=str(exc))


def _hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def _service_response(s) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        name=s.name,
        duration_minutes=s.duration_minutes,
        price=s.price,
        description=s.description,
    )


def _professional_response(p) -> ProfessionalResponse:
    return ProfessionalResponse(
        id=p.id,
        name=p.name,
        specialties=p.specialties,
        service_ids=p.service_ids,
        avatar=p.avatar,
    )


def _slot_response(slot) -> TimeSlotResponse:
    return TimeSlotResponse(
        id=slot.id,
        professional_id=slot.professional_id,
        date=slot.date.strftime("%Y-%m-%d"),
        start_time=_hhmm(slot.start_time),
        end_time=_hhmm(slot.end_time),
        is_available=slot.is_available,
    )


def _appointment_response(a) -> AppointmentResponse:
    return AppointmentResponse(
        appointment_id=a.appointment_id,
        client_name=a.client_name,
        client_phone=a.client_phone,
        client_email=a.client_email,
        service_id=a.service_id,
        service=a.service.name,
        professional_id=a.professional_id,
        professional=a.professional.name,
        date=a.date.strftime("%Y-%m-%d"),
        start_time=_hhmm(a.start_time),
        end_time=_hhmm(a.end_time),
        status=a.status.value,
        notes=a.notes,
        created_at=a.created_at.isoformat(),
    )


@app.get("/api/salon/services", response_model=List[ServiceResponse])
def services(db: Session = Depends(get_db)):
    return [_service_response(s) for s in catalog.list_services(db)]


@app.get("/api/salon/professionals", response_model=List[ProfessionalResponse])
def professionals(db: Session = Depends(get_db)):
    return [_professional_response(p) for p in catalog.list_professionals(db)]


@app.get("/api/salon/professionals/{professional_id}/services", response_model=List[ServiceResponse])
def professional_services(professional_id: str, db: Session = Depends(get_db)):
    """Services the professional can be booked for."""
    professional = catalog.get_professional(db, professional_id)
    if not professional:
        raise HTTPException(status_code=404, detail="Professional not found")

    return [_service_response(s) for s in catalog.eligible_services(db, professional)]


@app.get("/api/salon/slots", response_model=List[TimeSlotResponse])
def slots(date: Optional[str] = None, professional_id: Optional[str] = None, available: Optional[bool] = None, db: Session = Depends(get_db)):
    """Return time slots. Optional filters: date (YYYY-MM-DD or ISO), professional_id and available."""
    day = _parse_date(date) if date else None
    return [_slot_response(s) for s in list_slots(db, day=day, professional_id=professional_id, available=available)]


@app.post("/api/salon/slots/generate", response_model=GenerateSlotsResponse)
def generate(db: Session = Depends(get_db)):
    """Open the slot horizon starting today. Slots already stored are left alone."""
    created = publish_slots(db, generate_slots(catalog.list_professionals(db)))
    return GenerateSlotsResponse(message="Slots generated", created=created)


@app.get("/api/salon/slots/{slot_id}/booking", response_model=BookingContextResponse)
def booking_context(slot_id: str, db: Session = Depends(get_db)):
    slot = get_slot(db, slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")

    context = select_slot(db, slot, slot.professional)
    if context is None:
        raise HTTPException(status_code=409, detail="Slot not available")

    return BookingContextResponse(
        slot=_slot_response(context.slot),
        professional=_professional_response(context.professional),
        services=[_service_response(s) for s in context.services],
    )


@app.post("/api/salon/book", response_model=BookingResponse)
def book(req: BookingRequest, db: Session = Depends(get_db)):
    slot = get_slot(db, req.slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")

    try:
        appointment = confirm_booking(db, slot, slot.professional, req)
    except BookingError as exc:
        raise _http_error(exc)

    return BookingResponse(message=BOOKING_CONFIRMED, appointment=_appointment_response(appointment))


@app.get("/api/salon/appointments", response_model=List[AppointmentResponse])
def appointments(
    date: Optional[str] = None,
    professional_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    sort: str = "created",
    db: Session = Depends(get_db),
):
    """Return appointments. Optional filters: date, professional_id and status; sort is created or schedule."""
    if sort not in SORT_ORDERS:
        raise HTTPException(status_code=422, detail=f"sort must be one of {', '.join(SORT_ORDERS)}")

    day = _parse_date(date) if date else None
    found = list_appointments(db, day=day, professional_id=professional_id, status=status, sort=sort)
    return [_appointment_response(a) for a in found]


@app.get("/api/salon/appointments/{appointment_id}", response_model=AppointmentResponse)
def appointment(appointment_id: str, db: Session = Depends(get_db)):
    found = get_appointment(db, appointment_id)
    if not found:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return _appointment_response(found)


@app.post("/api/salon/appointments/{appointment_id}/status", response_model=StatusChangeResponse)
def appointment_status(appointment_id: str, payload: StatusChangeRequest, db: Session = Depends(get_db)):
    """Complete or cancel an appointment. Cancelling re-opens its slot."""
    try:
        updated = change_status(db, appointment_id, payload.status)
    except BookingError as exc:
        raise _http_error(exc)

    return StatusChangeResponse(message=STATUS_CHANGED[updated.status], appointment=_appointment_response(updated))


@app.get("/api/salon/calendar", response_model=List[CalendarDayResponse])
def month_calendar(year: Optional[int] = None, month: Optional[int] = None, db: Session = Depends(get_db)):
    today = date_type.today()
    year = year or today.year
    month = month or today.month

    if not 1 <= year <= 9999:
        raise HTTPException(status_code=422, detail="year must be between 1 and 9999")
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail="month must be between 1 and 12")

    return [
        CalendarDayResponse(
            date=d["date"].strftime("%Y-%m-%d"),
            is_today=d["is_today"],
            appointments=d["appointments"],
            available_slots=d["available_slots"],
        )
        for d in month_overview(db, year, month, today=today)
    ]


@app.get("/api/salon/days/{date}", response_model=DayScheduleResponse)
def day(date: str, db: Session = Depends(get_db)):
    """Open slots and appointments for every professional on one day."""
    parsed = _parse_date(date)

    return DayScheduleResponse(
        date=parsed.strftime("%Y-%m-%d"),
        professionals=[
            ProfessionalDayResponse(
                professional=_professional_response(entry["professional"]),
                available_slots=[_slot_response(s) for s in entry["available_slots"]],
                appointments=[_appointment_response(a) for a in entry["appointments"]],
            )
            for entry in day_schedule(db, parsed)
        ],
    )
