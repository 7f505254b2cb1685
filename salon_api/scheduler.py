import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from salon_api.catalog import eligible_services, find_service
from salon_api.config import (
    CLOSED_WEEKDAY,
    SLOT_HORIZON_DAYS,
    SLOT_MINUTES,
    SLOT_OPEN_PROBABILITY,
    SLOT_SEED,
    WORK_END,
    WORK_START,
)
from salon_api.models import Appointment, AppointmentStatus, Professional, Service, TimeSlot
from salon_api.registry import get_appointment

logger = logging.getLogger(__name__)


class BookingError(ValueError):
    """An engine operation was refused. Nothing was changed."""


class BookingRejected(BookingError):
    pass


class SlotUnavailable(BookingError):
    pass


class AppointmentNotFound(BookingError):
    pass


class InvalidStatusTransition(BookingError):
    pass


@dataclass
class BookingContext:
    slot: TimeSlot
    professional: Professional
    services: List[Service] = field(default_factory=list)


def slot_id_for(professional_id: str, day: date_type, start: time) -> str:
    return f"{professional_id}-{day.isoformat()}-{start.strftime('%H:%M')}"


def generate_slots(
    professionals,
    start_date: Optional[date_type] = None,
    horizon_days: int = SLOT_HORIZON_DAYS,
    rng: Optional[random.Random] = None,
    open_probability: float = SLOT_OPEN_PROBABILITY,
    work_start: int = WORK_START,
    work_end: int = WORK_END,
    closed_weekday: int = CLOSED_WEEKDAY,
) -> List[TimeSlot]:
    """Build every slot for the horizon, ordered by day, professional, hour.

    The slots are returned unsaved. Whether each one starts out open is drawn
    from `rng`, so a seeded generator reproduces the same availability.
    """
    if start_date is None:
        start_date = date_type.today()
    if rng is None:
        rng = random.Random(SLOT_SEED)

    step = timedelta(minutes=SLOT_MINUTES)
    slots = []

    for offset in range(horizon_days):
        day = start_date + timedelta(days=offset)

        if day.weekday() == closed_weekday:
            continue

        for professional in professionals:
            current = datetime.combine(day, time(work_start, 0))
            day_end = datetime.combine(day, time(work_end, 0))

            while current + step <= day_end:
                slot_start = current.time()
                slot_end = (current + step).time()

                slots.append(TimeSlot(
                    id=slot_id_for(professional.id, day, slot_start),
                    professional_id=professional.id,
                    date=day,
                    start_time=slot_start,
                    end_time=slot_end,
                    is_available=rng.random() < open_probability,
                ))

                current += step

    return slots


def publish_slots(db: Session, slots: List[TimeSlot]) -> int:
    """Store generated slots, skipping any already present. Returns how many were added."""
    existing = {row.id for row in db.query(TimeSlot.id).all()}

    created = 0
    for slot in slots:
        if slot.id in existing:
            continue
        db.add(slot)
        existing.add(slot.id)
        created += 1

    db.commit()
    logger.info("Published %d new time slots (%d already stored)", created, len(slots) - created)
    return created


def list_slots(
    db: Session,
    day: Optional[date_type] = None,
    professional_id: Optional[str] = None,
    available: Optional[bool] = None,
) -> List[TimeSlot]:
    query = db.query(TimeSlot)

    if day is not None:
        query = query.filter(TimeSlot.date == day)
    if professional_id:
        query = query.filter(TimeSlot.professional_id == professional_id)
    if available is not None:
        query = query.filter(TimeSlot.is_available == available)

    return query.order_by(TimeSlot.date, TimeSlot.professional_id, TimeSlot.start_time).all()


def get_slot(db: Session, slot_id: str) -> Optional[TimeSlot]:
    return db.query(TimeSlot).filter(TimeSlot.id == slot_id).first()


def _find_slot(db: Session, professional_id: str, day: date_type, start: time) -> Optional[TimeSlot]:
    return db.query(TimeSlot).filter(
        TimeSlot.professional_id == professional_id,
        TimeSlot.date == day,
        TimeSlot.start_time == start,
    ).first()


def _active_booking(db: Session, professional_id: str, day: date_type, start: time) -> Optional[Appointment]:
    return db.query(Appointment).filter(
        Appointment.professional_id == professional_id,
        Appointment.date == day,
        Appointment.start_time == start,
        Appointment.status == AppointmentStatus.scheduled,
    ).first()


def select_slot(db: Session, slot: Optional[TimeSlot], professional: Optional[Professional]) -> Optional[BookingContext]:
    """Open a booking for a slot. Returns None when the slot cannot be booked."""
    if slot is None or professional is None:
        return None

    if slot.professional_id != professional.id:
        logger.debug("Slot %s does not belong to professional %s", slot.id, professional.id)
        return None

    if not slot.is_available:
        logger.debug("Slot %s is not available", slot.id)
        return None

    return BookingContext(slot=slot, professional=professional, services=eligible_services(db, professional))


def confirm_booking(db: Session, slot: Optional[TimeSlot], professional: Optional[Professional], req) -> Appointment:
    """Book `slot` with `professional` for the client described by `req`.

    `req` carries service_id, client_name, client_phone and optionally
    client_email and notes. Every check runs before anything is written, so
    a refused booking leaves the registry and the slots untouched.
    """
    if slot is None or professional is None:
        raise BookingRejected("A slot and a professional must be selected")

    if slot.professional_id != professional.id:
        raise BookingRejected("Slot does not belong to the selected professional")

    client_name = (req.client_name or "").strip()
    client_phone = (req.client_phone or "").strip()

    if not client_name:
        raise BookingRejected("client_name is required")
    if not client_phone:
        raise BookingRejected("client_phone is required")

    service = find_service(db, req.service_id) if req.service_id else None
    if service is None:
        raise BookingRejected("Unknown service")

    if service.id not in professional.service_ids:
        raise BookingRejected(f"{professional.name} does not offer {service.name}")

    # re-read the slot so a booking made since it was selected is seen
    current = db.query(TimeSlot).filter(TimeSlot.id == slot.id).with_for_update().first()
    if current is None:
        raise SlotUnavailable("Slot not found")

    if not current.is_available or _active_booking(db, professional.id, current.date, current.start_time):
        raise SlotUnavailable("Slot not available")

    appointment = Appointment(
        appointment_id=f"APT-{uuid.uuid4().hex[:12]}",
        client_name=client_name,
        client_phone=client_phone,
        client_email=(req.client_email or "").strip() or None,
        service_id=service.id,
        professional_id=professional.id,
        date=current.date,
        start_time=current.start_time,
        end_time=current.end_time,
        status=AppointmentStatus.scheduled,
        notes=(req.notes or "").strip() or None,
        created_at=datetime.now(),
    )

    current.is_available = False
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info(
        "Booked %s for %s with %s on %s at %s",
        appointment.appointment_id,
        service.name,
        professional.name,
        appointment.date.isoformat(),
        appointment.start_time.strftime("%H:%M"),
    )
    return appointment


def change_status(db: Session, appointment_id: str, new_status) -> Appointment:
    """Move a scheduled appointment to completed or cancelled.

    Cancelling re-opens the slot the appointment held. Asking for the status
    the appointment already has changes nothing.
    """
    try:
        status = AppointmentStatus(new_status)
    except ValueError:
        raise InvalidStatusTransition(f"Unknown status {new_status!r}")

    if status is AppointmentStatus.scheduled:
        raise InvalidStatusTransition("An appointment cannot be moved back to scheduled")

    appointment = get_appointment(db, appointment_id)
    if appointment is None:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")

    if appointment.status == status:
        return appointment

    if appointment.status != AppointmentStatus.scheduled:
        raise InvalidStatusTransition(
            f"Appointment {appointment_id} is already {appointment.status.value}"
        )

    appointment.status = status

    if status is AppointmentStatus.cancelled:
        slot = _find_slot(db, appointment.professional_id, appointment.date, appointment.start_time)
        if slot is not None:
            slot.is_available = True

    db.commit()
    db.refresh(appointment)

    logger.info("Appointment %s is now %s", appointment_id, status.value)
    return appointment
