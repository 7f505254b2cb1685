"""Calendar views built from slots and appointments."""

import calendar
from datetime import date as date_type
from typing import Optional

from sqlalchemy.orm import Session

from salon_api.catalog import list_professionals
from salon_api.models import Appointment, AppointmentStatus, TimeSlot
from salon_api.registry import list_appointments
from salon_api.scheduler import list_slots


def month_overview(db: Session, year: int, month: int, today: Optional[date_type] = None):
    """One entry per day of the month with its appointment and open-slot counts."""
    if today is None:
        today = date_type.today()

    _, last_day = calendar.monthrange(year, month)
    first = date_type(year, month, 1)
    last = date_type(year, month, last_day)

    appointments = db.query(Appointment).filter(
        Appointment.date >= first, Appointment.date <= last
    ).all()
    open_slots = db.query(TimeSlot).filter(
        TimeSlot.date >= first, TimeSlot.date <= last, TimeSlot.is_available.is_(True)
    ).all()

    days = []
    for number in range(1, last_day + 1):
        day = date_type(year, month, number)
        days.append({
            "date": day,
            "is_today": day == today,
            "appointments": sum(1 for a in appointments if a.date == day),
            "available_slots": sum(1 for s in open_slots if s.date == day),
        })

    return days


def day_schedule(db: Session, day: date_type):
    """Open slots and live appointments for each professional on `day`."""
    slots = list_slots(db, day=day, available=True)
    appointments = [
        a for a in list_appointments(db, day=day, sort="schedule")
        if a.status != AppointmentStatus.cancelled
    ]

    return [
        {
            "professional": professional,
            "available_slots": [s for s in slots if s.professional_id == professional.id],
            "appointments": [a for a in appointments if a.professional_id == professional.id],
        }
        for professional in list_professionals(db)
    ]
