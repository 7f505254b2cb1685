"""Read access to booked appointments.

Appointments are only written by the booking engine in `scheduler`; this
module answers questions about them.
"""

from datetime import date as date_type
from typing import List, Optional

from sqlalchemy.orm import Session

from salon_api.models import Appointment, AppointmentStatus

SORT_ORDERS = ("created", "schedule")


def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
    return db.query(Appointment).filter(Appointment.appointment_id == appointment_id).first()


def list_appointments(
    db: Session,
    day: Optional[date_type] = None,
    professional_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    sort: str = "created",
) -> List[Appointment]:
    """Appointments matching every filter given.

    `sort="created"` keeps booking order; `sort="schedule"` orders by date
    and start time, the way an agenda is read.
    """
    if sort not in SORT_ORDERS:
        raise ValueError(f"sort must be one of {', '.join(SORT_ORDERS)}")

    query = db.query(Appointment)

    if day is not None:
        query = query.filter(Appointment.date == day)
    if professional_id:
        query = query.filter(Appointment.professional_id == professional_id)
    if status is not None:
        query = query.filter(Appointment.status == AppointmentStatus(status))

    if sort == "schedule":
        query = query.order_by(Appointment.date, Appointment.start_time, Appointment.id)
    else:
        query = query.order_by(Appointment.id)

    return query.all()

