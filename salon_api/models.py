import enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from salon_api.database import Base


class AppointmentStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


# Which services a professional performs. `position` keeps the order the
# specialties were listed in.
professional_services = Table(
    "professional_services",
    Base.metadata,
    Column("professional_id", String, ForeignKey("professionals.id"), primary_key=True),
    Column("service_id", String, ForeignKey("services.id"), primary_key=True),
    Column("position", Integer, nullable=False, default=0),
)


class Service(Base):
    __tablename__ = "services"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(String, nullable=True)


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    avatar = Column(String, nullable=True)

    services = relationship(
        "Service",
        secondary=professional_services,
        order_by=professional_services.c.position,
        viewonly=True,
    )

    @property
    def specialties(self):
        return [service.name for service in self.services]

    @property
    def service_ids(self):
        return [service.id for service in self.services]


class TimeSlot(Base):
    __tablename__ = "time_slots"
    __table_args__ = (UniqueConstraint("professional_id", "date", "start_time"),)

    id = Column(String, primary_key=True, index=True)
    professional_id = Column(String, ForeignKey("professionals.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    professional = relationship("Professional")


class Appointment(Base):
    __tablename__ = "appointments"

    # Autoincrement key doubles as insertion order
    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String, unique=True, index=True, nullable=False)

    client_name = Column(String, nullable=False)
    client_phone = Column(String, nullable=False)
    client_email = Column(String, nullable=True)

    service_id = Column(String, ForeignKey("services.id"), nullable=False)
    professional_id = Column(String, ForeignKey("professionals.id"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(Enum(AppointmentStatus), nullable=False, default=AppointmentStatus.scheduled)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)

    service = relationship("Service")
    professional = relationship("Professional")
