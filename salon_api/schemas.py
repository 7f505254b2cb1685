from pydantic import BaseModel
from typing import List, Literal, Optional


class ServiceResponse(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float
    description: Optional[str] = None


class ProfessionalResponse(BaseModel):
    id: str
    name: str
    specialties: List[str]
    service_ids: List[str]
    avatar: Optional[str] = None


class TimeSlotResponse(BaseModel):
    id: str
    professional_id: str
    date: str
    start_time: str
    end_time: str
    is_available: bool


class GenerateSlotsResponse(BaseModel):
    message: str
    created: int


class BookingContextResponse(BaseModel):
    slot: TimeSlotResponse
    professional: ProfessionalResponse
    services: List[ServiceResponse]


class BookingRequest(BaseModel):
    slot_id: str
    service_id: str
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    notes: Optional[str] = None


class AppointmentResponse(BaseModel):
    appointment_id: str
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    service_id: str
    service: str
    professional_id: str
    professional: str
    date: str
    start_time: str
    end_time: str
    status: str
    notes: Optional[str] = None
    created_at: str


class BookingResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class StatusChangeRequest(BaseModel):
    status: Literal["completed", "cancelled"]


class StatusChangeResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class CalendarDayResponse(BaseModel):
    date: str
    is_today: bool
    appointments: int
    available_slots: int


class ProfessionalDayResponse(BaseModel):
    professional: ProfessionalResponse
    available_slots: List[TimeSlotResponse]
    appointments: List[AppointmentResponse]


class DayScheduleResponse(BaseModel):
    date: str
    professionals: List[ProfessionalDayResponse]
