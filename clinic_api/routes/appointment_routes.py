from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr
from sqlalchemy.orm import Session

from clinic_api.auth.dependencies import require_admin
from clinic_api.core.errors import AppointmentNotFoundError
from clinic_api.database import get_db
from clinic_api.schemas import (
    AppointmentResponse,
    BookAppointmentRequest,
    BookAppointmentResponse,
    ClinicSettingsResponse,
    CreateTimeSlotRequest,
    DashboardSummaryResponse,
    DentistResponse,
    SuccessResponse,
    TimeSlotResponse,
    UpdateStatusRequest,
)
from clinic_api.services.admin_service import AdminService
from clinic_api.services.booking_service import BookingService
from clinic_api.services.schedule_service import ScheduleService

router = APIRouter(tags=['appointments'])
admin_router = APIRouter(tags=['appointments-admin'], dependencies=[Depends(require_admin)])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(db)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)


@router.get('/slots', response_model=list[TimeSlotResponse])
def get_available_slots(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.get_available_slots(start_date, end_date)


@router.get('/dentists', response_model=list[DentistResponse])
def get_dentists(service: ScheduleService = Depends(get_schedule_service)):
    return service.get_dentists()


@router.get('/clinic', response_model=ClinicSettingsResponse | None)
def get_clinic_info(service: ScheduleService = Depends(get_schedule_service)):
    return service.get_clinic_info()


@router.post('/book', response_model=BookAppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(data: BookAppointmentRequest, service: BookingService = Depends(get_booking_service)):
    return service.book_appointment(data)


@router.get('/patient', response_model=list[AppointmentResponse])
def get_patient_appointments(
    email: EmailStr = Query(...),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_patient_appointments(email)


@admin_router.get('/today', response_model=list[AppointmentResponse])
def get_today_appointments(service: AdminService = Depends(get_admin_service)):
    return service.get_today_appointments()


@admin_router.get('/pending', response_model=list[AppointmentResponse])
def get_pending_appointments(service: AdminService = Depends(get_admin_service)):
    return service.get_pending_appointments()


@admin_router.get('/summary', response_model=DashboardSummaryResponse)
def get_dashboard_summary(service: AdminService = Depends(get_admin_service)):
    return service.get_dashboard_summary()


@admin_router.post('/slots', response_model=TimeSlotResponse, status_code=status.HTTP_201_CREATED)
def create_time_slot(data: CreateTimeSlotRequest, service: ScheduleService = Depends(get_schedule_service)):
    return service.create_time_slot(data.slot_date_time, data.dentist_id)


@admin_router.patch('/{appointment_id}/status', response_model=SuccessResponse)
def update_appointment_status(
    appointment_id: str,
    data: UpdateStatusRequest,
    service: AdminService = Depends(get_admin_service),
):
    service.update_appointment_status(appointment_id, data.status)
    return SuccessResponse(success=True)


@admin_router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment_details(appointment_id: str, service: AdminService = Depends(get_admin_service)):
    appointment = service.get_appointment_details(appointment_id)
    if appointment is None:
        raise AppointmentNotFoundError()
    return appointment
