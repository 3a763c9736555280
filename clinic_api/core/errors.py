"""Error taxonomy shared by the repositories, services and routers.

Every error carries the HTTP status it is rendered with, so the routers never
translate exceptions by hand. "Not found" on a read is not an error: reads
return ``None`` or an empty list and the caller decides.
"""

from fastapi import status


class ClinicError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be completed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidInputError(ClinicError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."


class AuthenticationError(ClinicError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid token."


class UnauthorizedError(ClinicError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Unauthorized"


class AppointmentNotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Appointment not found."


class DentistNotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Dentist not found."


class SlotUnavailableError(ClinicError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This time slot is no longer available."


class DuplicateSlotError(ClinicError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A slot already exists for this dentist at this time."


class InvalidStatusTransitionError(ClinicError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Status transition is not allowed."


class StoreUnavailableError(ClinicError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Database unavailable. Set DATABASE_URL to enable the store."


class PersistenceError(ClinicError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Database unavailable. Verify DATABASE_URL and database credentials."
