from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from clinic_api.auth.dependencies import require_admin
from clinic_api.core.errors import DentistNotFoundError
from clinic_api.database import get_db
from clinic_api.schemas import CreateDentistRequest, DentistResponse, SuccessResponse
from clinic_api.services.admin_service import AdminService

router = APIRouter(tags=['dentists'], dependencies=[Depends(require_admin)])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)


@router.get('', response_model=list[DentistResponse])
def list_dentists(service: AdminService = Depends(get_admin_service)):
    return service.list_dentists()


@router.post('', response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_dentist(data: CreateDentistRequest, service: AdminService = Depends(get_admin_service)):
    service.create_dentist(data.full_name, data.specialization)
    return SuccessResponse(success=True)


@router.get('/{dentist_id}', response_model=DentistResponse)
def get_dentist(dentist_id: str, service: AdminService = Depends(get_admin_service)):
    dentist = service.get_dentist(dentist_id)
    if dentist is None:
        raise DentistNotFoundError()
    return dentist
