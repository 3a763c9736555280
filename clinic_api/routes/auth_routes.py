from fastapi import APIRouter, Depends

from clinic_api.auth.dependencies import get_current_user
from clinic_api.models.user import User
from clinic_api.schemas import CurrentUserResponse

router = APIRouter(tags=['auth'])


@router.get('/me', response_model=CurrentUserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
