import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clinic_api.auth import jwt_handler
from clinic_api.core.errors import AuthenticationError, UnauthorizedError
from clinic_api.database import get_db
from clinic_api.models.user import User
from clinic_api.repositories.users import UserRepository
from clinic_api.services.transaction import transaction

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except Exception as exc:
        raise AuthenticationError("Invalid token") from exc

    open_id = payload.get("sub")
    if not open_id:
        raise AuthenticationError("Invalid token subject")

    users = UserRepository(db)
    with transaction(db):
        users.upsert(
            open_id,
            name=payload.get("name"),
            email=payload.get("email"),
            login_method=payload.get("login_method"),
        )
    user = users.get_by_open_id(open_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def is_admin(user: User | None) -> bool:
    return user is not None and (user.role or "").strip().lower() == ADMIN_ROLE


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Capability check attached to every admin-only router."""
    if not is_admin(current_user):
        logger.warning("Rejected admin request from %s", getattr(current_user, "open_id", None))
        raise UnauthorizedError()
    return current_user
