from datetime import datetime

from clinic_api.core import config
from clinic_api.core.errors import InvalidInputError
from clinic_api.models.user import User
from clinic_api.repositories.base import Repository, persistence_boundary

PROFILE_FIELDS = ('name', 'email', 'login_method')


class UserRepository(Repository):
    @persistence_boundary
    def get_by_open_id(self, open_id: str) -> User | None:
        return self.db.query(User).filter(User.open_id == open_id).first()

    @persistence_boundary
    def upsert(self, open_id: str, role: str | None = None, **profile) -> User:
        """Insert or refresh a user keyed by ``open_id``.

        Profile fields left as ``None`` keep their stored value. When no role
        is given the configured owner identity is promoted to admin; anybody
        else keeps their current role (``user`` for new rows).
        """
        if not open_id:
            raise InvalidInputError('User open_id is required for upsert.')

        user = self.db.query(User).filter(User.open_id == open_id).first()
        if user is None:
            user = User(open_id=open_id)
            self.db.add(user)

        for field in PROFILE_FIELDS:
            value = profile.get(field)
            if value is not None:
                setattr(user, field, value)

        if role is not None:
            user.role = role
        elif config.OWNER_OPEN_ID and open_id == config.OWNER_OPEN_ID:
            user.role = 'admin'

        user.last_signed_in = datetime.now()
        self.db.flush()
        return user
