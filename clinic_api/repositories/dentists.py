from clinic_api.models.dentist import Dentist
from clinic_api.repositories.base import Repository, persistence_boundary


class DentistRepository(Repository):
    @persistence_boundary
    def list_active(self) -> list[Dentist]:
        return (
            self.db.query(Dentist)
            .filter(Dentist.is_active.is_(True))
            .order_by(Dentist.full_name.asc())
            .all()
        )

    @persistence_boundary
    def get_by_id(self, dentist_id: str) -> Dentist | None:
        return self.db.query(Dentist).filter(Dentist.id == dentist_id).first()

    @persistence_boundary
    def create(self, full_name: str, specialization: str | None = None) -> Dentist:
        dentist = Dentist(full_name=full_name, specialization=specialization)
        self.db.add(dentist)
        self.db.flush()
        return dentist
