from clinic_api.models.clinic_settings import ClinicSettings
from clinic_api.repositories.base import Repository, persistence_boundary


class ClinicSettingsRepository(Repository):
    @persistence_boundary
    def get(self) -> ClinicSettings | None:
        return self.db.query(ClinicSettings).order_by(ClinicSettings.id.asc()).first()

    @persistence_boundary
    def create(self, **settings) -> ClinicSettings:
        clinic_settings = ClinicSettings(**settings)
        self.db.add(clinic_settings)
        self.db.flush()
        return clinic_settings
