from clinic_api.models.patient import Patient
from clinic_api.repositories.base import Repository, persistence_boundary


class PatientRepository(Repository):
    @persistence_boundary
    def get_by_email(self, email: str) -> Patient | None:
        return self.db.query(Patient).filter(Patient.email == email).first()

    @persistence_boundary
    def get_by_id(self, patient_id: str) -> Patient | None:
        return self.db.query(Patient).filter(Patient.id == patient_id).first()

    @persistence_boundary
    def create(self, full_name: str, email: str, phone: str) -> Patient:
        patient = Patient(full_name=full_name, email=email, phone=phone)
        self.db.add(patient)
        self.db.flush()
        return patient
