"""Medical record repository - Database operations for clinical records"""

from sqlalchemy.orm import Session

from ...models import MedicalRecord


class MedicalRecordRepository:
    """Repository for medical record database operations"""

    @staticmethod
    def create_record(db: Session, **record_data) -> MedicalRecord:
        """Stage a record in the caller's transaction (no commit)"""
        record = MedicalRecord(**record_data)
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def get_patient_records(db: Session, patient_id: int) -> list[MedicalRecord]:
        return (
            db.query(MedicalRecord)
            .filter(MedicalRecord.patient_id == patient_id)
            .order_by(MedicalRecord.created_at.desc(), MedicalRecord.id.desc())
            .all()
        )
