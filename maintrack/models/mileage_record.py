from sqlalchemy import Column, Date, ForeignKey, Float, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid


class MileageRecord(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "mileage_records"
    __table_args__ = (
        UniqueConstraint("equipment_id", "record_date", name="uq_mileage_record_equipment_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    equipment_id = Column(Uuid, ForeignKey("equipment.id"), nullable=False, index=True)
    record_date = Column(Date, nullable=False)
    kilometers = Column(Float, nullable=False)

    equipment = relationship("Equipment", back_populates="mileage_records")
