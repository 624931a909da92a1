from sqlalchemy import Column, String, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid


class Equipment(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "equipment"
    __table_args__ = (
        UniqueConstraint("user_id", "license_plate", name="uq_equipment_user_license_plate"),
        UniqueConstraint("user_id", "code", name="uq_equipment_user_code"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    type = Column(String(100), nullable=False)
    license_plate = Column(String(50), nullable=False)
    code = Column(String(50), nullable=False)
    maintenance_plan_id = Column(Uuid, ForeignKey("maintenance_plans.id"), nullable=True)

    maintenance_plan = relationship("MaintenancePlan", back_populates="equipment")
    maintenance_records = relationship("MaintenanceRecord", back_populates="equipment")
    mileage_records = relationship("MileageRecord", back_populates="equipment")
