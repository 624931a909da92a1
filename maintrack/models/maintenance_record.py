from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, Numeric, Text, Uuid,
    Enum as SQLEnum, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
from enum import Enum
import uuid


class ActivityStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"


class ActivityPriority(str, Enum):
    NO = "no"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    IMMEDIATE = "immediate"


class MaintenanceRecord(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "maintenance_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    equipment_id = Column(Uuid, ForeignKey("equipment.id"), nullable=False, index=True)
    maintenance_type_id = Column(Uuid, ForeignKey("maintenance_types.id"), nullable=False)
    mileage_record_id = Column(Uuid, ForeignKey("mileage_records.id"), nullable=True)
    start_datetime = Column(DateTime(timezone=True), nullable=False)
    end_datetime = Column(DateTime(timezone=True), nullable=True)
    observations = Column(Text, nullable=True)

    equipment = relationship("Equipment", back_populates="maintenance_records")
    maintenance_type = relationship("MaintenanceType")
    mileage_record = relationship("MileageRecord")
    spare_parts = relationship(
        "MaintenanceSparePart",
        back_populates="maintenance_record",
        cascade="all, delete-orphan",
    )
    activities = relationship(
        "MaintenanceActivity",
        back_populates="maintenance_record",
        cascade="all, delete-orphan",
    )


class MaintenanceSparePart(Base, TimestampMixin):
    __tablename__ = "maintenance_spare_parts"
    __table_args__ = (
        UniqueConstraint("maintenance_record_id", "spare_part_id", name="uq_maintenance_spare_part"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    maintenance_record_id = Column(
        Uuid, ForeignKey("maintenance_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    spare_part_id = Column(Uuid, ForeignKey("spare_parts.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=True)

    maintenance_record = relationship("MaintenanceRecord", back_populates="spare_parts")
    spare_part = relationship("SparePart")


class MaintenanceActivity(Base, TimestampMixin):
    __tablename__ = "maintenance_activities"
    __table_args__ = (
        UniqueConstraint("maintenance_record_id", "activity_id", name="uq_maintenance_activity"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    maintenance_record_id = Column(
        Uuid, ForeignKey("maintenance_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    activity_id = Column(Uuid, ForeignKey("activities.id"), nullable=False)
    status = Column(SQLEnum(ActivityStatus), nullable=False, default=ActivityStatus.PENDING)
    priority = Column(SQLEnum(ActivityPriority), nullable=False, default=ActivityPriority.NO)
    observations = Column(Text, nullable=True)

    maintenance_record = relationship("MaintenanceRecord", back_populates="activities")
    activity = relationship("Activity")
