from sqlalchemy import Column, String, ForeignKey, Text, Integer, Float, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid


class MaintenancePlan(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "maintenance_plans"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_maintenance_plan_user_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    stages = relationship(
        "MaintenanceStage",
        back_populates="maintenance_plan",
        order_by="MaintenanceStage.stage_index",
    )
    equipment = relationship("Equipment", back_populates="maintenance_plan")


class MaintenanceStage(Base, TimestampMixin, OwnedMixin):
    """
    A kilometers/days threshold inside a plan that triggers a maintenance type.

    stage_index is the 1-based rank of the stage when the plan's stages are
    ordered by (kilometers, days).
    """
    __tablename__ = "maintenance_stages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    maintenance_plan_id = Column(Uuid, ForeignKey("maintenance_plans.id"), nullable=False, index=True)
    maintenance_type_id = Column(Uuid, ForeignKey("maintenance_types.id"), nullable=False)
    stage_index = Column(Integer, nullable=False)
    kilometers = Column(Float, nullable=False, default=0)
    days = Column(Float, nullable=False, default=0)

    maintenance_plan = relationship("MaintenancePlan", back_populates="stages")
    maintenance_type = relationship("MaintenanceType")
