from sqlalchemy import Column, String, ForeignKey, Text, Table, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid

activity_maintenance_types = Table(
    "activity_maintenance_types",
    Base.metadata,
    Column("activity_id", Uuid, ForeignKey("activities.id", ondelete="CASCADE"), primary_key=True),
    Column("maintenance_type_id", Uuid, ForeignKey("maintenance_types.id", ondelete="CASCADE"), primary_key=True),
)


class Activity(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_activity_user_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    maintenance_types = relationship(
        "MaintenanceType",
        secondary=activity_maintenance_types,
        back_populates="activities",
        order_by="MaintenanceType.path",
    )
