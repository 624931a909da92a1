from sqlalchemy import Column, String, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid


class MaintenanceType(Base, TimestampMixin, OwnedMixin):
    """
    Node of the per-user maintenance category tree.

    level and path are materialized: level counts ancestors (root = 0) and
    path is the "/"-joined chain of ``type`` values from the root down.
    """
    __tablename__ = "maintenance_types"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    type = Column(String(150), nullable=False)
    parent_id = Column(Uuid, ForeignKey("maintenance_types.id"), nullable=True, index=True)
    level = Column(Integer, nullable=False, default=0)
    path = Column(Text, nullable=False)

    parent = relationship("MaintenanceType", remote_side=[id], back_populates="children")
    children = relationship("MaintenanceType", back_populates="parent", order_by="MaintenanceType.type")
    activities = relationship(
        "Activity",
        secondary="activity_maintenance_types",
        back_populates="maintenance_types",
    )
