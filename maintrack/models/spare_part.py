from sqlalchemy import Column, String, Text, Numeric, Uuid, UniqueConstraint
from maintrack.db.base import Base, TimestampMixin, OwnedMixin
import uuid


class SparePart(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "spare_parts"
    __table_args__ = (
        UniqueConstraint("user_id", "factory_code", name="uq_spare_part_user_factory_code"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    factory_code = Column(String(100), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    image_url = Column(String(500), nullable=True)
