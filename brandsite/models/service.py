"""Service model for coaching and consulting offers."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class Service(Base):
    """Model for a service shown on the services page."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=True)  # long-form, shown when expanded
    icon = Column(String(100), nullable=True)  # resolved against ServiceIcon
    youtube_url = Column(String(1000), nullable=True)
    order_index = Column(Integer, nullable=False, default=0, index=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
