"""Product model for digital and physical publications."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, Boolean, Index
from sqlalchemy.sql import func
from ..database import Base


class Product(Base):
    """Publication sold as ebook, physical book, or both."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(500), nullable=False)
    slug = Column(String(500), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(1000), nullable=False)

    # At least one of the two editions must be set
    ebook_url = Column(String(1000), nullable=True)
    physical_url = Column(String(1000), nullable=True)

    published = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_product_published_created", "published", "created_at"),
    )
