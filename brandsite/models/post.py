"""Blog post, category and join-table models."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index, Boolean, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Post(Base):
    """Blog post."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Content
    title = Column(String(500), nullable=False)
    slug = Column(String(500), nullable=False, unique=True, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    cover_image = Column(String(1000), nullable=True)
    reading_time = Column(Integer, nullable=True)  # minutes

    # Publish gate
    published = Column(Boolean, nullable=False, default=False, index=True)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_post_published_created", "published", "created_at"),
    )

    # Relationships
    category_links = relationship(
        "PostCategory",
        back_populates="post",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PostCategory.id",
    )


class Category(Base):
    """Blog category."""

    __tablename__ = "blog_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    post_links = relationship(
        "PostCategory",
        back_populates="category",
        cascade="all, delete-orphan",
    )


class PostCategory(Base):
    """Join row between a post and a category."""

    __tablename__ = "blog_post_categories"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        Integer,
        ForeignKey("blog_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("post_id", "category_id", name="uq_post_category"),
    )

    post = relationship("Post", back_populates="category_links")
    # None when the category row is gone but the join row survived
    category = relationship("Category", back_populates="post_links", lazy="selectin")
