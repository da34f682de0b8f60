"""
SQLAlchemy Models for Brandsite
"""

from ..database import Base
from .post import Post, Category, PostCategory
from .product import Product
from .service import Service

# Export all models
__all__ = [
    "Base",
    "Post",
    "Category",
    "PostCategory",
    "Product",
    "Service",
]
