"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase
from .post import crud_post, crud_category
from .product import crud_product
from .service import crud_service


__all__ = [
    # Base
    "CRUDBase",
    # CRUD instances
    "crud_post",
    "crud_category",
    "crud_product",
    "crud_service",
]
