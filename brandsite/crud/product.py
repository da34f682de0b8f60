"""CRUD operations for Product."""

from typing import Any, Dict

from sqlalchemy import desc

from brandsite.core.exceptions import ValidationError
from brandsite.core.slug import slugify
from brandsite.crud.base import CRUDBase
from brandsite.models.product import Product
from brandsite.schemas.product import ProductCreate, ProductUpdate


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_product(data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Check a product payload and derive its slug.

    With ``partial`` only the fields present in `data` are checked, which lets
    an update reject a cleared field before reading the stored row. Empty
    edition URLs are stored as NULL.

    Raises:
        ValidationError: missing title or image, or neither edition URL set.
    """
    if (not partial or "title" in data) and _blank(data.get("title")):
        raise ValidationError("El título es requerido")
    if (not partial or "image_url" in data) and _blank(data.get("image_url")):
        raise ValidationError("La imagen es requerida")
    both_given = "ebook_url" in data and "physical_url" in data
    if (not partial or both_given) and _blank(data.get("ebook_url")) and _blank(data.get("physical_url")):
        raise ValidationError("Debe proporcionar al menos una URL (Ebook o Libro Físico)")

    cleaned = dict(data)
    for field in ("ebook_url", "physical_url", "image_url"):
        if field in cleaned:
            cleaned[field] = None if _blank(cleaned[field]) else cleaned[field].strip()
    if "title" in cleaned:
        cleaned["title"] = cleaned["title"].strip()
        cleaned["slug"] = slugify(cleaned["title"])
        if not cleaned["slug"]:
            raise ValidationError("El título debe contener letras o números")
    return cleaned


class CRUDProduct(CRUDBase[Product, ProductCreate, ProductUpdate]):
    """CRUD operations for Product."""

    order_by = (desc(Product.created_at), desc(Product.id))
    not_found_detail = "Producto no encontrado"


# Singleton instance
crud_product = CRUDProduct(Product)
