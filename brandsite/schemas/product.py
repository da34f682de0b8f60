"""Pydantic schemas for Product."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    """Base schema for Product."""
    title: str = Field("", max_length=500, description="Product title")
    description: str = Field("", description="Product description")
    image_url: str = Field("", max_length=1000, description="Cover image URL (required)")
    ebook_url: Optional[str] = Field(None, max_length=1000, description="Digital edition URL")
    physical_url: Optional[str] = Field(None, max_length=1000, description="Physical edition URL")
    published: bool = False


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating a product. Unset fields keep their current value."""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    ebook_url: Optional[str] = Field(None, max_length=1000)
    physical_url: Optional[str] = Field(None, max_length=1000)
    published: Optional[bool] = None


class ProductResponse(ProductBase):
    """Schema for Product response."""
    id: int
    slug: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductListResponse(BaseModel):
    """Response for listing products."""
    products: List[ProductResponse]
    total: int
