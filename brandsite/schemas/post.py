"""Pydantic schemas for blog posts and categories."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    """Base schema for Category."""
    name: str = Field("", max_length=100, description="Category name")


class CategoryCreate(CategoryBase):
    """Schema for creating a category. The slug is derived from the name."""
    pass


class CategoryResponse(CategoryBase):
    """Schema for Category response."""
    id: int
    slug: str

    class Config:
        from_attributes = True


class PostBase(BaseModel):
    """Base schema for Post."""
    title: str = Field("", max_length=500, description="Post title")
    excerpt: Optional[str] = Field(None, description="Short summary shown in listings")
    content: str = Field("", description="Post body")
    cover_image: Optional[str] = Field(None, max_length=1000, description="Cover image URL")
    published: bool = False
    reading_time: Optional[int] = Field(None, gt=0, description="Minutes; estimated when omitted")


class PostCreate(PostBase):
    """Schema for creating a new post."""
    category_ids: List[int] = Field(default_factory=list)


class PostUpdate(BaseModel):
    """Schema for updating a post. Unset fields keep their current value."""
    title: Optional[str] = Field(None, max_length=500)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=1000)
    published: Optional[bool] = None
    reading_time: Optional[int] = Field(None, gt=0)
    category_ids: Optional[List[int]] = None


class PublishUpdate(BaseModel):
    """Partial update of the publish gate only."""
    published: bool


class PostResponse(PostBase):
    """Schema for Post response with its flattened categories."""
    id: int
    slug: str
    created_at: Optional[datetime] = None
    categories: List[CategoryResponse] = []

    class Config:
        from_attributes = True


class PostListResponse(BaseModel):
    """Response for listing posts."""
    posts: List[PostResponse]
    total: int


class CategoryListResponse(BaseModel):
    """Response for listing categories."""
    categories: List[CategoryResponse]
