from .post import (
	CategoryBase,
	CategoryCreate,
	CategoryResponse,
	CategoryListResponse,
	PostBase,
	PostCreate,
	PostUpdate,
	PostResponse,
	PostListResponse,
	PublishUpdate,
)
from .product import (
	ProductBase,
	ProductCreate,
	ProductUpdate,
	ProductResponse,
	ProductListResponse,
)
from .service import (
	ServiceBase,
	ServiceCreate,
	ServiceUpdate,
	ServiceResponse,
	ServiceListResponse,
	ServiceContactResponse,
)

__all__ = [
	"CategoryBase",
	"CategoryCreate",
	"CategoryResponse",
	"CategoryListResponse",
	"PostBase",
	"PostCreate",
	"PostUpdate",
	"PostResponse",
	"PostListResponse",
	"PublishUpdate",
	"ProductBase",
	"ProductCreate",
	"ProductUpdate",
	"ProductResponse",
	"ProductListResponse",
	"ServiceBase",
	"ServiceCreate",
	"ServiceUpdate",
	"ServiceResponse",
	"ServiceListResponse",
	"ServiceContactResponse",
]
