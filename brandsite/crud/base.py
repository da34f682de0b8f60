"""Generic CRUD base class for SQLAlchemy models."""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from brandsite.core.exceptions import NotFoundError
from brandsite.database import Base


ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def as_dict(obj_in: Union[BaseModel, Dict[str, Any]], *, exclude_unset: bool = False) -> Dict[str, Any]:
	"""Plain dict from a Pydantic schema or a mapping."""
	if isinstance(obj_in, BaseModel):
		return obj_in.model_dump(exclude_unset=exclude_unset)
	return dict(obj_in)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
	"""Reusable CRUD helper for SQLAlchemy models.

	All methods take an open AsyncSession and return database objects, not schemas.
	Writes commit; the commit is what publishes change notifications.
	"""

	#: Columns used by get_multi, in priority order.
	order_by: Sequence[Any] = ()

	not_found_detail = "Recurso no encontrado"

	def __init__(self, model: Type[ModelType]):
		self.model = model

	# ----- Read -----
	async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
		"""Get one record by primary key."""
		return await db.get(self.model, id)

	async def get_or_raise(self, db: AsyncSession, id: Any) -> ModelType:
		"""Get one record by primary key or raise NotFoundError."""
		db_obj = await self.get(db, id)
		if db_obj is None:
			raise NotFoundError(self.not_found_detail)
		return db_obj

	async def get_multi(self, db: AsyncSession, *, published_only: bool = False) -> List[ModelType]:
		"""Get all records in the model's deterministic order."""
		stmt = select(self.model)
		if published_only:
			stmt = stmt.where(getattr(self.model, "published").is_(True))
		stmt = stmt.order_by(*self.order_by)
		return list((await db.scalars(stmt)).all())

	# ----- Create -----
	async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
		"""Insert a new record and return it with server defaults loaded."""
		db_obj = self.model(**as_dict(obj_in))  # type: ignore[arg-type]
		db.add(db_obj)
		await db.commit()
		await db.refresh(db_obj)
		return db_obj

	# ----- Update -----
	async def update(
		self,
		db: AsyncSession,
		*,
		db_obj: ModelType,
		obj_in: Union[UpdateSchemaType, Dict[str, Any]],
	) -> ModelType:
		"""Update a record with fields from a Pydantic schema or dict."""
		update_data = as_dict(obj_in, exclude_unset=True)

		for field, value in update_data.items():
			if hasattr(db_obj, field):
				setattr(db_obj, field, value)

		db.add(db_obj)
		await db.commit()
		await db.refresh(db_obj)
		return db_obj

	async def set_published(self, db: AsyncSession, *, id: Any, published: bool) -> ModelType:
		"""Write only the publish gate. Setting an explicit value keeps this idempotent."""
		db_obj = await self.get_or_raise(db, id)
		db_obj.published = published
		await db.commit()
		await db.refresh(db_obj)
		return db_obj

	# ----- Delete -----
	async def delete(self, db: AsyncSession, *, id: Any) -> None:
		"""Physically delete a record. Raises NotFoundError when it is absent."""
		db_obj = await self.get_or_raise(db, id)
		await db.delete(db_obj)
		await db.commit()
