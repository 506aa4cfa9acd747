"""Shared CRUD behaviour for the public catalog resources."""

import logging
from datetime import date, datetime
from typing import ClassVar, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import reject_constraint_violations
from ..core.exceptions import NotFoundError, ValidationError
from ..models.deal import Deal
from ..models.destination import Destination
from ..models.hotel import Hotel
from ..models.vehicle import Vehicle

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class CatalogService(Generic[ModelT]):
    """
    List, create, update and hard-delete one catalog table.

    Subclasses name the model, the resource label used in errors and logs,
    and the boolean query filters they accept (query name -> column name).
    """

    model: ClassVar[type]
    resource_type: ClassVar[str]
    boolean_filters: ClassVar[dict[str, str]] = {}

    def __init__(self, db: AsyncSession):
        self.db = db

    def _list_statement(self) -> Select:
        return select(self.model)

    def _validate(self, item: ModelT) -> None:
        """Cross-field checks on the merged row before an update is committed."""

    async def list_items(self, item_id: Optional[UUID] = None, **flags: bool) -> list[ModelT]:
        """
        List rows newest first.

        Args:
            item_id: Restrict to a single row
            flags: Boolean filters by query name; only ``True`` values narrow the result
        """
        stmt = self._list_statement()

        if item_id is not None:
            stmt = stmt.where(self.model.id == item_id)

        for name, enabled in flags.items():
            if enabled:
                column = getattr(self.model, self.boolean_filters[name])
                stmt = stmt.where(column.is_(True))

        stmt = stmt.order_by(self.model.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, item_id: UUID) -> Optional[ModelT]:
        return await self.db.get(self.model, item_id)

    async def get_by_id_or_raise(self, item_id: UUID) -> ModelT:
        """
        Get a row by ID or raise NotFoundError.

        Raises:
            NotFoundError: If no row has this ID
        """
        item = await self.get_by_id(item_id)
        if item is None:
            logger.warning(
                f"{self.resource_type.capitalize()} not found",
                extra={"resource_type": self.resource_type, "resource_id": str(item_id)}
            )
            raise NotFoundError(resource_type=self.resource_type, resource_id=str(item_id))
        return item

    async def create(self, request: BaseModel) -> ModelT:
        """Insert a row from a validated create request."""
        item = self.model(**request.model_dump())
        self.db.add(item)
        await self._commit("create")
        await self.db.refresh(item)

        logger.info(
            f"{self.resource_type.capitalize()} created",
            extra={"resource_type": self.resource_type, "resource_id": str(item.id)}
        )
        return item

    async def update(self, request: BaseModel) -> ModelT:
        """
        Apply the fields present in an update request.

        Explicit nulls are ignored for columns that cannot be null.

        Raises:
            NotFoundError: If the row does not exist
            ValidationError: If the merged row fails cross-field checks
        """
        item = await self.get_by_id_or_raise(request.id)
        changes = request.model_dump(exclude_unset=True, exclude={"id"})

        columns = self.model.__table__.c
        for key, value in changes.items():
            if value is None and not columns[key].nullable:
                continue
            setattr(item, key, value)

        try:
            self._validate(item)
        except ValidationError:
            await self.db.rollback()
            raise

        await self._commit("update")
        await self.db.refresh(item)

        logger.info(
            f"{self.resource_type.capitalize()} updated",
            extra={
                "resource_type": self.resource_type,
                "resource_id": str(item.id),
                "fields": sorted(changes),
            }
        )
        return item

    async def delete(self, item_id: UUID) -> None:
        """
        Permanently remove a row.

        Raises:
            NotFoundError: If the row does not exist
        """
        item = await self.get_by_id_or_raise(item_id)
        await self.db.delete(item)
        await self._commit("delete")

        logger.info(
            f"{self.resource_type.capitalize()} deleted",
            extra={"resource_type": self.resource_type, "resource_id": str(item_id)}
        )

    async def _commit(self, operation: str) -> None:
        async with reject_constraint_violations(self.db, self.resource_type, operation):
            await self.db.commit()


class DestinationService(CatalogService[Destination]):
    model = Destination
    resource_type = "destination"
    boolean_filters = {"featured": "is_featured"}


class HotelService(CatalogService[Hotel]):
    model = Hotel
    resource_type = "hotel"
    boolean_filters = {"active": "is_active"}


class VehicleService(CatalogService[Vehicle]):
    model = Vehicle
    resource_type = "vehicle"
    boolean_filters = {"available": "is_available"}


class DealService(CatalogService[Deal]):
    model = Deal
    resource_type = "deal"
    boolean_filters = {"active": "is_active", "popup": "is_popup"}

    def _validate(self, item: Deal) -> None:
        if item.valid_from and item.valid_until and item.valid_from > item.valid_until:
            raise ValidationError("Deal validity must start on or before it ends")

    async def expire_deals(self, today: Optional[date] = None) -> int:
        """
        Deactivate active deals whose validity window has ended.

        Args:
            today: Reference date, defaults to the current UTC date

        Returns:
            Number of deals deactivated
        """
        today = today or datetime.utcnow().date()
        stmt = (
            update(Deal)
            .where(
                Deal.is_active.is_(True),
                Deal.valid_until.is_not(None),
                Deal.valid_until < today,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        expired_count = result.rowcount or 0
        if expired_count > 0:
            logger.info(
                "Expired deals deactivated",
                extra={"expired_count": expired_count, "as_of": today.isoformat()}
            )
        return expired_count

