"""Shared repository plumbing."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select


class BaseRepository[ModelType: SQLModel]:
    """Data access for one table.

    Repositories stage changes and may flush; only services commit or roll
    back.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: int | UUID, *, for_update: bool = False) -> ModelType | None:
        """Fetch by primary key, optionally locking the row (SELECT ... FOR UPDATE)."""
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if for_update:
            query = query.with_for_update()
        return (await self.session.execute(query)).scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def flush(self) -> None:
        """Write staged rows so autoincrement ids are assigned."""
        await self.session.flush()
