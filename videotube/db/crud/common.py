"""Store capabilities shared by the CRUD modules.

Point-get, batch-get-by-ids and filtered scans. Aggregated views are built
from these batched reads plus the folds in ``videotube.services.aggregation``.

Mutations are single UPDATE/INSERT/DELETE statements that bypass the ORM
unit of work, so every read refreshes rows already held in the session's
identity map instead of returning a stale copy.
"""

from collections.abc import Iterable
from typing import TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.constants import MAX_CONTENT_LENGTH
from videotube.exceptions import ValidationError
from videotube.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def fresh(query: Select) -> Select:
    """Make ``query`` overwrite identity-map copies with current row values."""
    return query.execution_options(populate_existing=True)


async def get_by_id(db: AsyncSession, model: type[ModelT], record_id: int) -> ModelT | None:
    result = await db.execute(fresh(select(model).where(model.id == record_id)))
    return result.scalar_one_or_none()


async def get_many_by_ids(
    db: AsyncSession, model: type[ModelT], ids: Iterable[int]
) -> dict[int, ModelT]:
    """Batch-get rows by primary key in one query, keyed by id."""
    unique_ids = set(ids)
    if not unique_ids:
        return {}
    result = await db.execute(fresh(select(model).where(model.id.in_(unique_ids))))
    return {row.id: row for row in result.scalars().all()}


def require_text(value: str | None) -> str | None:
    """Trimmed value, or None when missing or blank."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_content(content: str | None) -> str:
    """Body text of a comment or tweet: required, bounded in length."""
    content = require_text(content)
    if not content:
        raise ValidationError("Content is required")
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(f"Content must be at most {MAX_CONTENT_LENGTH} characters")
    return content
