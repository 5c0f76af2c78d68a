"""
API dependencies for dependency injection.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import DBScope, get_db, get_elevated_db


async def get_db_scope(
    caller: AsyncSession = Depends(get_db),
    elevated: AsyncSession = Depends(get_elevated_db),
) -> DBScope:
    """
    Both credential scopes for the current request.

    Services read through `caller` and write caches through `elevated`;
    each session is closed when the request ends.
    """
    return DBScope(caller=caller, elevated=elevated)
