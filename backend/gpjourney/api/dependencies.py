from typing import Annotated

from fastapi import Depends, HTTPException, status

from gpjourney.core.storage import get_storage
from gpjourney.services.journal import InvalidEntryError, RecordNotFoundError
from gpjourney.services.store import Store


def get_store() -> Store:
    return Store(get_storage())


JournalStore = Annotated[Store, Depends(get_store)]


def to_http_error(exc: Exception) -> HTTPException:
    """Map a journal operation error to the matching HTTP error."""
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidEntryError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Unexpected error",
    )
