from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class APIResult(BaseModel, Generic[T]):
    """Response envelope shared by every endpoint."""

    ok: bool
    err: Optional[str] = None
    data: Optional[T] = None

    @classmethod
    def success(cls, data: T) -> "APIResult[T]":
        return cls(ok=True, err=None, data=data)

    @classmethod
    def failure(cls, message: str) -> "APIResult[T]":
        return cls(ok=False, err=message, data=None)
