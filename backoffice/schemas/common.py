from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    items: list[T]
    count: int
    limit: int
    offset: int


class MessageResponse(BaseModel):
    message: str


class CatalogStats(BaseModel):
    total: int
    active: int
    inactive: int


class SyncStats(BaseModel):
    total: int
    successful: int
    failed: int
