# backEnd/app/schemas/pagination.py
from typing import Generic, List, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar('T')

class Pagination(BaseModel, Generic[T]):
    items: List[T]
    total: int

    model_config = ConfigDict(from_attributes=True)
