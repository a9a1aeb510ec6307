# app/models/domain/common.py
"""Response envelopes shared by every endpoint.

Fields are serialized in camelCase (``totalRecords``, ``nextPage``) and can
be populated by either name.
"""

from typing import Annotated, Generic, List, Optional, TypeVar
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.enums import parse_enum

T = TypeVar("T")

class CamelModel(BaseModel):
    """Base model for API-facing shapes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

class Response(CamelModel, Generic[T]):
    """Envelope for a single result."""
    model_config = ConfigDict(frozen=True)

    succeeded: bool = True
    message: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    data: Optional[T] = None

class PagedResponse(Response[List[T]], Generic[T]):
    """Envelope for one page of a list, with navigation links."""
    page_number: int = 1
    page_size: int = 0
    total_pages: int = 0
    total_records: int = 0
    first_page: Optional[str] = None
    last_page: Optional[str] = None
    next_page: Optional[str] = None
    previous_page: Optional[str] = None

def enum_input(enum_cls):
    """Annotated enum type accepting the integer value or the member name."""
    return Annotated[enum_cls, BeforeValidator(lambda value: parse_enum(enum_cls, value))]

class ListQueryParams(CamelModel):
    """Common list parameters: search, sort and paging.

    Page values are passed through as given; services normalize them.
    """
    search: Optional[str] = None
    order_by: Optional[str] = None
    is_descending: bool = False
    page_number: int = 1
    page_size: int = 0
