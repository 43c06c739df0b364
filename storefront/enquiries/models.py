# module storefront.enquiries.models
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class _Form(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class ContactMessage(_Form):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    message: str = Field(min_length=1)


class BookingRequest(_Form):
    service: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    notes: Optional[str] = None
