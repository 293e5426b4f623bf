# product_api/models.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional

# BSON stores integers as signed 64-bit
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1

class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(allow_inf_nan=False)
    stock: int = Field(ge=INT64_MIN, le=INT64_MAX)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    image: Optional[str] = None

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    stock: Optional[int] = Field(default=None, ge=INT64_MIN, le=INT64_MAX)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    image: Optional[str] = None

    @field_validator("name", "price", "stock", "category")
    @classmethod
    def required_fields_not_null(cls, v):
        # only runs for explicitly submitted values
        if v is None:
            raise ValueError("may not be null")
        return v

class Product(BaseModel):
    id: str
    name: str
    price: float = Field(allow_inf_nan=False)
    stock: int
    description: Optional[str] = None
    category: str
    image: Optional[str] = None

class Message(BaseModel):
    message: str
