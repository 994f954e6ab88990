from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal, Dict, Any
from datetime import datetime

TransactionStatus = Literal["completed", "cancelled"]


class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_code: str
    point_cost: int = Field(gt=0)
    quantity: int = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("name", "product_code")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_code: Optional[str] = None
    point_cost: Optional[int] = Field(default=None, gt=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    product_code: str
    point_cost: int
    quantity: int = 0
    is_active: bool = True
    point_display: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    product_id: str
    point_cost: int
    points_balance_after: int
    status: TransactionStatus
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RedemptionResponse(BaseModel):
    transaction_id: str
    user_id: str
    product_id: str
    product_name: str
    product_code: str
    point_cost: int
    store_points_remaining: int
    status: TransactionStatus
    created_at: Optional[datetime] = None
