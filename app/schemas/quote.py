from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional, Tuple
from app.core.enums import DiscountType


class AdditionalService(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    price: float
    selected: bool = True


class Discount(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    amount: float
    type: DiscountType = DiscountType.FIXED


class Quote(BaseModel):
    """Itemized price breakdown. Replaced wholesale whenever its inputs change."""
    model_config = ConfigDict(frozen=True)

    form_data: Dict[str, Any] = Field(default_factory=dict)
    base_price: float
    immediate_service_fee: float
    additional_services: Tuple[AdditionalService, ...] = ()
    discounts: Tuple[Discount, ...] = ()
    subtotal: float
    total: float
    tax_rate: float
    total_with_tax: float


class QuoteRequest(BaseModel):
    base_price: float = Field(ge=0, allow_inf_nan=False)
    form_data: Dict[str, Any] = Field(default_factory=dict)
    immediate_service: bool = False
