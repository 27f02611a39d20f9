"""Quote pricing.

Pure computation: safe to call on every form change. Dynamic form answers only
affect the price through SURCHARGE_RULES; unknown keys are ignored.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from app.core.enums import DiscountType
from app.schemas.quote import AdditionalService, Discount, Quote

IMMEDIATE_SERVICE_FEE = 10.0
PROMO_DISCOUNT = 16.0
TAX_RATE = 0.16  # IVA


@dataclass(frozen=True)
class FlagSurcharge:
    """Charged when the answer is exactly True."""
    id: str
    name: str
    price: float

    def apply(self, answer: Any) -> Optional[AdditionalService]:
        if answer is not True:
            return None
        return AdditionalService(id=self.id, name=self.name, price=self.price, selected=True)


@dataclass(frozen=True)
class ChoiceSurcharge:
    """Charged when the answer is one of the priced options."""
    id: str
    name: str
    prices: Mapping[str, float] = field(default_factory=dict)

    def apply(self, answer: Any) -> Optional[AdditionalService]:
        if not isinstance(answer, str) or answer not in self.prices:
            return None
        return AdditionalService(
            id=self.id,
            name=self.name,
            description=answer,
            price=self.prices[answer],
            selected=True,
        )


SurchargeRule = Union[FlagSurcharge, ChoiceSurcharge]

SURCHARGE_RULES: Dict[str, SurchargeRule] = {
    "needs_uninstall": FlagSurcharge(
        id="uninstall",
        name="Desinstalación de equipo actual",
        price=30.0,
    ),
}


def compute_quote(
    base_price: float,
    form_answers: Mapping[str, Any],
    immediate_service: bool = False,
    *,
    rules: Mapping[str, SurchargeRule] = SURCHARGE_RULES,
    immediate_fee: float = IMMEDIATE_SERVICE_FEE,
    promo_discount: float = PROMO_DISCOUNT,
    tax_rate: float = TAX_RATE,
) -> Quote:
    """
    Build the itemized quote for one service request.

    base_price comes from the catalog and is trusted. The promotional discount is
    a flat amount and total is not floored at zero, so cheap services can end up
    with a negative total.
    """
    fee = immediate_fee if immediate_service else 0.0

    additional_services = []
    for key, rule in rules.items():
        if key not in form_answers:
            continue
        item = rule.apply(form_answers[key])
        if item is not None:
            additional_services.append(item)

    additional_total = sum(s.price for s in additional_services if s.selected)
    subtotal = base_price + fee + additional_total

    discounts = (
        Discount(id="promo", name="Descuento Promocional", amount=promo_discount, type=DiscountType.FIXED),
    )
    total = subtotal - sum(d.amount for d in discounts)
    total_with_tax = total * (1 + tax_rate)

    return Quote(
        form_data=dict(form_answers),
        base_price=base_price,
        immediate_service_fee=fee,
        additional_services=tuple(additional_services),
        discounts=discounts,
        subtotal=subtotal,
        total=total,
        tax_rate=tax_rate,
        total_with_tax=total_with_tax,
    )
