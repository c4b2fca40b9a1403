"""요금제 선택 단계.

결제 연동은 없다. 선택한 요금제를 확인만 하고 바로 생성 단계로 넘어간다.
"""

from dataclasses import asdict, dataclass

from loguru import logger

from core.exceptions import ValidationError


@dataclass(frozen=True)
class PricingTier:
    id: str
    label: str
    photos: int
    price_cents: int

    @property
    def amount(self) -> str:
        return f"${self.price_cents / 100:.2f}"


TIERS = {
    t.id: t
    for t in (
        PricingTier("1photo", "1 Photo", 1, 299),
        PricingTier("3photos", "3 Photos", 3, 399),
        PricingTier("5photos", "5 Photos", 5, 499),
    )
}


def list_tiers() -> list[dict]:
    return [{**asdict(t), "amount": t.amount} for t in TIERS.values()]


def confirm_tier(tier_id: str | None) -> dict:
    tier = TIERS.get(tier_id or "")
    if tier is None:
        raise ValidationError(f"Unknown pricing tier: {tier_id}")
    # 결제 연동은 없다. charged는 항상 False
    logger.info(f"Pricing tier confirmed without charge: {tier.id} ({tier.amount})")
    return {"tier": tier.id, "amount": tier.amount, "charged": False}
