from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Optional

from amanah.config import settings
from amanah.services.faraid.calculator import FaraidCalculationResult, MemberKey

MAX_RELATIVES = int(settings.faraid.max_relatives)


def currency_hint(raw: str) -> str:
    lowered = (raw or "").lower()
    if "$" in raw or "usd" in lowered:
        return "$"
    if "€" in raw or "eur" in lowered:
        return "€"
    if "﷼" in raw or "rial" in lowered or "sar" in lowered:
        return "﷼"
    if "rm" in lowered or "myr" in lowered or "ringgit" in lowered:
        return "RM"
    return ""


def parse_count(text: Optional[str], *, maximum: int = MAX_RELATIVES) -> Optional[int]:
    raw = (text or "").strip()
    if not raw:
        return None
    if not re.fullmatch(r"\d{1,2}", raw):
        return None
    value = int(raw)
    if value < 0 or value > maximum:
        return None
    return value


def _clean_amount(text: Optional[str]) -> Optional[Decimal]:
    raw = (text or "").strip()
    if not raw:
        return None
    cleaned = re.sub(r"[^\d,\.]", "", raw).replace(",", ".")
    if not cleaned:
        return None
    if cleaned.count(".") > 1:
        first, *rest = cleaned.split(".")
        cleaned = first + "." + "".join(rest)
    try:
        return Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None


def parse_money(text: Optional[str]) -> Optional[Decimal]:
    amount = _clean_amount(text)
    if amount is None or amount <= 0:
        return None
    return amount


def parse_money_allow_zero(text: Optional[str]) -> Optional[Decimal]:
    amount = _clean_amount(text)
    if amount is None or amount < 0:
        return None
    return amount


def format_money(amount: Decimal, *, currency: str = "") -> str:
    quantized = amount.quantize(Decimal("0.01"))
    if quantized == quantized.to_integral():
        number = f"{int(quantized):,}"
    else:
        number = f"{quantized:,.2f}"
    return f"{number} {currency}".rstrip()


def _portion(estate_amount: Decimal, share: Fraction) -> Decimal:
    return estate_amount * Decimal(share.numerator) / Decimal(share.denominator)


def allocate_estate(
    result: FaraidCalculationResult, estate_amount: Decimal
) -> dict[MemberKey, Decimal]:
    """Money owed to each beneficiary, keyed by ``(member type, member id)``."""
    return {
        beneficiary.member_key: _portion(estate_amount, beneficiary.share)
        for beneficiary in result.beneficiaries
    }


def render_faraid_report(
    result: FaraidCalculationResult,
    *,
    estate_amount: Decimal,
    currency: str = "",
    extra_lines: Optional[list[str]] = None,
) -> str:
    lines: list[str] = [
        "Faraid distribution (Quran 4:11-12, 4:176)",
        "Order: funeral costs -> debts -> wasiyyah (up to 1/3, not to heirs) -> distribution of the remainder.",
        "",
    ]
    if extra_lines:
        lines.extend([item for item in extra_lines if item])
        lines.append("")

    if result.warnings:
        lines.extend(f"Warning: {warning}" for warning in result.warnings)
        lines.append("")

    if not result.beneficiaries:
        lines.append(result.description)
    else:
        allocations = allocate_estate(result, estate_amount)
        for beneficiary in result.beneficiaries:
            amount = allocations[beneficiary.member_key]
            lines.append(
                f"{beneficiary.name} ({beneficiary.relation.value}): "
                f"{beneficiary.share_formatted} -> {format_money(amount, currency=currency)}"
            )
        distributed = sum(allocations.values(), Decimal(0))
        lines.append("")
        lines.append(f"Total: {result.total_percentage:.1f}% -> {format_money(distributed, currency=currency)}")
        undistributed = estate_amount - distributed
        if undistributed.quantize(Decimal("0.01")) > 0:
            lines.append(
                f"Undistributed remainder: {format_money(undistributed, currency=currency)} "
                "- consult a scholar."
            )
        lines.append("")
        lines.append(f"Basis: {result.description}")

    lines.extend(
        [
            "",
            "Note: outstanding debts of the deceased must be settled first.",
            "Note: this is a general automatic calculation, complex cases should be confirmed with a scholar.",
        ]
    )
    return "\n".join(lines).strip()
