"""Faraid (Islamic inheritance) calculation services."""

from .calculator import (
    BeneficiaryWithShare,
    FaraidCalculationResult,
    FaraidContext,
    FaraidDistribution,
    HeirDescriptor,
    MemberKey,
    calculate_auto_faraid_distribution,
    calculate_faraid_distribution,
    calculate_residuary_shares,
    member_key,
)
from .formatting import format_fraction, format_share
from .report import (
    allocate_estate,
    currency_hint,
    format_money,
    parse_count,
    parse_money,
    parse_money_allow_zero,
    render_faraid_report,
)
from .rules import (
    ELIGIBLE_HEIRS,
    FIXED_SHARES,
    filter_eligible_heirs,
    get_faraid_explanation,
    has_fixed_share,
)
from .validator import validate_faraid_shares

__all__ = [
    "BeneficiaryWithShare",
    "ELIGIBLE_HEIRS",
    "FIXED_SHARES",
    "FaraidCalculationResult",
    "FaraidContext",
    "FaraidDistribution",
    "HeirDescriptor",
    "MemberKey",
    "allocate_estate",
    "calculate_auto_faraid_distribution",
    "calculate_faraid_distribution",
    "calculate_residuary_shares",
    "currency_hint",
    "filter_eligible_heirs",
    "format_fraction",
    "format_money",
    "format_share",
    "get_faraid_explanation",
    "has_fixed_share",
    "member_key",
    "parse_count",
    "parse_money",
    "parse_money_allow_zero",
    "render_faraid_report",
    "validate_faraid_shares",
]
