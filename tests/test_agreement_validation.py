from __future__ import annotations

from datetime import date, datetime, timezone

from amanah.enums import DistributionType
from amanah.models import AssetInput, BeneficiaryInput
from amanah.services.agreements.validation import (
    validate_agreement_input,
    validate_agreement_submission,
    validate_assets,
    validate_beneficiaries,
)

NOW = datetime(2026, 3, 1, 12, 0)


def test_title_is_required() -> None:
    result = validate_agreement_input("", distribution_type="FARAID", now=NOW)
    assert result.valid is False
    assert "Title is required" in result.errors

    blank = validate_agreement_input("   ", now=NOW)
    assert "Title is required" in blank.errors


def test_minimal_valid_payload() -> None:
    result = validate_agreement_input("My agreement", distribution_type=DistributionType.HIBAH, now=NOW)
    assert result.valid is True
    assert result.errors == []
    assert result.warnings == []


def test_title_and_description_length_limits() -> None:
    result = validate_agreement_input("t" * 201, "d" * 1001, now=NOW)
    assert result.errors == [
        "Title must be less than 200 characters",
        "Description must be less than 1000 characters",
    ]
    assert validate_agreement_input("t" * 200, "d" * 1000, now=NOW).valid is True


def test_unknown_distribution_type() -> None:
    result = validate_agreement_input("Agreement", distribution_type="GIFT", now=NOW)
    assert result.errors == ["Invalid distribution type. Must be one of: FARAID, HIBAH, WASIYYAH, WAKAF"]


def test_expiry_must_follow_effective_date() -> None:
    result = validate_agreement_input(
        "Agreement",
        distribution_type="WASIYYAH",
        effective_date="2026-05-10",
        expiry_date="2026-05-09",
        now=NOW,
    )
    assert result.valid is False
    assert "Expiry date must be after effective date" in result.errors

    same_day = validate_agreement_input(
        "Agreement", effective_date=date(2026, 5, 10), expiry_date=date(2026, 5, 10), now=NOW
    )
    assert "Expiry date must be after effective date" in same_day.errors


def test_past_effective_date_is_only_a_warning() -> None:
    result = validate_agreement_input("Agreement", effective_date="2026-01-10", now=NOW)
    assert result.valid is True
    assert result.warnings == ["Effective date is in the past"]


def test_future_dates_with_timezones() -> None:
    result = validate_agreement_input(
        "Agreement",
        effective_date="2026-04-01T00:00:00Z",
        expiry_date=datetime(2027, 4, 1, tzinfo=timezone.utc),
        now=NOW,
    )
    assert result.valid is True
    assert result.warnings == []


def test_unparseable_dates_are_errors() -> None:
    result = validate_agreement_input("Agreement", effective_date="tomorrow", expiry_date="31/12/2026", now=NOW)
    assert result.errors == ["Effective date is not a valid date", "Expiry date is not a valid date"]


def test_beneficiaries_required() -> None:
    result = validate_beneficiaries([], DistributionType.HIBAH)
    assert result.errors == ["At least one beneficiary is required"]


def test_beneficiary_member_reference_rules() -> None:
    result = validate_beneficiaries(
        [
            {"relation": "SON", "sharePercentage": 50},
            {"familyMemberId": 1, "nonRegisteredFamilyMemberId": 2, "relation": "SON", "sharePercentage": 50},
        ],
        DistributionType.HIBAH,
    )
    assert result.valid is False
    assert result.errors == [
        "Beneficiary at index 0: Must specify either a registered family member or non-registered member",
        "Beneficiary at index 1: Cannot specify both registered and non-registered member",
    ]


def test_beneficiary_share_and_relation_rules() -> None:
    result = validate_beneficiaries(
        [
            BeneficiaryInput(family_member_id=1, relation="SON", share_percentage=0),
            BeneficiaryInput(family_member_id=2, relation="DAUGHTER", share_percentage=150),
            BeneficiaryInput(family_member_id=3, share_percentage=10),
        ],
        "WAKAF",
    )
    assert "Beneficiary at index 0: Share percentage must be a positive number" in result.errors
    assert "Beneficiary at index 1: Share percentage cannot exceed 100%" in result.errors
    assert "Beneficiary at index 2: Relation is required" in result.errors
    assert "Total beneficiary shares must equal 100%. Current total: 160.00%" in result.errors


def test_total_within_tolerance() -> None:
    result = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "SON", "sharePercentage": 33.33},
            {"familyMemberId": 2, "relation": "SON", "sharePercentage": 33.33},
            {"familyMemberId": 3, "relation": "SON", "sharePercentage": 33.33},
        ],
        DistributionType.HIBAH,
    )
    assert result.valid is True

    off = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "SON", "sharePercentage": 60},
            {"familyMemberId": 2, "relation": "SON", "sharePercentage": 39.8},
        ],
        DistributionType.HIBAH,
    )
    assert off.errors == ["Total beneficiary shares must equal 100%. Current total: 99.80%"]


def test_malformed_beneficiary_record_is_reported_by_index() -> None:
    result = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "SON", "sharePercentage": 100},
            {"familyMemberId": 2, "relation": "STEPSON", "sharePercentage": 10},
        ],
        DistributionType.HIBAH,
    )
    assert result.valid is False
    assert result.errors[0].startswith("Beneficiary at index 1: relation")


def test_faraid_beneficiaries_get_residuary_warning() -> None:
    result = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "SON", "sharePercentage": 50},
            {"nonRegisteredFamilyMemberId": 2, "relation": "DAUGHTER", "sharePercentage": 50},
        ],
        DistributionType.FARAID,
    )
    assert (
        "SON should receive residuary portion (remaining after fixed shares), not a fixed percentage"
        in result.warnings
    )
    assert (
        "DAUGHTER should receive residuary portion (remaining after fixed shares), not a fixed percentage"
        in result.warnings
    )
    assert result.errors == []


def test_faraid_errors_are_merged() -> None:
    result = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "WIFE", "sharePercentage": 50},
            {"familyMemberId": 2, "relation": "SON", "sharePercentage": 50},
        ],
        "FARAID",
    )
    assert result.valid is False
    assert result.errors == ["WIFE: Expected 12.50% per Faraid rules, got 50%"]


def test_non_faraid_types_skip_faraid_rules() -> None:
    result = validate_beneficiaries(
        [
            {"familyMemberId": 1, "relation": "WIFE", "sharePercentage": 50},
            {"familyMemberId": 2, "relation": "SON", "sharePercentage": 50},
        ],
        DistributionType.WASIYYAH,
    )
    assert result.valid is True
    assert result.warnings == []


def test_assets_required() -> None:
    result = validate_assets([])
    assert result.valid is False
    assert "At least one asset is required" in result.errors


def test_duplicate_assets_rejected() -> None:
    result = validate_assets([{"assetId": 5}, {"assetId": 5}])
    assert result.valid is False
    assert result.errors == ["Duplicate assets detected. Each asset can only be added once"]


def test_asset_allocation_bounds() -> None:
    result = validate_assets(
        [
            AssetInput(asset_id=1, allocated_value=-10),
            AssetInput(asset_id=2, allocated_percentage=120),
            AssetInput(allocated_percentage=10),
        ]
    )
    assert result.errors == [
        "Asset at index 0: Allocated value cannot be negative",
        "Asset at index 1: Allocated percentage must be between 0 and 100",
        "Asset at index 2: Asset ID is required",
    ]


def test_valid_unique_assets() -> None:
    result = validate_assets(
        [
            {"assetId": 1, "allocatedPercentage": 50},
            {"asset_id": 2, "allocated_percentage": 50, "allocated_value": 0},
        ]
    )
    assert result.valid is True
    assert result.errors == []


def test_submission_collects_every_problem() -> None:
    result = validate_agreement_submission(
        title="",
        distribution_type=DistributionType.HIBAH,
        beneficiaries=[{"familyMemberId": 1, "relation": "SON", "sharePercentage": 90}],
        assets=[{"assetId": 3}, {"assetId": 3}],
        effective_date="2026-01-01",
        now=NOW,
    )
    assert result.valid is False
    assert result.errors == [
        "Title is required",
        "Total beneficiary shares must equal 100%. Current total: 90.00%",
        "Duplicate assets detected. Each asset can only be added once",
    ]
    assert result.warnings == ["Effective date is in the past"]
