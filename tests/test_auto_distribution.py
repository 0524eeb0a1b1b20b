from __future__ import annotations

from fractions import Fraction

import pytest

from amanah.enums import MemberType, Relation
from amanah.models import FamilyMember
from amanah.services.faraid.calculator import calculate_auto_faraid_distribution


def _family(*relations: Relation) -> list[FamilyMember]:
    return [
        FamilyMember(id=index, type=MemberType.REGISTERED, name=f"Member {index}", relation=relation)
        for index, relation in enumerate(relations, start=1)
    ]


def _by_id(result) -> dict[int, float]:  # noqa: ANN001
    return {item.member_id: item.share_percentage for item in result.beneficiaries}


def test_wife_sons_and_daughter_share_whole_estate() -> None:
    result = calculate_auto_faraid_distribution(
        _family(Relation.WIFE, Relation.SON, Relation.SON, Relation.DAUGHTER)
    )
    shares = _by_id(result)
    assert shares[1] == pytest.approx(12.5)
    assert shares[2] == pytest.approx(35.0)
    assert shares[3] == pytest.approx(35.0)
    assert shares[4] == pytest.approx(17.5)
    assert result.total_percentage == 100.0
    assert result.has_residuary is True
    assert result.warnings == []


def test_fixed_share_split_between_heirs_of_same_relation() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.WIFE, Relation.WIFE, Relation.SON))
    wives = [item for item in result.beneficiaries if item.relation is Relation.WIFE]
    assert [item.share for item in wives] == [Fraction(1, 16), Fraction(1, 16)]
    assert wives[0].share_formatted.startswith("1/16 (")
    assert wives[0].description == "1/8 if children present, 1/4 if no children"
    son = next(item for item in result.beneficiaries if item.relation is Relation.SON)
    assert son.share == Fraction(7, 8)
    assert son.description == "Residuary share (remaining portion after fixed shares)"


def test_per_beneficiary_percentages_are_not_rounded() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.SON, Relation.SON, Relation.SON))
    assert all(item.share == Fraction(1, 3) for item in result.beneficiaries)
    assert result.beneficiaries[0].share_percentage == pytest.approx(100 / 3)
    assert result.beneficiaries[0].share_percentage != round(result.beneficiaries[0].share_percentage, 1)
    assert result.total_percentage == 100.0


def test_unassigned_remainder_produces_warning() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.HUSBAND, Relation.DAUGHTER))
    assert result.total_percentage == 75.0
    assert result.has_residuary is False
    assert len(result.warnings) == 1
    assert "Total shares (75.0%)" in result.warnings[0]


def test_father_residuary_has_no_unit_weight() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.FATHER, Relation.MOTHER))
    shares = _by_id(result)
    assert shares[1] == pytest.approx(100 / 6)
    assert shares[2] == pytest.approx(100 / 3)
    assert result.has_residuary is True
    assert result.total_percentage == 50.0
    assert result.warnings


def test_no_eligible_heirs_returns_empty_result() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.UNCLE, Relation.COUSIN, Relation.SPOUSE))
    assert result.beneficiaries == []
    assert result.total_percentage == 0
    assert result.has_residuary is False
    assert result.warnings == ["No eligible family members for Faraid distribution"]
    assert result.description == "No eligible Faraid heirs found among family members"


def test_ineligible_members_are_ignored() -> None:
    result = calculate_auto_faraid_distribution(_family(Relation.SON, Relation.NEPHEW))
    assert [item.member_id for item in result.beneficiaries] == [1]
    assert result.total_percentage == 100.0


def test_registered_and_non_registered_members_may_share_an_id() -> None:
    result = calculate_auto_faraid_distribution(
        [
            {"id": 1, "type": "registered", "name": "Umar", "relation": "SON"},
            {"id": 1, "type": "non-registered", "name": "Ali", "relation": "SON"},
        ]
    )
    assert sorted((item.type, item.name) for item in result.beneficiaries) == [
        (MemberType.NON_REGISTERED, "Ali"),
        (MemberType.REGISTERED, "Umar"),
    ]
    assert all(item.share_percentage == pytest.approx(50.0) for item in result.beneficiaries)
    assert result.total_percentage == 100.0
    assert result.warnings == []


def test_accepts_plain_member_records() -> None:
    result = calculate_auto_faraid_distribution(
        [
            {"id": 10, "type": "registered", "name": "Ahmad", "relation": "HUSBAND"},
            {"id": 11, "type": "non-registered", "name": "Fatimah", "relation": "MOTHER", "icNumber": "1"},
            {"id": 12, "type": "registered", "name": "Ali", "relation": "SON"},
        ]
    )
    shares = _by_id(result)
    assert shares[10] == pytest.approx(25.0)
    assert shares[11] == pytest.approx(100 / 6)
    assert shares[12] == pytest.approx(100 * 7 / 12)
    assert result.total_percentage == 100.0
