#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from amanah.config import configure_logging
from amanah.enums import MemberType, Relation
from amanah.services.faraid import (
    calculate_auto_faraid_distribution,
    currency_hint,
    parse_count,
    parse_money_allow_zero,
    render_faraid_report,
)

logger = logging.getLogger(__name__)


def parse_heir(value: str) -> tuple[Relation, int]:
    relation_text, _, count_text = value.partition("=")
    try:
        relation = Relation(relation_text.strip().upper())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Unknown relation: {relation_text!r}") from exc
    count = parse_count(count_text or "1")
    if not count:
        raise argparse.ArgumentTypeError(f"Invalid heir count: {count_text!r}")
    return relation, count


def members_from_heirs(heirs: list[tuple[Relation, int]]) -> list[dict[str, Any]]:
    members: list[dict[str, Any]] = []
    for relation, count in heirs:
        for index in range(1, count + 1):
            members.append(
                {
                    "id": len(members) + 1,
                    "type": MemberType.NON_REGISTERED.value,
                    "name": f"{relation.value.title()} {index}" if count > 1 else relation.value.title(),
                    "relation": relation.value,
                }
            )
    return members


def load_members(path: Path) -> list[dict[str, Any]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("members") or []
    if not isinstance(payload, list):
        raise SystemExit(f"Expected a list of family members in {path}")
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Print an automatic Faraid distribution")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--heir",
        action="append",
        type=parse_heir,
        default=[],
        metavar="RELATION=COUNT",
        help="Surviving heir group, e.g. SON=2 (repeatable)",
    )
    source.add_argument(
        "--members",
        type=Path,
        help="JSON file with family member records",
    )
    parser.add_argument(
        "--estate",
        default="0",
        help="Estate value after debts and bequests, e.g. '120000 USD'",
    )
    args = parser.parse_args()

    configure_logging()

    if args.members:
        if not args.members.exists():
            raise SystemExit(f"Members file not found: {args.members}")
        members = load_members(args.members)
    else:
        members = members_from_heirs(args.heir)

    estate_amount = parse_money_allow_zero(args.estate)
    if estate_amount is None:
        parser.error(f"invalid estate amount: {args.estate!r}")

    result = calculate_auto_faraid_distribution(members)
    logger.info("Calculated distribution for %d family members", len(members))
    print(
        render_faraid_report(
            result,
            estate_amount=estate_amount or Decimal(0),
            currency=currency_hint(args.estate),
        )
    )


if __name__ == "__main__":
    main()
