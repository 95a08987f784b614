import math
import re
from typing import Dict, List, Optional

from ..models.constants import PRICE_VARIANT_PATHS
from ..models.predicates import And, FieldEquals, FieldInRange, FieldMatches, Or, Predicate

LEADING_INT = re.compile(r"\s*([+-]?\d+)")
LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _contains(path: str, value: str) -> FieldMatches:
    return FieldMatches(path=path, pattern=re.escape(value))


def _equals_ignore_case(path: str, value: str) -> FieldMatches:
    return FieldMatches(path=path, pattern=f"^{re.escape(value)}$")


def _parse_int(value: str) -> Optional[int]:
    """Read the leading integer of a value, e.g. "120" or "120HP" -> 120"""
    match = LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _parse_price(value: Optional[str]) -> Optional[float]:
    """Read the leading number of a value, e.g. "5" or "4.99$" -> 4.99"""
    if not value:
        return None
    match = LEADING_FLOAT.match(value)
    if not match:
        return None
    price = float(match.group(1))
    return price if math.isfinite(price) else None


def build_price_range(fields: Dict[str, str]) -> Optional[Or]:
    """Match cards whose market price for any print variant is within range"""
    minimum = _parse_price(fields.get("priceMin"))
    maximum = _parse_price(fields.get("priceMax"))
    if minimum is None and maximum is None:
        return None
    return Or(operands=[
        FieldInRange(path=path, minimum=minimum, maximum=maximum)
        for path in PRICE_VARIANT_PATHS
    ])


def build_filter(fields: Dict[str, str]) -> And:
    """Build a predicate from parsed query fields

    Every recognised field contributes one clause and the clauses are ANDed.
    Unknown fields and empty values are ignored, so an empty mapping yields
    an empty ``And`` which matches every card.
    """
    clauses: List[Predicate] = []

    if fields.get("name"):
        clauses.append(_contains("name", fields["name"]))
    if fields.get("supertype"):
        clauses.append(_equals_ignore_case("supertype", fields["supertype"]))
    if fields.get("types"):
        clauses.append(FieldEquals(path="types", value=fields["types"]))
    if fields.get("set.id"):
        clauses.append(FieldEquals(path="set.id", value=fields["set.id"]))
    if fields.get("rarity"):
        clauses.append(_equals_ignore_case("rarity", fields["rarity"]))
    if fields.get("subtypes"):
        clauses.append(_contains("subtypes", fields["subtypes"]))
    if fields.get("hp"):
        hp = _parse_int(fields["hp"])
        if hp is not None:
            # hp is stored as a string on synced cards
            clauses.append(FieldEquals(path="hp", value=str(hp)))

    price_range = build_price_range(fields)
    if price_range is not None:
        clauses.append(price_range)

    return And(operands=clauses)
