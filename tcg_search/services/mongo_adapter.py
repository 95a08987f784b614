from typing import Any, Dict, List, Tuple

from pymongo import ASCENDING, DESCENDING

from ..models.predicates import And, FieldEquals, FieldInRange, FieldMatches, Or, Predicate


def to_mongo_filter(predicate: Predicate) -> Dict[str, Any]:
    """Translate a predicate tree into a MongoDB query document"""
    if isinstance(predicate, And):
        parts = [to_mongo_filter(operand) for operand in predicate.operands]
        merged: Dict[str, Any] = {}
        for part in parts:
            if merged.keys() & part.keys():
                return {"$and": parts}
            merged.update(part)
        return merged

    if isinstance(predicate, Or):
        return {"$or": [to_mongo_filter(operand) for operand in predicate.operands]}

    if isinstance(predicate, FieldEquals):
        return {predicate.path: predicate.value}

    if isinstance(predicate, FieldMatches):
        condition = {"$regex": predicate.pattern}
        if predicate.ignore_case:
            condition["$options"] = "i"
        return {predicate.path: condition}

    if isinstance(predicate, FieldInRange):
        condition = {}
        if predicate.minimum is not None:
            condition["$gte"] = predicate.minimum
        if predicate.maximum is not None:
            condition["$lte"] = predicate.maximum
        return {predicate.path: condition}

    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


def to_mongo_sort(sort_spec: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
    """pymongo takes a list of (key, direction) pairs for compound sorts"""
    return [
        (field, DESCENDING if direction < 0 else ASCENDING)
        for field, direction in sort_spec
    ]
