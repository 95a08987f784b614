"""Store-agnostic filter conditions.

The filter builder produces a tree of these nodes; adapters translate the tree
into a concrete query language (see ``services.mongo_adapter``) and
``matches`` evaluates it against an in-memory card record.
"""

import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class And(_Node):
    operands: List["Predicate"] = Field(default_factory=list)


class Or(_Node):
    operands: List["Predicate"] = Field(default_factory=list)


class FieldEquals(_Node):
    path: str
    value: Any


class FieldMatches(_Node):
    path: str
    pattern: str
    ignore_case: bool = True


class FieldInRange(_Node):
    path: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None


Predicate = Union[And, Or, FieldEquals, FieldMatches, FieldInRange]

And.model_rebuild()
Or.model_rebuild()


def _resolve(record: Any, path: str) -> List[Any]:
    """Collect every value reachable at a dotted path, fanning out over lists"""
    values = [record]
    for segment in path.split("."):
        next_values = []
        for value in values:
            if isinstance(value, list):
                candidates = value
            else:
                candidates = [value]
            for candidate in candidates:
                if isinstance(candidate, dict) and segment in candidate:
                    next_values.append(candidate[segment])
        values = next_values

    flattened = []
    for value in values:
        if isinstance(value, list):
            flattened.extend(value)
        else:
            flattened.append(value)
    return flattened


def _in_range(value: Any, node: FieldInRange) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if node.minimum is not None and value < node.minimum:
        return False
    if node.maximum is not None and value > node.maximum:
        return False
    return True


def matches(predicate: Predicate, record: Dict[str, Any]) -> bool:
    """Evaluate a predicate against a card record"""
    if isinstance(predicate, And):
        return all(matches(operand, record) for operand in predicate.operands)
    if isinstance(predicate, Or):
        return any(matches(operand, record) for operand in predicate.operands)

    values = _resolve(record, predicate.path)
    if isinstance(predicate, FieldEquals):
        return any(value == predicate.value for value in values)
    if isinstance(predicate, FieldMatches):
        regex = re.compile(predicate.pattern, re.IGNORECASE if predicate.ignore_case else 0)
        return any(isinstance(value, str) and regex.search(value) for value in values)
    if isinstance(predicate, FieldInRange):
        return any(_in_range(value, predicate) for value in values)

    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")
