"""JSON encoding for wire payloads."""

from decimal import Decimal
from typing import Any

import orjson


def _default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        if obj.is_nan() or obj.is_infinite():
            return None
        return float(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps_wire(payload: Any) -> bytes:
    """Encode a wire payload, rendering Decimal amounts as JSON numbers.

    Args:
        payload: Dict/list structure produced by a ``to_wire`` method.

    Returns:
        UTF-8 encoded JSON bytes.
    """
    return orjson.dumps(payload, default=_default)
