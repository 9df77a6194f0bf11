"""Transaction numbers: ``"<PREFIX>/<counter>"``.

The counter is a decimal string kept in the ``transaction_counter``
setting.  Each allocation uses the stored value and stores value + 1.  It is
not zero-padded, so crossing a power of ten adds a digit.
"""

from __future__ import annotations

from nota.domain.exceptions import CorruptRecordError

DEFAULT_PREFIX = "RJA/APT"
DEFAULT_COUNTER_SEED = "2504040159"
COUNTER_SETTING_KEY = "transaction_counter"


def format_transaction_number(prefix: str, counter: str) -> str:
    return f"{prefix}/{counter}"


def next_counter(counter: str) -> str:
    return str(parse_counter(counter) + 1)


def parse_counter(counter: str) -> int:
    try:
        value = int(counter)
    except (TypeError, ValueError) as exc:
        raise CorruptRecordError(f"Transaction counter is not an integer: {counter!r}") from exc
    if value < 0:
        raise CorruptRecordError(f"Transaction counter is negative: {counter!r}")
    return value
