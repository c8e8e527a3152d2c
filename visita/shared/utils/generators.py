"""ID generators (CUID2 and time-ordered audit ids)."""

from datetime import datetime

from cuid2 import cuid_wrapper

from visita.shared.utils.datetime import to_epoch_micros

cuid_generator = cuid_wrapper()

# 17 digits covers epoch microseconds well past year 5000, so ids sort lexically.
_EPOCH_MICROS_WIDTH = 17


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_time_ordered_id(at: datetime) -> str:
    """Return an id whose lexical order follows ``at`` (epoch micros + CUID2 suffix).

    Used for audit log entries so document ids sort in creation order.
    """
    return f"{to_epoch_micros(at):0{_EPOCH_MICROS_WIDTH}d}-{generate_cuid()}"
