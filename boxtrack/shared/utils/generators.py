from cuid2 import cuid_wrapper

from boxtrack.domain.value_objects.path import SEPARATOR

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """
    Collision-resistant primary key.

    Location ids double as materialized path segments, so a generated id
    must never contain the path separator.
    """
    value = _next_cuid()
    if not isinstance(value, str) or not value or SEPARATOR in value:
        raise ValueError(f"Generated id is not usable as a path segment: {value!r}")
    return value
