from typing import Any

class MissingType:
    """
    Type for the MISSING sentinel, representing a path that did not resolve.

    Backend payloads are JSON, so an explicit ``null`` arrives as None. A field
    that is absent from the payload (or sits behind a non-object parent) is
    reported as MISSING instead, so callers can tell "skip this field" apart
    from "the backend sent null".
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(MissingType, cls).__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MissingType)

    def __hash__(self) -> int:
        return hash("MISSING")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo: Any):
        return self

    def __reduce__(self):
        return (MissingType, ())


MISSING = MissingType()


def or_none(value: Any) -> Any:
    """Collapse MISSING into None for JSON-bound output."""
    return None if value is MISSING else value
