import copy
from typing import Any, Dict, List, MutableMapping, cast

from core.sentinels import MISSING


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges source into a COPY of target.

    Logic:
    - If a key exists in source but not target -> Add it.
    - If a key exists in both and both are dicts -> Recurse.
    - If a key exists in both and is NOT a dict -> Overwrite with source value.
    - NOTE: Lists are NOT merged; they are treated as atomic values and overwritten.

    Returns a NEW dictionary (pure function), so a bridge configuration is
    never shared with the partial update it was merged from.
    """
    result = copy.deepcopy(target)

    for key, value in source.items():
        if (
            key in result
            and isinstance(result.get(key), dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(cast(Dict[str, Any], result[key]), cast(Dict[str, Any], value))
        else:
            result[key] = copy.deepcopy(value)

    return result


def split_path(path: str) -> List[str]:
    """Split a dot-path into segments. An empty path has no segments."""
    if not path:
        return []
    return path.split(".")


def get_nested_value(obj: Any, path: str) -> Any:
    """
    Resolve a dot-path ("a.b.c") on nested dicts.

    Numeric segments index into lists ("points.0.x"). Any intermediate that is
    not a container short-circuits to MISSING, so an absent path is
    distinguishable from an explicit None. An empty path returns obj itself.
    Never raises.
    """
    current = obj
    for key in split_path(path):
        if isinstance(current, dict):
            current = current.get(key, MISSING)
        elif isinstance(current, (list, tuple)) and key.isdigit():
            index = int(key)
            current = current[index] if index < len(current) else MISSING
        else:
            return MISSING
        if current is MISSING:
            return MISSING
    return current


def set_nested_value(obj: MutableMapping[str, Any], path: str, value: Any) -> None:
    """
    Assign value at a dot-path, creating intermediate dicts as needed.

    Intermediates that exist but are not dicts are replaced by empty dicts.
    A non-dict obj or an empty path is a no-op. Never raises.
    """
    keys = split_path(path)
    if not keys or not isinstance(obj, MutableMapping):
        return

    current = obj
    for key in keys[:-1]:
        if not isinstance(current.get(key), MutableMapping):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def delete_nested_value(obj: MutableMapping[str, Any], path: str) -> None:
    """Remove the key at a dot-path if it exists. Never raises."""
    keys = split_path(path)
    if not keys:
        return

    current: Any = obj
    for key in keys[:-1]:
        if not isinstance(current, MutableMapping):
            return
        current = current.get(key)
    if isinstance(current, MutableMapping):
        current.pop(keys[-1], None)
