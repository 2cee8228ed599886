# academy/services/curriculum.py
from typing import Dict, Iterable, List, TypeVar

T = TypeVar("T")

BUCKETS = {
    "LECTURE": "lectures",
    "READING": "readings",
    "VIDEO": "videos",
    "ASSIGNMENT": "assignments",
}


def _get(item, name: str, camel: str):
    if isinstance(item, dict):
        return item.get(camel, item.get(name))
    return getattr(item, name, None)


def partition_curriculum(items: Iterable[T], public_only: bool = False) -> Dict[str, List[T]]:
    """Groups items by `type` into the four buckets, keeping input order.

    Items with any other type are dropped. With `public_only`, items not
    flagged public are dropped too. Works on ORM rows, schemas and camelCase dicts.
    """
    out: Dict[str, List[T]] = {key: [] for key in BUCKETS.values()}
    for item in items:
        if public_only and not _get(item, "is_public", "isPublic"):
            continue
        kind = str(_get(item, "type", "type") or "").upper()
        bucket = BUCKETS.get(kind)
        if bucket is not None:
            out[bucket].append(item)
    return out
