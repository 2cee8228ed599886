from types import SimpleNamespace

from academy.services.curriculum import partition_curriculum


def item(id, type, is_public=False):
    return SimpleNamespace(id=id, type=type, is_public=is_public)


def ids(bucket):
    return [i.id for i in bucket]


def test_partition_keeps_relative_order():
    items = [item(1, "VIDEO"), item(2, "LECTURE"), item(3, "VIDEO"), item(4, "ASSIGNMENT"),
             item(5, "READING"), item(6, "LECTURE")]
    out = partition_curriculum(items)
    assert ids(out["lectures"]) == [2, 6]
    assert ids(out["videos"]) == [1, 3]
    assert ids(out["readings"]) == [5]
    assert ids(out["assignments"]) == [4]


def test_unknown_types_are_dropped():
    out = partition_curriculum([item(1, "QUIZ"), item(2, None), item(3, "lecture")])
    assert ids(out["lectures"]) == [3]
    assert sum(len(v) for v in out.values()) == 1


def test_public_only_filter():
    items = [item(1, "LECTURE", True), item(2, "LECTURE"), item(3, "READING", True)]
    out = partition_curriculum(items, public_only=True)
    assert ids(out["lectures"]) == [1]
    assert ids(out["readings"]) == [3]


def test_works_on_camel_case_dicts():
    rows = [{"id": 1, "type": "READING", "isPublic": True}, {"id": 2, "type": "READING", "isPublic": False}]
    out = partition_curriculum(rows, public_only=True)
    assert [r["id"] for r in out["readings"]] == [1]


def test_empty_input_has_all_buckets():
    assert partition_curriculum([]) == {"lectures": [], "readings": [], "videos": [], "assignments": []}
