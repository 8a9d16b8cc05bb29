import json

from workreport.members import MemberDirectory


def test_name_of_maps_identity(directory):
    assert directory.name_of("a@example.com") == "A"
    assert directory.name_of("stranger@example.com") == "stranger@example.com"
    assert directory.name_of("") == "-"
    assert directory.name_of(None) == "-"


def test_priority_of_unknown_is_last(directory):
    assert directory.priority_of("b@example.com") == 2
    assert directory.priority_of("stranger@example.com") == 999
    assert directory.priority_of(None) == 999


def test_priority_zero_is_kept(directory):
    # 0 is a real priority, not "missing"
    assert directory.priority_of("c@example.com") == 0
    assert directory.sort_key("C") < directory.sort_key("A")


def test_identity_of_reverse_lookup(directory):
    assert directory.identity_of("B") == "b@example.com"
    assert directory.identity_of("Nobody") == ""
    assert directory.identity_of("") == ""


def test_sort_key_orders_by_priority_then_name(directory):
    names = ["Zed", "B", "A", "bob", "Amy", "C"]
    assert sorted(names, key=directory.sort_key) == ["C", "A", "B", "Amy", "bob", "Zed"]


def test_load_from_json(tmp_path):
    path = tmp_path / "members.json"
    path.write_text(
        json.dumps({"x@example.com": {"name": "엑스", "priority": 5}}, ensure_ascii=False),
        encoding="utf-8",
    )

    directory = MemberDirectory.load(path)

    assert len(directory) == 1
    assert directory.name_of("x@example.com") == "엑스"
    assert directory.priority_of_name("엑스") == 5
