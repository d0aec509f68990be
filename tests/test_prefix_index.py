# tests/test_prefix_index.py
import threading

from app.prefix_index import PrefixIndex, PrefixIndexHolder


def _festival_index():
    index = PrefixIndex()
    index.insert("Diwali Bash", "1")
    index.insert("Diwali Party", "2")
    index.insert("Holi Splash", "3")
    return index


def test_prefix_lookup_examples():
    index = _festival_index()
    assert index.find_by_prefix("di") == {"1", "2"}
    assert index.find_by_prefix("diwali b") == {"1"}
    assert index.find_by_prefix("z") == set()


def test_lookup_is_case_insensitive():
    index = _festival_index()
    assert index.find_by_prefix("HOLI") == {"3"}
    assert index.find_by_prefix("Diwali PARTY") == {"2"}


def test_every_prefix_of_a_name_matches():
    index = _festival_index()
    name = "Holi Splash"
    for end in range(len(name) + 1):
        assert "3" in index.find_by_prefix(name[:end])


def test_empty_prefix_returns_everything():
    assert _festival_index().find_by_prefix("") == {"1", "2", "3"}


def test_prefix_longer_than_any_name():
    assert _festival_index().find_by_prefix("diwali bash 2025") == set()


def test_empty_index():
    assert PrefixIndex().find_by_prefix("") == set()
    assert PrefixIndex().find_by_prefix("ga") == set()


def test_insert_is_idempotent():
    index = PrefixIndex()
    index.insert("Garba Night", "7")
    index.insert("Garba Night", "7")
    assert index.find_by_prefix("garba") == {"7"}


def test_shared_name_collects_all_ids():
    index = PrefixIndex()
    index.insert("Garba Night", "7")
    index.insert("garba night", "8")
    index.insert("Garba", "9")
    assert index.find_by_prefix("garba") == {"7", "8", "9"}
    assert index.find_by_prefix("garba ") == {"7", "8"}


def test_empty_name_lands_on_root():
    index = PrefixIndex()
    index.insert("", "x")
    assert index.root.is_terminal
    assert index.root.listing_ids == {"x"}
    assert index.find_by_prefix("") == {"x"}
    assert index.find_by_prefix("a") == set()


def test_terminal_flags():
    index = _festival_index()
    node = index.root
    for ch in "diwali":
        node = node.children[ch]
    assert not node.is_terminal
    for ch in " bash":
        node = node.children[ch]
    assert node.is_terminal
    assert node.listing_ids == {"1"}


def test_from_entries_skips_incomplete_rows():
    index = PrefixIndex.from_entries([
        {"name": "Navratri Garba", "ids": ["a", "b", None, ""]},
        {"name": "", "ids": ["c"]},
        {"name": "Dandiya", "ids": []},
        {"ids": ["d"]},
    ])
    assert index.find_by_prefix("") == {"a", "b"}


def test_rebuild_replaces_previous_snapshot():
    holder = PrefixIndexHolder()
    assert holder.version == 0
    holder.rebuild([{"name": "Diwali Bash", "ids": ["1"]}])
    assert holder.lookup("di") == {"1"}
    old = holder.index

    assert holder.rebuild([{"name": "Holi Splash", "ids": ["3"]}]) == 2
    assert holder.lookup("di") == set()
    assert holder.lookup("") == {"3"}
    # readers holding the old snapshot keep a consistent view
    assert old.find_by_prefix("di") == {"1"}


def test_lookups_during_rebuilds_see_whole_snapshots():
    holder = PrefixIndexHolder()
    names_a = [{"name": f"event {i}", "ids": [f"a{i}"]} for i in range(200)]
    names_b = [{"name": f"event {i}", "ids": [f"b{i}"]} for i in range(200)]
    all_a = {f"a{i}" for i in range(200)}
    all_b = {f"b{i}" for i in range(200)}
    holder.rebuild(names_a)
    seen = []

    def reader():
        for _ in range(200):
            seen.append(holder.lookup("event"))

    t = threading.Thread(target=reader)
    t.start()
    for i in range(20):
        holder.rebuild(names_b if i % 2 == 0 else names_a)
    t.join()
    assert all(result in (all_a, all_b) for result in seen)
