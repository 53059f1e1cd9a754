import pytest

from gridnet.events.bus import EventBus
from gridnet.events.grid_events import SortChangedEvent
from gridnet.infrastructure.row_store import InMemoryRowStore


@pytest.fixture
def store():
    return InMemoryRowStore([{"name": "a"}, {"name": "b"}, {"name": "c"}])


class TestFetchedRows:
    def test_rows_get_sequential_keys(self, store):
        assert [row["rowKey"] for row in store.rows] == [0, 1, 2]

    def test_incoming_row_keys_are_replaced(self):
        store = InMemoryRowStore([{"name": "a", "rowKey": 99}])
        assert store.rows == [{"name": "a", "rowKey": 0}]

    def test_fetch_clears_modifications(self, store):
        store.set_value(0, "name", "A")
        store.remove_row(1)
        store.apply_fetched_rows([{"name": "x"}])

        assert store.get_modified_row_sets(only_checked=False).is_empty
        assert store.rows == [{"name": "x", "rowKey": 0}]

    def test_rows_are_copies(self, store):
        store.rows[0]["name"] = "mutated"
        assert store.rows[0]["name"] == "a"


class TestModifiedRowSets:
    def test_unmodified_store_is_empty(self, store):
        assert store.get_modified_row_sets(only_checked=False).is_empty

    def test_sets_are_disjoint(self, store):
        store.set_value(0, "name", "A")
        new_key = store.append_row({"name": "d"})
        store.remove_row(2)

        sets = store.get_modified_row_sets(only_checked=False)

        assert sets.created == [{"name": "d", "rowKey": new_key}]
        assert sets.updated == [{"name": "A", "rowKey": 0}]
        assert sets.deleted == [{"name": "c", "rowKey": 2}]

    def test_edit_back_to_original_is_not_an_update(self, store):
        store.set_value(0, "name", "A")
        store.set_value(0, "name", "a")
        assert store.get_modified_row_sets(only_checked=False).updated == []

    def test_removing_a_created_row_leaves_no_trace(self, store):
        key = store.append_row({"name": "tmp"})
        store.remove_row(key)
        assert store.get_modified_row_sets(only_checked=False).is_empty

    def test_only_checked(self, store):
        store.set_value(0, "name", "A")
        store.set_value(1, "name", "B")
        store.check(1)
        store.remove_row(1)
        store.remove_row(2)

        sets = store.get_modified_row_sets(only_checked=True)

        assert sets.updated == []
        assert sets.deleted == [{"name": "b", "rowKey": 1}]

    def test_by_list_key(self, store):
        store.append_row({"name": "d"}, checked=True)
        by_key = store.get_modified_row_sets(only_checked=True).by_list_key()
        assert set(by_key) == {"createList", "updateList", "deleteList"}
        assert len(by_key["createList"]) == 1


class TestEditing:
    def test_row_key_cannot_be_edited(self, store):
        with pytest.raises(ValueError):
            store.set_value(0, "rowKey", 5)

    def test_unknown_row(self, store):
        with pytest.raises(KeyError):
            store.set_value(42, "name", "x")
        with pytest.raises(KeyError):
            store.check(42)

    def test_get_all_rows(self, store):
        store.check(2)
        assert [row["name"] for row in store.get_all_rows(only_checked=False)] == ["a", "b", "c"]
        assert [row["name"] for row in store.get_all_rows(only_checked=True)] == ["c"]

    def test_check_all_and_uncheck(self, store):
        store.check_all()
        assert len(store.get_all_rows(only_checked=True)) == 3
        store.check(0, checked=False)
        assert len(store.get_all_rows(only_checked=True)) == 2
        store.check_all(False)
        assert store.get_all_rows(only_checked=True) == []


class TestFormAndView:
    def test_form_snapshot_round_trip(self):
        store = InMemoryRowStore(form_data={"query": "apple"})
        snapshot = store.capture_form_snapshot()
        snapshot["query"] = "changed"

        assert store.capture_form_snapshot() == {"query": "apple"}

        store.apply_form_snapshot({"category": "fruit"})
        assert store.capture_form_snapshot() == {"query": "apple", "category": "fruit"}

    def test_reset_transient_state(self, store):
        store.focused_key = 1
        store.reset_transient_state()
        assert store.focused_key is None
        assert store.reset_count == 1


class TestSort:
    def test_local_sort(self, store):
        store.sort("name", ascending=False)
        assert [row["name"] for row in store.rows] == ["c", "b", "a"]
        assert (store.sort_column, store.sort_ascending) == ("name", False)

    def test_none_values_sort_last(self):
        store = InMemoryRowStore([{"n": None}, {"n": 2}, {"n": 1}])
        store.sort("n")
        assert [row["n"] for row in store.rows] == [1, 2, None]

    def test_server_sort_leaves_rows_alone(self, store):
        store.sort("name", ascending=False, require_fetch=True)
        assert [row["name"] for row in store.rows] == ["a", "b", "c"]

    def test_sort_publishes_event(self):
        bus = EventBus()
        events = []
        bus.subscribe(SortChangedEvent, events.append)
        store = InMemoryRowStore([{"name": "a"}], event_bus=bus)

        store.sort("name", ascending=True, require_fetch=True)

        assert len(events) == 1
        assert events[0].column_name == "name"
        assert events[0].is_require_fetch is True
