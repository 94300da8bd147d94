"""Unit tests for PathStore change notifications."""

import pytest

from pathstore import ContainerNotFoundError, InvalidArgumentError, NoSignalError


@pytest.mark.unit
@pytest.mark.signal
def test_listener_receives_old_and_new_value(user_store, recorder):
    """Setting latitude from 1 to 10 calls the listener with (1, 10)"""
    listener = recorder()
    user_store.on_change("USER.location.latitude", listener)

    user_store.set("USER.location.latitude", 10)

    assert listener.calls == [(1, 10)]
    assert user_store.get("USER.location.latitude") == 10


@pytest.mark.unit
@pytest.mark.signal
def test_equal_value_does_not_notify(user_store, recorder):
    listener = recorder()
    user_store.on_change("USER.location", listener)

    user_store.set("USER.location.latitude", 1)
    user_store.set("USER.location", {"latitude": 1, "longitude": 2})
    user_store.set("USER.location", {"longitude": 2, "latitude": 1}, overwrite=True)

    assert listener.calls == []


@pytest.mark.unit
@pytest.mark.signal
def test_listener_fires_once_per_changing_set(user_store, recorder):
    listener = recorder()
    user_store.on_change("USER.location.latitude", listener)

    user_store.set("USER.location.latitude", 2)
    user_store.set("USER.location.latitude", 2)
    user_store.set("USER.location.latitude", 3)

    assert listener.calls == [(1, 2), (2, 3)]


@pytest.mark.unit
@pytest.mark.signal
def test_parent_listener_fires_for_descendant_change(user_store, recorder):
    root, parent = recorder(), recorder()
    user_store.on_change("USER", root)
    user_store.on_change("USER.location", parent)

    user_store.set("USER.location.latitude", 10)

    assert parent.calls == [
        ({"latitude": 1, "longitude": 2}, {"latitude": 10, "longitude": 2})
    ]
    assert root.calls == [
        (
            {"location": {"latitude": 1, "longitude": 2}},
            {"location": {"latitude": 10, "longitude": 2}},
        )
    ]


@pytest.mark.unit
@pytest.mark.signal
def test_sibling_listener_does_not_fire(user_store, recorder):
    sibling = recorder()
    user_store.on_change("USER.location.longitude", sibling)

    user_store.set("USER.location.latitude", 10)

    assert sibling.calls == []


@pytest.mark.unit
@pytest.mark.signal
def test_descendant_listener_not_triggered_by_parent_set(user_store, recorder):
    """Only prefixes of the set path are checked"""
    child = recorder()
    user_store.on_change("USER.location.latitude", child)

    user_store.set("USER.location", {"latitude": 50})

    assert user_store.get("USER.location.latitude") == 50
    assert child.calls == []


@pytest.mark.unit
@pytest.mark.signal
def test_dispatch_runs_shallow_to_deep(user_store, recorder):
    """Container listeners fire before deeper ones within a single set"""
    order = []
    user_store.on_change("USER.location.latitude", recorder("leaf", order))
    user_store.on_change("USER", recorder("root", order))
    user_store.on_change("USER.location", recorder("middle", order))

    user_store.set("USER.location.latitude", 10)

    assert order == ["root", "middle", "leaf"]


@pytest.mark.unit
@pytest.mark.signal
def test_listeners_see_fully_updated_tree(user_store):
    seen = []
    user_store.on_change(
        "USER", lambda old, new: seen.append(user_store.get("USER.location.latitude"))
    )

    user_store.set("USER.location.latitude", 10)

    assert seen == [10]


@pytest.mark.unit
@pytest.mark.signal
def test_old_value_is_snapshot_not_live(user_store, recorder):
    """The old value handed to a parent listener is unaffected by the write"""
    parent = recorder()
    user_store.on_change("USER.location", parent)

    user_store.set("USER.location.latitude", 10)

    old, new = parent.calls[0]
    assert old is not new
    assert old["latitude"] == 1
    assert new is user_store.get("USER.location")


@pytest.mark.unit
@pytest.mark.signal
@pytest.mark.edge_case
def test_newly_created_path_reports_none_as_old(store, recorder):
    listener = recorder()
    store.init_container("C", {})
    store.on_change("C.a.b", listener)

    store.set("C.a.b", 1)

    assert listener.calls == [(None, 1)]


@pytest.mark.unit
@pytest.mark.signal
@pytest.mark.edge_case
def test_setting_none_on_missing_path_is_not_a_change(store, recorder):
    listener = recorder()
    store.init_container("C", {})
    store.on_change("C.a", listener)

    store.set("C.a", None)

    assert listener.calls == []


@pytest.mark.unit
@pytest.mark.signal
def test_underscore_keys_do_not_share_a_signal(store, recorder):
    """'C.a_b' and 'C.a.b' are distinct signals"""
    flat, nested = recorder(), recorder()
    store.init_container("C", {})
    store.on_change("C.a_b", flat)
    store.on_change("C.a.b", nested)

    store.set("C.a.b", 1)

    assert flat.calls == []
    assert nested.calls == [(None, 1)]


@pytest.mark.unit
@pytest.mark.signal
def test_on_change_requires_callable(user_store):
    with pytest.raises(InvalidArgumentError):
        user_store.on_change("USER.location", "not callable")
    assert user_store.signals("USER") == {}


@pytest.mark.unit
@pytest.mark.signal
def test_on_change_requires_container(store):
    with pytest.raises(ContainerNotFoundError):
        store.on_change("GHOST.a", lambda old, new: None)


@pytest.mark.unit
@pytest.mark.signal
def test_on_change_creates_signal_lazily(user_store):
    assert user_store.signals("USER") == {}

    user_store.on_change("USER.location", lambda old, new: None)
    user_store.on_change("USER.location", lambda old, new: None)

    signals = user_store.signals("USER")
    assert list(signals) == ["USER.location"]
    assert len(signals["USER.location"]) == 2


@pytest.mark.unit
@pytest.mark.signal
def test_remove_change_callback_stops_notifications(user_store, recorder):
    listener = recorder()
    user_store.on_change("USER.location.latitude", listener)

    assert user_store.remove_change_callback("USER.location.latitude", listener)
    user_store.set("USER.location.latitude", 10)

    assert listener.calls == []


@pytest.mark.unit
@pytest.mark.signal
def test_remove_change_callback_removes_one_registration(user_store, recorder):
    listener = recorder()
    user_store.on_change("USER.location.latitude", listener)
    user_store.on_change("USER.location.latitude", listener)

    user_store.remove_change_callback("USER.location.latitude", listener)
    user_store.set("USER.location.latitude", 10)

    assert listener.calls == [(1, 10)]


@pytest.mark.unit
@pytest.mark.signal
def test_remove_unregistered_callback_returns_false(user_store):
    user_store.on_change("USER.location", lambda old, new: None)

    assert not user_store.remove_change_callback("USER.location", lambda old, new: None)


@pytest.mark.unit
@pytest.mark.signal
def test_remove_without_signal_raises_no_signal_naming_path(user_store):
    with pytest.raises(NoSignalError) as excinfo:
        user_store.remove_change_callback("USER.location.altitude", lambda o, n: None)

    assert excinfo.value.path == "USER.location.altitude"
    assert "USER.location.altitude" in str(excinfo.value)


@pytest.mark.unit
@pytest.mark.signal
def test_remove_validates_callback_and_container(store):
    store.init_container("C", {})

    with pytest.raises(InvalidArgumentError):
        store.remove_change_callback("C.a", None)
    with pytest.raises(ContainerNotFoundError):
        store.remove_change_callback("GHOST.a", lambda old, new: None)


@pytest.mark.unit
@pytest.mark.signal
def test_listener_exception_propagates_from_set(user_store):
    def failing(old, new):
        raise RuntimeError("listener failed")

    user_store.on_change("USER.location.latitude", failing)

    with pytest.raises(RuntimeError, match="listener failed"):
        user_store.set("USER.location.latitude", 10)
    # The write itself was already applied
    assert user_store.get("USER.location.latitude") == 10


@pytest.mark.unit
@pytest.mark.signal
@pytest.mark.edge_case
def test_bool_replacing_equal_number_notifies(store, recorder):
    """1 -> True is reported even though 1 == True"""
    listener = recorder()
    store.init_container("C", {"flag": 1})
    store.on_change("C.flag", listener)

    store.set("C.flag", True)
    store.set("C.flag", True)

    assert listener.calls == [(1, True)]
