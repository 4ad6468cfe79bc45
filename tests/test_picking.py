"""
Tests for the access road picking state machine
"""

from siteplan.planning import CollectingPoints, Idle, cancel, handle_click


def test_two_clicks_produce_access_path():
    state, path = handle_click(Idle(), (50, -20))
    assert state == CollectingPoints(((50.0, -20.0),))
    assert path is None

    state, path = handle_click(state, (50, 10))
    assert state == Idle()
    assert list(path.coords) == [(50.0, -20.0), (50.0, 10.0)]


def test_click_after_completion_starts_again():
    state, _ = handle_click(Idle(), (0, 0))
    state, path = handle_click(state, (10, 0))
    assert path is not None

    state, path = handle_click(state, (5, 5))
    assert isinstance(state, CollectingPoints)
    assert len(state.points) == 1
    assert path is None


def test_repeated_point_is_ignored():
    state, _ = handle_click(Idle(), (1, 1))
    state, path = handle_click(state, (1, 1))
    assert path is None
    assert state == CollectingPoints(((1.0, 1.0),))


def test_cancel_returns_to_idle():
    state, _ = handle_click(Idle(), (3, 4))
    assert cancel(state) == Idle()
    assert cancel(Idle()) == Idle()


def test_states_are_not_shared():
    a, _ = handle_click(Idle(), (1, 2))
    b, _ = handle_click(Idle(), (3, 4))
    assert a.points != b.points
