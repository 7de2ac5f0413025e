import pytest

from clinic_agenda.session_state import AuthEvent, AuthSessionManager, SessionState


def test_initial_state_is_loading():
    manager = AuthSessionManager()
    assert manager.state == SessionState(user=None, loading=True, error=None)


def test_sign_in_settles_the_session():
    manager = AuthSessionManager()
    manager.start()
    state = manager.handle_event(AuthEvent.SIGNED_IN, {"id": "u1"})
    assert state.user == {"id": "u1"}
    assert state.loading is False


@pytest.mark.parametrize("event", [AuthEvent.TOKEN_REFRESHED, AuthEvent.USER_UPDATED, "SIGNED_IN"])
def test_events_carrying_a_user_keep_it(event):
    manager = AuthSessionManager()
    state = manager.handle_event(event, "user")
    assert state.user == "user"


def test_sign_out_and_missing_user_clear_the_session():
    manager = AuthSessionManager()
    manager.handle_event(AuthEvent.SIGNED_IN, "user")
    assert manager.handle_event(AuthEvent.SIGNED_OUT, "user").user is None

    manager.handle_event(AuthEvent.SIGNED_IN, "user")
    state = manager.handle_event(AuthEvent.USER_UPDATED)
    assert state.user is None
    assert state.loading is False


def test_failure_stops_loading_and_keeps_error():
    manager = AuthSessionManager()
    manager.start()
    error = RuntimeError("token store down")
    state = manager.fail(error)
    assert state.loading is False
    assert state.error is error


def test_listeners_are_notified_until_unsubscribed():
    manager = AuthSessionManager()
    seen = []
    unsubscribe = manager.subscribe(seen.append)

    manager.start()
    manager.handle_event(AuthEvent.SIGNED_IN, "user")
    unsubscribe()
    manager.handle_event(AuthEvent.SIGNED_OUT)

    assert [state.user for state in seen] == [None, "user"]
    unsubscribe()


def test_closed_manager_ignores_events_and_refuses_start():
    manager = AuthSessionManager()
    seen = []
    manager.subscribe(seen.append)
    manager.handle_event(AuthEvent.SIGNED_IN, "user")
    manager.close()

    state = manager.handle_event(AuthEvent.SIGNED_OUT)
    assert state.user == "user"
    assert len(seen) == 1
    with pytest.raises(RuntimeError):
        manager.start()


def test_closed_manager_ignores_failures():
    manager = AuthSessionManager()
    manager.start()
    manager.close()

    state = manager.fail(RuntimeError("late failure"))
    assert state.loading is True
    assert state.error is None
