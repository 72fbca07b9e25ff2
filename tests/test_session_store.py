"""
Tests for session values and the session store.
"""

import json

import pytest
from pydantic import ValidationError

from mockroom.core.session_store import SessionStore
from mockroom.exceptions import SessionInvariantError
from mockroom.models.evaluation import Evaluation
from mockroom.models.interview import InterviewResponse, InterviewSession, SessionStatus
from mockroom.models.question import get_fallback_questions


def make_session(**kwargs) -> InterviewSession:
    return InterviewSession(user_id="user-1", questions=tuple(get_fallback_questions()[:2]), **kwargs)


def make_evaluation() -> Evaluation:
    return Evaluation(
        overall=82,
        communication=80,
        technical=70,
        body_language=75,
        confidence=68,
        presentation=90,
        feedback="Solid.",
    )


# ============================================================================
# SESSION VALUES
# ============================================================================

def test_with_response_returns_new_value():
    session = make_session()
    updated = session.with_response(InterviewResponse(question_id="1", duration=40))

    assert session.responses == ()
    assert len(updated.responses) == 1
    assert updated.answered_question_ids == {"1"}


def test_with_response_rejects_duplicates_and_unknown_questions():
    session = make_session().with_response(InterviewResponse(question_id="1", duration=40))

    with pytest.raises(SessionInvariantError):
        session.with_response(InterviewResponse(question_id="1", duration=40))
    with pytest.raises(SessionInvariantError):
        session.with_response(InterviewResponse(question_id="99", duration=40))


def test_with_response_rejected_after_completion():
    session = make_session().completed_with(make_evaluation())

    with pytest.raises(SessionInvariantError):
        session.with_response(InterviewResponse(question_id="1", duration=40))


def test_completed_with_sets_status_evaluation_and_end_time():
    session = make_session()
    completed = session.completed_with(make_evaluation())

    assert completed.status == SessionStatus.COMPLETED
    assert completed.evaluation.overall == 82
    assert completed.end_time >= completed.start_time
    assert session.status == SessionStatus.IN_PROGRESS

    with pytest.raises(SessionInvariantError):
        completed.completed_with(make_evaluation())


def test_completed_status_requires_evaluation_and_end_time():
    with pytest.raises(ValidationError):
        make_session(status=SessionStatus.COMPLETED)

    completed = make_session().completed_with(make_evaluation())
    with pytest.raises(ValidationError):
        make_session(evaluation=completed.evaluation, end_time=completed.end_time)


def test_status_serializes_as_inprogress():
    assert make_session().model_dump(mode="json")["status"] == "inprogress"


def test_get_question_out_of_range():
    session = make_session()
    assert session.get_question(1).id == "2"
    assert session.get_question(2) is None
    assert session.get_question(-1) is None


# ============================================================================
# STORE
# ============================================================================

def test_create_and_replace():
    store = SessionStore()
    session = store.create_session(make_session())

    with pytest.raises(ValueError):
        store.create_session(session)

    updated = session.with_response(InterviewResponse(question_id="1", duration=40))
    store.replace_session(updated)
    assert store.get_session(session.id) == updated

    with pytest.raises(KeyError):
        store.replace_session(make_session())


def test_active_session_and_listing():
    store = SessionStore()
    first = store.create_session(make_session())
    second = store.create_session(InterviewSession(user_id="user-2"))
    store.set_active_session(second)

    assert store.active_session == second
    assert store.list_sessions() == [first, second]
    assert store.list_sessions(user_id="user-1") == [first]


def test_subscribers_see_every_write():
    store = SessionStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    session = store.create_session(make_session())
    store.set_active_session(session)
    unsubscribe()
    store.replace_session(session)

    assert seen == [session, session]


def test_failing_subscriber_does_not_block_writes():
    store = SessionStore()

    def broken(session):
        raise RuntimeError("view crashed")

    store.subscribe(broken)
    session = store.create_session(make_session())
    assert store.get_session(session.id) == session


def test_snapshot_round_trip(tmp_path):
    path = tmp_path / "sessions.json"
    store = SessionStore(path)
    session = store.create_session(make_session())
    store.set_active_session(session)
    completed = session.with_response(
        InterviewResponse(question_id="1", response="notes", duration=55)
    ).completed_with(make_evaluation())
    store.replace_session(completed)

    restored = SessionStore(path)

    assert restored.load() == 1
    assert restored.get_session(session.id) == completed
    assert restored.active_session == completed


def test_load_without_snapshot(tmp_path):
    assert SessionStore().load() == 0
    assert SessionStore(tmp_path / "missing.json").load() == 0


def test_load_corrupt_snapshot(tmp_path):
    path = tmp_path / "sessions.json"
    path.write_text("{not json", encoding="utf-8")

    store = SessionStore(path)

    assert store.load() == 0
    assert store.list_sessions() == []


def test_load_rejects_inconsistent_snapshot(tmp_path):
    path = tmp_path / "sessions.json"
    session = make_session().model_dump(mode="json")
    session["status"] = "completed"
    path.write_text(json.dumps({"active_session_id": None, "sessions": [session]}), encoding="utf-8")

    store = SessionStore(path)

    assert store.load() == 0
    assert store.list_sessions() == []
