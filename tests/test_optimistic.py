import pytest

from services.errors import RemoteUnavailable
from services.optimistic import OptimisticUpdate


def _recorder():
    events = []
    return events, (lambda name: (lambda *args: events.append(name)))


def test_successful_attempt_keeps_local_change():
    events, mark = _recorder()
    update = OptimisticUpdate(
        apply=mark("apply"),
        attempt=lambda: events.append("attempt") or "ok",
        revert=mark("revert"),
    )
    assert update.run() == "ok"
    assert events == ["apply", "attempt"]
    assert update.state == "applied"


def test_failed_attempt_reverts_and_reraises():
    events, mark = _recorder()
    reverted_with = []

    def attempt():
        raise RemoteUnavailable("offline")

    update = OptimisticUpdate(
        apply=mark("apply"),
        attempt=attempt,
        revert=mark("revert"),
        on_reverted=reverted_with.append,
    )
    with pytest.raises(RemoteUnavailable):
        update.run()
    assert events == ["apply", "revert"]
    assert update.state == "reverted"
    assert [exc.message for exc in reverted_with] == ["offline"]


def test_unexpected_errors_are_not_rolled_back():
    events, mark = _recorder()

    def attempt():
        raise RuntimeError("bug")

    update = OptimisticUpdate(apply=mark("apply"), attempt=attempt, revert=mark("revert"))
    with pytest.raises(RuntimeError):
        update.run()
    assert events == ["apply"]
    assert update.state == "pending"
