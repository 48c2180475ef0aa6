"""Tests for the after-fork hook registry."""

import pytest

pytestmark = pytest.mark.fast

from reloadwatch.watcher.fork import ForkTracker


@pytest.fixture
def isolated_hooks(monkeypatch):
    """Run each test against an empty hook registry."""
    monkeypatch.setattr(ForkTracker, "_hooks", {})
    yield ForkTracker


class TestForkTracker:
    """Tests for ForkTracker."""

    def test_registered_hook_runs(self, isolated_hooks):
        calls = []
        isolated_hooks.after_fork(lambda: calls.append("a"))

        isolated_hooks.run_hooks()

        assert calls == ["a"]

    def test_unregistered_hook_does_not_run(self, isolated_hooks):
        calls = []
        token = isolated_hooks.after_fork(lambda: calls.append("a"))
        isolated_hooks.unregister(token)

        isolated_hooks.run_hooks()

        assert calls == []
        assert isolated_hooks.registered() == 0

    def test_unregister_twice_is_harmless(self, isolated_hooks):
        token = isolated_hooks.after_fork(lambda: None)
        isolated_hooks.unregister(token)
        isolated_hooks.unregister(token)

    def test_tokens_are_unique(self, isolated_hooks):
        first = isolated_hooks.after_fork(lambda: None)
        second = isolated_hooks.after_fork(lambda: None)
        assert first != second

    def test_failing_hook_does_not_stop_others(self, isolated_hooks):
        calls = []

        def broken():
            raise RuntimeError("boom")

        isolated_hooks.after_fork(broken)
        isolated_hooks.after_fork(lambda: calls.append("ok"))

        isolated_hooks.run_hooks()

        assert calls == ["ok"]
