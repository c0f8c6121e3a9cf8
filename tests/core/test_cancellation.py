"""Tests for CancellationToken."""

from __future__ import annotations

import threading

from mcpkit.core.cancellation import CancellationToken


class TestCancellationToken:
    def test_starts_uncancelled(self) -> None:
        token = CancellationToken()
        assert not token.cancelled
        assert token.reason == ""
        assert token.wait(0) is False

    def test_cancel_keeps_first_reason(self) -> None:
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        assert token.cancelled
        assert token.reason == "first"

    def test_wait_wakes_on_cancel(self) -> None:
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()
        try:
            assert token.wait(5) is True
        finally:
            timer.cancel()

    def test_repr(self) -> None:
        assert repr(CancellationToken()) == "CancellationToken(cancelled=False)"
