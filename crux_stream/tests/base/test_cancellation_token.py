from __future__ import annotations

import pytest

from crux_stream.base.cancellation import CancellationToken, CancelledError
from crux_stream.base.errors import ErrorCode


def test_uncancelled_token_does_not_raise():
    CancellationToken().raise_if_cancelled()


def test_cancel_raises_with_reason():
    token = CancellationToken()
    token.cancel("client went away")
    with pytest.raises(CancelledError) as info:
        token.raise_if_cancelled("replicate")
    assert info.value.code is ErrorCode.CANCELLED
    assert info.value.provider == "replicate"
    assert info.value.reason == "client went away"


def test_cancel_cascades_to_children():
    parent = CancellationToken()
    child = parent.child()
    parent.cancel()
    assert child.cancelled


def test_child_of_cancelled_parent_starts_cancelled():
    parent = CancellationToken()
    parent.cancel("done")
    assert parent.child().reason == "done"


def test_second_cancel_keeps_first_reason():
    token = CancellationToken()
    token.cancel("first")
    token.cancel("second")
    assert token.reason == "first"
