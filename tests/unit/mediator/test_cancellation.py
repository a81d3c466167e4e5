import pytest

from conduit.mediator import CancellationRequestedError, CancellationToken, CancellationTokenSource
from conduit.mediator.errors import MediatorErrorCode


def test_none_token_is_never_cancelled():
    token = CancellationToken.none()
    assert token is CancellationToken.none()
    assert not token.can_be_cancelled
    assert not token.is_cancellation_requested
    token.raise_if_cancellation_requested()


def test_source_cancels_its_token():
    source = CancellationTokenSource()
    token = source.token
    assert token.can_be_cancelled
    assert not token.is_cancellation_requested

    source.cancel("user aborted")

    assert token.is_cancellation_requested
    assert source.is_cancellation_requested
    with pytest.raises(CancellationRequestedError) as exc:
        token.raise_if_cancellation_requested()
    assert exc.value.reason == "user aborted"
    assert exc.value.code == MediatorErrorCode.CANCELLATION_REQUESTED


def test_first_reason_wins():
    source = CancellationTokenSource()
    source.cancel("first")
    source.cancel("second")
    assert source.reason == "first"


def test_token_is_stable_per_source():
    source = CancellationTokenSource()
    assert source.token is source.token
    assert "cancelled=False" in repr(source.token)
