"""
Tests for the session gate decision function.
"""

from unittest.mock import MagicMock

from app.auth.dependencies import (
    INVALID_TOKEN_DETAIL,
    NO_TOKEN_DETAIL,
    Authorized,
    Rejected,
    authorize,
)
from app.auth.jwt import TokenCodec
from app.core.exceptions import MalformedToken


def test_no_token_rejected_without_calling_codec():
    codec = MagicMock(spec=TokenCodec)
    for token in (None, ""):
        result = authorize(token, codec)
        assert result == Rejected(401, NO_TOKEN_DETAIL)
    codec.verify.assert_not_called()


def test_valid_token_authorized(codec):
    result = authorize(codec.sign(5, "Alice"), codec)
    assert isinstance(result, Authorized)
    assert result.identity.user_id == 5
    assert result.identity.name == "Alice"


def test_expired_token_rejected(codec, clock):
    token = codec.sign(5, "Alice")
    clock.advance(hours=2)
    assert authorize(token, codec) == Rejected(403, INVALID_TOKEN_DETAIL)


def test_foreign_token_rejected(codec, clock):
    token = TokenCodec("another-secret", clock=clock).sign(5, "Alice")
    assert authorize(token, codec) == Rejected(403, INVALID_TOKEN_DETAIL)


def test_failure_modes_collapse_to_one_message(codec, clock):
    expired = codec.sign(1, "A")
    clock.advance(hours=2)
    forged = TokenCodec("x", clock=clock).sign(1, "A")
    results = {authorize(t, codec) for t in (expired, forged, "garbage")}
    assert results == {Rejected(403, INVALID_TOKEN_DETAIL)}


def test_gate_uses_codec_verdict():
    codec = MagicMock(spec=TokenCodec)
    codec.verify.side_effect = MalformedToken()
    assert authorize("anything", codec) == Rejected(403, INVALID_TOKEN_DETAIL)
    codec.verify.assert_called_once_with("anything")
