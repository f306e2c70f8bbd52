"""Unit tests for JWT claim helpers."""

from typing import Any, Callable

import pytest

from bodima.utils.jwt import decode_jwt_payload, extract_subject, is_token_expired

MakeToken = Callable[[dict[str, Any]], str]


class TestDecode:
    def test_decodes_payload(self, make_token: MakeToken) -> None:
        token = make_token({"sub": "USER-001", "exp": 1_800_000_000})

        assert decode_jwt_payload(token) == {"sub": "USER-001", "exp": 1_800_000_000}
        assert extract_subject(token) == "USER-001"

    @pytest.mark.parametrize("token", [None, "", "abc", "a.b", "a.!!!.c"])
    def test_malformed_tokens(self, token: str | None) -> None:
        assert decode_jwt_payload(token) is None
        assert extract_subject(token) is None


class TestExpiry:
    """Tests for is_token_expired()."""

    def test_not_expired(self, make_token: MakeToken) -> None:
        assert is_token_expired(make_token({"exp": 2000}), now=1000) is False

    def test_expired(self, make_token: MakeToken) -> None:
        assert is_token_expired(make_token({"exp": 2000}), now=2001) is True

    def test_missing_exp_counts_as_expired(self, make_token: MakeToken) -> None:
        assert is_token_expired(make_token({"sub": "USER-001"})) is True

    def test_unreadable_counts_as_expired(self) -> None:
        assert is_token_expired("not-a-jwt") is True
