"""Testes da verificação de assinatura dos callbacks."""

from __future__ import annotations

import hashlib

import pytest

from api.connectors.wechat.signature import (
    check_request_signature,
    compute_signature,
    verify_request_signature,
    verify_signature,
)
from utils.errors import AuthenticationError


def _flip(char: str) -> str:
    return "0" if char != "0" else "1"


class TestComputeSignature:
    def test_matches_sha1_of_sorted_parts(self) -> None:
        expected = hashlib.sha1("".join(sorted(["tok", "1700000000", "abc"])).encode()).hexdigest()
        assert compute_signature("tok", "1700000000", "abc") == expected

    def test_order_of_arguments_is_irrelevant(self) -> None:
        assert compute_signature("a", "b", "c") == compute_signature("a", "c", "b")

    def test_none_counts_as_empty(self) -> None:
        assert compute_signature("tok", None, None) == compute_signature("tok", "", "")


class TestVerifySignature:
    def test_valid_signature(self) -> None:
        signature = compute_signature("tok", "1700000000", "nonce")
        assert verify_signature("tok", "1700000000", "nonce", signature) is True

    @pytest.mark.parametrize("position", [0, 10, 39])
    def test_single_character_flip_fails(self, position: int) -> None:
        signature = compute_signature("tok", "1700000000", "nonce")
        tampered = signature[:position] + _flip(signature[position]) + signature[position + 1 :]
        assert verify_signature("tok", "1700000000", "nonce", tampered) is False

    def test_uppercase_signature_does_not_match(self) -> None:
        signature = compute_signature("tok", "1700000000", "nonce")
        assert verify_signature("tok", "1700000000", "nonce", signature.upper()) is False

    def test_missing_signature_never_verifies(self) -> None:
        assert verify_signature("tok", "1700000000", "nonce", None) is False
        assert verify_signature("tok", "1700000000", "nonce", "") is False

    def test_wrong_token(self) -> None:
        signature = compute_signature("other", "1700000000", "nonce")
        assert verify_signature("tok", "1700000000", "nonce", signature) is False


class TestVerifyRequestSignature:
    def test_reports_missing_token(self) -> None:
        result = verify_request_signature("", "1", "n", "sig")
        assert result.valid is False
        assert result.error == "missing_token"

    def test_reports_missing_signature(self) -> None:
        result = verify_request_signature("tok", "1", "n", None)
        assert result.error == "missing_signature"

    def test_reports_invalid_signature(self) -> None:
        result = verify_request_signature("tok", "1", "n", "deadbeef")
        assert result.error == "invalid_signature"

    def test_check_raises_authentication_error(self) -> None:
        with pytest.raises(AuthenticationError, match="invalid_signature"):
            check_request_signature("tok", "1", "n", "deadbeef")

    def test_check_returns_valid_result(self) -> None:
        signature = compute_signature("tok", "1", "n")
        assert check_request_signature("tok", "1", "n", signature).valid is True
