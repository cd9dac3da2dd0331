"""Tests for Saweria signature validation (constant-time hex HMAC)."""

from __future__ import annotations

import hashlib
import hmac

from donations.app.validators import (
    compute_saweria_signature,
    find_signature,
    validate_saweria_signature,
)


class TestComputeSignature:
    def test_matches_hmac_sha256_hex(self):
        body = b'{"id": "abc", "amount_raw": 5000}'
        expected = hmac.new(b"secret", body, hashlib.sha256).hexdigest()
        assert compute_saweria_signature(body, "secret") == expected

    def test_different_secrets_differ(self):
        body = b"{}"
        assert compute_saweria_signature(body, "a") != compute_saweria_signature(body, "b")


class TestValidateSignature:
    """HMAC-SHA256 over the raw body, hex encoded."""

    SECRET = "saweria-secret"

    def _sign(self, body: bytes) -> str:
        return hmac.new(self.SECRET.encode(), body, hashlib.sha256).hexdigest()

    def test_valid_signature(self):
        body = b'{"id": "abc"}'
        assert validate_saweria_signature(body, self._sign(body), self.SECRET) is True

    def test_uppercase_hex_accepted(self):
        body = b'{"id": "abc"}'
        assert validate_saweria_signature(body, self._sign(body).upper(), self.SECRET) is True

    def test_surrounding_whitespace_ignored(self):
        body = b'{"id": "abc"}'
        assert validate_saweria_signature(body, f"  {self._sign(body)} ", self.SECRET) is True

    def test_invalid_signature(self):
        assert validate_saweria_signature(b'{"id": "abc"}', "deadbeef", self.SECRET) is False

    def test_tampered_body(self):
        sig = self._sign(b'{"amount": 5000}')
        assert validate_saweria_signature(b'{"amount": 500000}', sig, self.SECRET) is False

    def test_wrong_secret(self):
        body = b'{"id": "abc"}'
        assert validate_saweria_signature(body, self._sign(body), "other-secret") is False

    def test_missing_signature(self):
        assert validate_saweria_signature(b"body", None, self.SECRET) is False
        assert validate_saweria_signature(b"body", "", self.SECRET) is False

    def test_non_ascii_signature_rejected(self):
        assert validate_saweria_signature(b"body", "ñ" * 64, self.SECRET) is False


class TestFindSignature:
    NAMES = ["x-saweria-sig", "x-saweria-signature", "x-signature"]

    def test_first_candidate_wins(self):
        headers = {"x-signature": "third", "x-saweria-sig": "first"}
        assert find_signature(headers, self.NAMES) == "first"

    def test_falls_through_empty_values(self):
        headers = {"x-saweria-sig": "", "x-saweria-signature": "second"}
        assert find_signature(headers, self.NAMES) == "second"

    def test_none_when_absent(self):
        assert find_signature({"content-type": "application/json"}, self.NAMES) is None
