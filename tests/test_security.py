"""
Tests for password hashing and JWT issuance/verification.
"""

import uuid
from datetime import timedelta

import pytest

from artisan_auth.config import Settings
from artisan_auth.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
)
from artisan_auth.security import TokenIssuer, hash_password, verify_password


def make_settings(**overrides) -> Settings:
    return Settings(SECRET_KEY=overrides.pop("SECRET_KEY", "unit-test-secret"), **overrides)


class TestPasswordHashing:

    def test_hash_then_verify(self):
        hashed = hash_password("secret1")
        assert verify_password("secret1", hashed)

    def test_wrong_password_does_not_verify(self):
        hashed = hash_password("secret1")
        assert not verify_password("secret2", hashed)

    def test_hash_is_salted(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_hash_is_argon2_and_not_plaintext(self):
        hashed = hash_password("secret1")
        assert hashed.startswith("$argon2")
        assert "secret1" not in hashed

    @pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$argon2id$garbage"])
    def test_malformed_hash_returns_false(self, bad_hash):
        assert verify_password("secret1", bad_hash) is False


class TestTokenIssuer:

    def test_issue_then_verify(self):
        issuer = TokenIssuer(make_settings())
        account_id = uuid.uuid4()

        claims = issuer.verify(issuer.issue(account_id, "a@x.com"))

        assert claims.account_id == account_id
        assert claims.email == "a@x.com"

    def test_expired_token(self):
        issuer = TokenIssuer(make_settings())
        token = issuer.issue(uuid.uuid4(), "a@x.com", expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenExpiredError):
            issuer.verify(token)

    def test_token_signed_with_other_secret(self):
        ours = TokenIssuer(make_settings())
        theirs = TokenIssuer(make_settings(SECRET_KEY="someone-elses-secret"))
        token = theirs.issue(uuid.uuid4(), "a@x.com")

        with pytest.raises(TokenInvalidError):
            ours.verify(token)

    def test_wrong_issuer(self):
        ours = TokenIssuer(make_settings())
        theirs = TokenIssuer(make_settings(JWT_ISSUER="another-service"))
        token = theirs.issue(uuid.uuid4(), "a@x.com")

        with pytest.raises(TokenInvalidError):
            ours.verify(token)

    def test_wrong_audience(self):
        ours = TokenIssuer(make_settings())
        theirs = TokenIssuer(make_settings(JWT_AUDIENCE="another-audience"))
        token = theirs.issue(uuid.uuid4(), "a@x.com")

        with pytest.raises(TokenInvalidError):
            ours.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b"])
    def test_malformed_token(self, token):
        issuer = TokenIssuer(make_settings())

        with pytest.raises(TokenMalformedError):
            issuer.verify(token)

    def test_secret_is_captured_at_construction(self):
        config = make_settings()
        issuer = TokenIssuer(config)
        token = issuer.issue(uuid.uuid4(), "a@x.com")

        config.SECRET_KEY = "rotated-after-startup"

        assert issuer.verify(token).email == "a@x.com"
