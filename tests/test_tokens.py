"""Session token verification tests.

Learn: The JWKS tests sign RS256 tokens with a throwaway RSA key and
serve its public half from an httpx.MockTransport, so the whole
fetch → cache → verify path runs without the network.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

import jobhub.auth.tokens as tokens
from conftest import TEST_JWT_KEY, make_token
from jobhub.auth.tokens import (
    JWKSCache,
    TokenError,
    external_id_from_header,
    verify_session_token,
)

JWKS_URL = "https://clerk.jobhub.test/.well-known/jwks.json"


@pytest.mark.asyncio
async def test_valid_token_returns_payload():
    payload = await verify_session_token(make_token("user_123"))
    assert payload["sub"] == "user_123"


@pytest.mark.asyncio
async def test_expired_token_rejected():
    token = make_token("user_123", exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    with pytest.raises(TokenError, match="expired"):
        await verify_session_token(token)


@pytest.mark.asyncio
async def test_wrong_key_rejected():
    token = jwt.encode({"sub": "user_123"}, "some-other-signing-key-0123456789abcdef", algorithm="HS256")
    with pytest.raises(TokenError):
        await verify_session_token(token)


@pytest.mark.asyncio
async def test_token_without_sub_rejected():
    token = jwt.encode({"foo": "bar"}, TEST_JWT_KEY, algorithm="HS256")
    with pytest.raises(TokenError):
        await verify_session_token(token)


@pytest.mark.asyncio
async def test_no_verification_key_configured(auth_settings, monkeypatch):
    monkeypatch.setattr(auth_settings, "clerk_jwt_key", "")
    with pytest.raises(TokenError, match="No session token verification key"):
        await verify_session_token(make_token("user_123"))


@pytest.mark.asyncio
async def test_authorized_parties_enforced(auth_settings, monkeypatch):
    monkeypatch.setattr(auth_settings, "clerk_authorized_parties", ["https://jobhub.dev"])

    payload = await verify_session_token(make_token("user_1", azp="https://jobhub.dev"))
    assert payload["sub"] == "user_1"
    with pytest.raises(TokenError, match="Unauthorized party"):
        await verify_session_token(make_token("user_1", azp="https://evil.example.com"))


@pytest.mark.asyncio
async def test_header_extraction():
    assert await external_id_from_header(f"Bearer {make_token('user_9')}") == "user_9"


@pytest.mark.asyncio
async def test_header_missing_or_malformed_is_anonymous():
    assert await external_id_from_header(None) is None
    assert await external_id_from_header("") is None
    assert await external_id_from_header("Basic dXNlcjpwYXNz") is None
    assert await external_id_from_header("Bearer not-a-jwt") is None


# ═══════════════════════════════════════════════════════════
# JWKS
# ═══════════════════════════════════════════════════════════


def _rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _jwk(private_key, kid: str) -> dict:
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    return {**jwk, "kid": kid, "alg": "RS256", "use": "sig"}


def _rs256_token(private_key, kid: str, sub: str = "user_rsa") -> str:
    payload = {"sub": sub, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})


class JWKSServer:
    """Serves whatever keys are currently published; counts fetches."""

    def __init__(self, *jwks: dict):
        self.keys = list(jwks)
        self.fetches = 0
        self.status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.fetches += 1
        assert str(request.url) == JWKS_URL
        return httpx.Response(self.status, json={"keys": self.keys})


@pytest.fixture()
def use_jwks(auth_settings, monkeypatch):
    """Point verification at JWKS_URL, served by the given JWKSServer."""
    monkeypatch.setattr(auth_settings, "clerk_jwks_url", JWKS_URL)
    monkeypatch.setattr(auth_settings, "clerk_jwt_key", "")
    monkeypatch.setattr(auth_settings, "clerk_jwt_algorithms", ["RS256"])

    def install(server: JWKSServer) -> None:
        monkeypatch.setattr(
            tokens, "jwks_cache", JWKSCache(transport=httpx.MockTransport(server))
        )

    return install


@pytest.mark.asyncio
async def test_jwks_token_verified_and_keys_cached(use_jwks):
    key = _rsa_key()
    server = JWKSServer(_jwk(key, "kid_1"))
    use_jwks(server)

    first = await verify_session_token(_rs256_token(key, "kid_1", sub="user_a"))
    second = await verify_session_token(_rs256_token(key, "kid_1", sub="user_b"))

    assert (first["sub"], second["sub"]) == ("user_a", "user_b")
    assert server.fetches == 1


@pytest.mark.asyncio
async def test_jwks_rotated_key_triggers_one_refetch(use_jwks):
    old, new = _rsa_key(), _rsa_key()
    server = JWKSServer(_jwk(old, "kid_old"))
    use_jwks(server)
    await verify_session_token(_rs256_token(old, "kid_old"))

    server.keys = [_jwk(new, "kid_new")]
    payload = await verify_session_token(_rs256_token(new, "kid_new"))

    assert payload["sub"] == "user_rsa"
    assert server.fetches == 2


@pytest.mark.asyncio
async def test_jwks_unknown_kid_rejected(use_jwks):
    server = JWKSServer(_jwk(_rsa_key(), "kid_1"))
    use_jwks(server)

    with pytest.raises(TokenError, match="kid"):
        await verify_session_token(_rs256_token(_rsa_key(), "kid_stranger"))


@pytest.mark.asyncio
async def test_jwks_token_signed_by_other_key_rejected(use_jwks):
    server = JWKSServer(_jwk(_rsa_key(), "kid_1"))
    use_jwks(server)

    with pytest.raises(TokenError):
        await verify_session_token(_rs256_token(_rsa_key(), "kid_1"))


@pytest.mark.asyncio
async def test_jwks_endpoint_down_is_anonymous(use_jwks):
    key = _rsa_key()
    server = JWKSServer(_jwk(key, "kid_1"))
    server.status = 503
    use_jwks(server)

    assert await external_id_from_header(f"Bearer {_rs256_token(key, 'kid_1')}") is None
