from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from bloque_sdk.client import SDK, BaseClient
from bloque_sdk.config import ApiKeyAuth, BloqueConfig, JwtAuth
from bloque_sdk.errors import BloqueAPIError, BloqueConfigError
from bloque_sdk.storage import InMemoryTokenStorage


class AccountsClient(BaseClient):
    async def list(self) -> Any:
        return await self.http.request("GET", f"/api/accounts?holder_urn={self.http.urn}")


def api_key_sdk(handler) -> SDK:
    config = BloqueConfig(auth=ApiKeyAuth(api_key="sk_test"), origin="acme", mode="sandbox")
    return SDK(config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_connect_sets_session_and_switches_to_bearer():
    requests: List[Dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(
            {
                "path": request.url.path,
                "holder_urn": request.url.params.get("holder_urn"),
                "auth": request.headers.get("Authorization"),
                "body": json.loads(request.content) if request.content else None,
            }
        )
        if request.url.path == "/api/origins/acme/connect":
            return httpx.Response(200, json={"result": {"access_token": "tok-1"}})
        return httpx.Response(200, json={"accounts": []})

    sdk = api_key_sdk(handler)
    session = await sdk.connect("bob")
    accounts = await AccountsClient(session.http).list()

    assert session.urn == "did:bloque:acme:bob"
    assert session.access_token == "tok-1"
    assert sdk.http.urn == "did:bloque:acme:bob"
    assert accounts == {"accounts": []}

    connect, listing = requests
    assert connect["auth"] == "sk_test"
    assert connect["body"] == {
        "assertion_result": {"challengeType": "API_KEY", "value": {"api_key": "sk_test", "alias": "bob"}},
        "extra_context": {},
    }
    assert listing["auth"] == "Bearer tok-1"
    assert listing["holder_urn"] == "did:bloque:acme:bob"
    await sdk.aclose()


@pytest.mark.asyncio
async def test_connect_without_token_in_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": {}})

    sdk = api_key_sdk(handler)
    with pytest.raises(BloqueAPIError, match="access token"):
        await sdk.connect("bob")
    assert sdk.http.access_token is None
    assert sdk.http.urn is None


def test_authenticate_with_token_stores_jwt():
    storage = InMemoryTokenStorage()
    config = BloqueConfig(auth=JwtAuth(), origin="acme", platform="react-native", token_storage=storage)
    sdk = SDK(config)

    session = sdk.authenticate_with_token("jwt-xyz", "alice")

    assert session.urn == "did:bloque:acme:alice"
    assert storage.get() == "jwt-xyz"
    assert sdk.http.access_token == "jwt-xyz"


def test_authenticate_with_token_rejects_api_key_auth():
    config = BloqueConfig(auth=ApiKeyAuth(api_key="sk"), origin="acme")
    with pytest.raises(BloqueConfigError, match="only available for JWT"):
        SDK(config).authenticate_with_token("jwt", "alice")


def test_authenticate_with_token_rejects_blank_token():
    config = BloqueConfig(auth=JwtAuth(), platform="browser", origin="acme")
    with pytest.raises(ValueError, match="Token is required"):
        SDK(config).authenticate_with_token("  ", "alice")


def test_build_urn_requires_origin():
    sdk = SDK(BloqueConfig(auth=JwtAuth(), platform="browser"))
    with pytest.raises(BloqueConfigError, match="Origin is required"):
        sdk.build_urn("alice")
    sdk.http.set_origin("acme")
    assert sdk.build_urn("alice") == "did:bloque:acme:alice"
