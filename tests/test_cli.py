# tests/test_cli.py
import json

import httpx
import pytest

from cli import cli
from cli.bootstrap import CommandResult, build_probes, check_api_health, login
from sponsorship.services.identity import IdentityProbe, IdentityResolver, ReadySignal, explicit_probe

API_URL = "http://api.test"


async def _no_sleep(seconds):
    return None


def _auth_transport(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/auth/miniapp":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={"success": True, "user": {"id": "u-1", "fid": body["fid"], "username": body.get("username")}},
                headers={"set-cookie": "user_session=signed-token; Path=/; HttpOnly"},
            )
        return httpx.Response(404, json={"code": "not_found", "message": "Not Found"})

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_login_posts_resolved_identity_and_signals_ready():
    seen = []
    fired = []
    ready = ReadySignal(lambda: fired.append(True))

    result = await login(
        [explicit_probe("42", username="gus", display_name="Gus")],
        api_url=API_URL,
        ready=ready,
        transport=_auth_transport(seen),
    )

    assert result.success
    assert result.message == "Logged in as gus"
    assert result.data["source"] == "explicit"
    assert result.data["session"] == "signed-token"
    assert json.loads(seen[0].content) == {"fid": "42", "username": "gus", "displayName": "Gus"}
    assert fired == [True]


@pytest.mark.asyncio
async def test_login_without_identity_still_signals_ready():
    ready = ReadySignal()
    resolver = IdentityResolver([IdentityProbe("empty", lambda: None)], max_attempts=3, sleep=_no_sleep)

    result = await login(resolver.probes, api_url=API_URL, ready=ready, resolver=resolver)

    assert not result.success
    assert "3 attempts" in result.message
    assert ready.fired


@pytest.mark.asyncio
async def test_login_with_provider_only_identity_is_refused():
    ready = ReadySignal()
    resolver = IdentityResolver(
        [IdentityProbe("provider", lambda: {"renaissanceUserId": "r-1"})], max_attempts=1, sleep=_no_sleep
    )

    result = await login(resolver.probes, api_url=API_URL, ready=ready, resolver=resolver)

    assert not result.success
    assert result.data == {"source": "provider"}
    assert ready.fired


@pytest.mark.asyncio
async def test_login_reports_api_error_message():
    def handler(request):
        return httpx.Response(400, json={"code": "validation_error", "message": "Request validation failed"})

    result = await login(
        [explicit_probe("42")],
        api_url=API_URL,
        transport=httpx.MockTransport(handler),
    )

    assert not result.success
    assert result.message == "Request validation failed"
    assert result.data == {"status_code": 400}


@pytest.mark.asyncio
async def test_health_check_reads_status():
    def handler(request):
        return httpx.Response(200, json={"status": "unhealthy", "checks": {"database": {"status": "unhealthy"}}})

    result = await check_api_health(API_URL, transport=httpx.MockTransport(handler))

    assert not result.success
    assert result.data["checks"]["database"]["status"] == "unhealthy"


def test_build_probes_priority(tmp_path):
    probes = build_probes(fid="7", context_file=tmp_path / "identity.json")
    assert [p.name for p in probes] == [
        "explicit",
        "env:SPONSORSHIP_IDENTITY",
        f"file:{tmp_path / 'identity.json'}",
    ]

    assert [p.name for p in build_probes(context_file=tmp_path / "identity.json")][0] == "env:SPONSORSHIP_IDENTITY"


def test_main_without_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "Sponsorship API CLI" in capsys.readouterr().out


def test_main_dispatches_health(monkeypatch, capsys):
    async def fake_health(api_url=None):
        return CommandResult(True, "API healthy", {"checks": {"database": {"status": "healthy"}}})

    monkeypatch.setattr(cli, "check_api_health", fake_health)

    assert cli.main(["health", "--api-url", API_URL]) == 0
    out = capsys.readouterr().out
    assert "database: healthy" in out
    assert "API healthy" in out
