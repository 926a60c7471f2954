from __future__ import annotations

import httpx

from cli.doctor import collect_checks


def _by_name(checks):
    return {c.name: c for c in checks}


def _transport(tags: list[str], *, ollama_up: bool = True) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.port == 11434:
            if not ollama_up:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"models": [{"name": t} for t in tags]})
        return httpx.Response(200, text="<html>Open WebUI</html>")

    return httpx.MockTransport(handler)


def test_reports_every_check(runner, clients, settings, tmp_path):
    compose, docker, _ = clients
    (tmp_path / "docker-compose.yaml").write_text("services: {}\n", encoding="utf-8")

    checks = _by_name(
        collect_checks(
            settings,
            docker=docker,
            compose=compose,
            workdir=tmp_path,
            transport=_transport(["llama3.1:70b", "nomic-embed-text:latest"]),
        )
    )

    for name in ("Docker", "Docker Compose", "GPU passthrough", "Compose file", "Open WebUI", "Ollama API"):
        assert checks[name].ok, name
    assert checks["Embedding model"].ok
    assert checks["Primary model"].ok
    assert "Disk space" in checks


def test_missing_model_and_compose_file_are_reported(runner, clients, settings, tmp_path):
    compose, docker, _ = clients

    checks = _by_name(
        collect_checks(
            settings,
            docker=docker,
            compose=compose,
            workdir=tmp_path,
            transport=_transport(["nomic-embed-text:latest"]),
        )
    )

    assert not checks["Compose file"].ok
    assert checks["Embedding model"].ok
    assert not checks["Primary model"].ok
    assert checks["Primary model"].hints == ["docker exec ollama ollama pull llama3.1:70b"]


def test_unreachable_ollama_does_not_stop_the_report(runner, clients, settings, tmp_path):
    compose, docker, _ = clients
    runner.docker_path = None

    checks = _by_name(
        collect_checks(
            settings,
            docker=docker,
            compose=compose,
            workdir=tmp_path,
            transport=_transport([], ollama_up=False),
        )
    )

    assert not checks["Docker"].ok
    assert not checks["Ollama API"].ok
    assert "Primary model" not in checks
    assert checks["Open WebUI"].ok
