"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import typer

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from adapters.http_client import build_async_client, fetch_ollama_tags, probe_endpoint
from adapters.process_runner import SubprocessRunner
from cli.ui_components import build_checks_table, console
from core.config import StackSettings
from core.domain.models import RequirementCheck
from core.services.host_checks import iter_requirement_checks, measure_disk_space


async def _check_endpoints(
    settings: StackSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RequirementCheck]:
    checks: list[RequirementCheck] = []
    async with build_async_client(settings, transport=transport) as client:
        ok_ui, detail_ui = await probe_endpoint(client, settings.webui_url)
        checks.append(
            RequirementCheck(
                name="Open WebUI",
                ok=ok_ui,
                detail=f"{settings.webui_url} -> {detail_ui}",
                hints=[] if ok_ui else ["Start the stack with: rag-stack setup"],
            )
        )

        try:
            tags = await fetch_ollama_tags(client, settings.ollama_url)
        except (httpx.HTTPError, ValueError) as exc:
            checks.append(
                RequirementCheck(
                    name="Ollama API",
                    ok=False,
                    detail=f"{settings.ollama_url} -> {str(exc) or exc.__class__.__name__}",
                    hints=[f"Check logs with: docker logs {settings.ollama_container}"],
                )
            )
            return checks

        checks.append(
            RequirementCheck(name="Ollama API", ok=True, detail=f"{settings.ollama_url} -> {len(tags)} model(s)")
        )
        for role, model in (("Embedding model", settings.embedding_model), ("Primary model", settings.primary_model)):
            present = any(model in tag for tag in tags)
            checks.append(
                RequirementCheck(
                    name=role,
                    ok=present,
                    detail=model if present else f"{model} not pulled",
                    hints=[] if present else [f"docker exec {settings.ollama_container} ollama pull {model}"],
                )
            )
    return checks


def collect_checks(
    settings: StackSettings,
    *,
    docker: DockerClient,
    compose: ComposeClient,
    workdir: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RequirementCheck]:
    """Run every diagnostic without stopping at the first failure."""

    checks = list(iter_requirement_checks(docker, compose, settings))

    disk = measure_disk_space(workdir, settings.required_disk_gb)
    checks.append(
        RequirementCheck(
            name="Disk space",
            ok=disk.sufficient,
            detail=f"{disk.free_gb}GB free, {disk.required_gb}GB recommended",
        )
    )

    compose_exists = (workdir / settings.compose_file).exists()
    checks.append(
        RequirementCheck(
            name="Compose file",
            ok=compose_exists,
            detail=str(settings.compose_file),
            hints=[] if compose_exists else ["Set RAG_STACK_COMPOSE_FILE or run from the project directory."],
        )
    )

    checks.extend(asyncio.run(_check_endpoints(settings, transport)))
    return checks


def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = StackSettings()
    runner = SubprocessRunner()
    checks = collect_checks(
        settings,
        docker=DockerClient(runner),
        compose=ComposeClient(runner, settings.compose_file),
        workdir=Path.cwd(),
    )
    console.print(build_checks_table("RAG Stack Doctor", checks))

    if not all(c.ok for c in checks):
        console.print("\n[yellow]Note:[/yellow] doctor only reports; run `rag-stack setup` to (re)deploy.")
        raise typer.Exit(code=1)
