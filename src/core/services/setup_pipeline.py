"""Stack setup orchestration.

This module runs the linear bring-up of the RAG stack: host checks, teardown,
image pull, start, readiness poll and model provisioning. Every external call
goes through the adapters, and every user-facing message goes through a
`Reporter`, which keeps the sequence testable without Docker or a terminal.

Each stage is a gate. Fatal gates raise a `StackError` subclass; the disk
check asks for confirmation; model pulls are best-effort unless
`strict_models` is enabled.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from adapters.ollama_cli import OllamaClient
from core.config import StackSettings
from core.domain.errors import (
    DiskSpaceError,
    ModelPullError,
    ReadinessTimeout,
    ServiceStartError,
)
from core.domain.models import (
    DiskSpace,
    ModelPullOutcome,
    ModelRole,
    PullStatus,
    RequirementCheck,
    SetupReport,
)
from core.services.host_checks import ensure_requirements, is_root, measure_disk_space
from core.services.reporting import Reporter
from core.services.retry import RetryPolicy, retry_until

logger = logging.getLogger(__name__)


@dataclass
class SetupOptions:
    """Parameters that control one setup run."""

    assume_yes: bool = False
    workdir: Path = field(default_factory=Path.cwd)


def readiness_policy(settings: StackSettings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.readiness_max_attempts,
        base_delay=settings.readiness_base_delay,
        backoff_factor=settings.readiness_backoff_factor,
        max_delay=settings.readiness_max_delay,
    )


def is_affirmative(answer: str) -> bool:
    """Only answers starting with y/Y confirm. Empty means no."""

    return answer.strip()[:1] in ("y", "Y")


class SetupPipeline:
    def __init__(
        self,
        settings: StackSettings,
        *,
        compose: ComposeClient,
        docker: DockerClient,
        ollama: OllamaClient,
        reporter: Reporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        geteuid: Callable[[], int] | None = None,
    ) -> None:
        self._settings = settings
        self._compose = compose
        self._docker = docker
        self._ollama = ollama
        self._out = reporter or Reporter()
        self._sleep = sleep
        self._geteuid = geteuid

    def run(self, options: SetupOptions | None = None) -> SetupReport:
        options = options or SetupOptions()
        report = SetupReport()

        self.check_privileges()
        report.requirements = self.check_requirements()
        report.disk = self.check_disk_space(options)
        self.cleanup_existing()
        self.pull_images()
        self.start_services()
        self.wait_for_model_server()
        report.models.append(self.provision_model(self._settings.embedding_model, ModelRole.EMBEDDING))
        report.models.append(self.provision_model(self._settings.primary_model, ModelRole.PRIMARY))

        if self._settings.strict_models and report.failed_models:
            names = ", ".join(m.model for m in report.failed_models)
            raise ModelPullError(
                f"Failed to pull required model(s): {names}",
                [self._ollama.manual_pull_command(m.model) for m in report.failed_models],
            )
        return report

    def check_privileges(self) -> bool:
        root = is_root(self._geteuid)
        if root:
            self._out.warn("Running as root. This is okay but not recommended for production.")
        return root

    def check_requirements(self) -> list[RequirementCheck]:
        self._out.info("Checking system requirements...")
        checks = ensure_requirements(self._docker, self._compose, self._settings)
        self._out.info("All requirements met!")
        return checks

    def check_disk_space(self, options: SetupOptions) -> DiskSpace:
        self._out.info("Checking available disk space...")
        disk = measure_disk_space(options.workdir, self._settings.required_disk_gb)

        if disk.sufficient:
            self._out.info(f"Sufficient disk space available: {disk.free_gb}GB")
            return disk

        self._out.warn(f"Low disk space detected: {disk.free_gb}GB available")
        self._out.warn(f"Recommended: at least {disk.required_gb}GB for models and data")
        if options.assume_yes:
            self._out.info("Continuing (--yes).")
            return disk
        answer = self._out.prompt("Continue anyway? (y/N): ")
        if not is_affirmative(answer):
            raise DiskSpaceError(f"Aborted: only {disk.free_gb}GB free, {disk.required_gb}GB recommended.")
        return disk

    def cleanup_existing(self) -> None:
        self._out.info("Cleaning up existing containers...")
        if self._compose.ps_quiet().ok:
            self._compose.down()
        self._out.info("Cleanup complete.")

    def pull_images(self) -> None:
        self._out.info("Pulling Docker images...")
        self._compose.pull()
        self._out.info("Images pulled successfully.")

    def start_services(self) -> None:
        self._out.info("Starting services...")
        self._compose.up()

        self._out.info("Waiting for services to initialize...")
        self._sleep(self._settings.startup_grace_seconds)

        if not self._compose.any_service_up():
            raise ServiceStartError(
                "Services failed to start.",
                [f"Check logs with: {' '.join(self._compose.base_args)} logs"],
            )
        self._out.info("Services started successfully!")

    def wait_for_model_server(self) -> int:
        self._out.info("Waiting for Ollama service to be ready...")
        policy = readiness_policy(self._settings)

        failures: list[int] = []

        def _on_failure(attempt: int, delay: float) -> None:
            failures.append(attempt)
            logger.debug("readiness probe %s/%s failed, sleeping %.1fs", attempt, policy.max_attempts, delay)
            if self._out.tick is not None:
                self._out.tick()

        attempt = retry_until(self._ollama.ping, policy, sleep=self._sleep, on_failure=_on_failure)
        if failures and self._out.tick is not None:
            self._out.echo("")
        if attempt is None:
            raise ReadinessTimeout(
                "Ollama failed to start within expected time.",
                [f"Check logs with: docker logs {self._ollama.container}"],
            )
        self._out.info("Ollama is ready!")
        return attempt

    def provision_model(self, name: str, role: ModelRole) -> ModelPullOutcome:
        label = "Embedding model" if role is ModelRole.EMBEDDING else "Model"
        self._out.info(f"Pulling {label.lower()} {name}...")

        if self._ollama.has_model(name):
            self._out.info(f"{label} {name} already exists. Skipping download.")
            return ModelPullOutcome(model=name, role=role, status=PullStatus.PRESENT)

        if role is ModelRole.PRIMARY:
            self._out.warn("Downloading a large model will take significant time and bandwidth.")
            self._out.info(f"You can monitor progress in another terminal with: docker logs -f {self._ollama.container}")

        if self._ollama.pull(name).ok:
            self._out.info(f"{label} {name} pulled successfully!")
            return ModelPullOutcome(model=name, role=role, status=PullStatus.PULLED)

        self._out.error(f"Failed to pull {label.lower()} {name}")
        self._out.info(f"You can manually pull it later with: {self._ollama.manual_pull_command(name)}")
        return ModelPullOutcome(model=name, role=role, status=PullStatus.FAILED)
