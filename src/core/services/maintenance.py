"""Maintenance operations and the menu command table.

Each menu entry is a zero-argument handler bound to a `MaintenanceActions`
instance. The interactive loop lives here as well, but reads and writes only
through a `Reporter`, so tests drive it with scripted input.

Failure policy: handlers let `CommandError` propagate, which ends the menu
session (the CLI turns it into exit code 1). Interrupting a log tail with
Ctrl+C returns to the menu.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from adapters.ollama_cli import OllamaClient
from core.config import StackSettings
from core.domain.models import BackupArtifact
from core.services.host_checks import format_usage_line
from core.services.reporting import Reporter

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
EXIT_KEY = "0"
# Lines of `docker system df -v` shown after the volume header.
_VOLUME_SECTION_LINES = 20


@dataclass(frozen=True)
class MenuEntry:
    label: str
    handler: Callable[[], object]


def backup_archive_name(prefix: str, moment: datetime) -> str:
    return f"{prefix}_backup_{moment.strftime(BACKUP_TIMESTAMP_FORMAT)}.tar.gz"


def volume_section(df_output: str, *, lines_after: int = _VOLUME_SECTION_LINES) -> list[str]:
    """Return the `VOLUME NAME` header of `docker system df -v` plus the rows after it."""

    lines = df_output.splitlines()
    for idx, line in enumerate(lines):
        if "VOLUME NAME" in line:
            return lines[idx : idx + 1 + lines_after]
    return []


class MaintenanceActions:
    def __init__(
        self,
        settings: StackSettings,
        *,
        compose: ComposeClient,
        docker: DockerClient,
        ollama: OllamaClient,
        reporter: Reporter | None = None,
        now: Callable[[], datetime] = datetime.now,
        workdir: Path | None = None,
    ) -> None:
        self._settings = settings
        self._compose = compose
        self._docker = docker
        self._ollama = ollama
        self._out = reporter or Reporter()
        self._now = now
        self._workdir = workdir or Path.cwd()

    def view_status(self) -> None:
        self._out.info("Service Status:")
        self._compose.ps(capture=False)

    def view_logs_all(self) -> None:
        self._out.info("Showing logs (Ctrl+C to exit)...")
        self._follow(self._compose.logs)

    def view_logs_ollama(self) -> None:
        self._out.info("Showing Ollama logs (Ctrl+C to exit)...")
        self._follow(lambda: self._docker.logs(self._settings.ollama_container))

    def view_logs_webui(self) -> None:
        self._out.info("Showing Open WebUI logs (Ctrl+C to exit)...")
        self._follow(lambda: self._docker.logs(self._settings.webui_container))

    def list_models(self) -> str:
        self._out.info("Available models:")
        output = self._ollama.list_raw().stdout
        self._out.echo(output.rstrip("\n"))
        return output

    def pull_model(self, name: str | None = None) -> bool:
        if name is None:
            name = self._out.prompt("Enter model name (e.g., llama3.1:8b): ")
        name = name.strip()
        if not name:
            self._out.error("Model name cannot be empty")
            return False

        self._out.info(f"Pulling model: {name}")
        self._ollama.pull(name, check=True)
        self._out.info("Model pulled successfully!")
        return True

    def remove_model(self, name: str | None = None, *, confirmed: bool = False) -> bool:
        if name is None:
            self.list_models()
            self._out.echo("")
            name = self._out.prompt("Enter model name to remove: ")
        name = name.strip()
        if not name:
            self._out.error("Model name cannot be empty")
            return False

        if not confirmed:
            self._out.warn(f"Are you sure you want to remove {name}?")
            if self._out.prompt("Type 'yes' to confirm: ").strip() != "yes":
                self._out.info("Cancelled")
                return False

        self._out.info(f"Removing model: {name}")
        self._ollama.remove(name)
        self._out.info("Model removed successfully!")
        return True

    def restart_services(self) -> None:
        self._out.info("Restarting services...")
        self._compose.restart()
        self._out.info("Services restarted!")

    def stop_services(self) -> None:
        self._out.warn("Stopping services...")
        self._compose.down()
        self._out.info("Services stopped!")

    def start_services(self) -> None:
        self._out.info("Starting services...")
        self._compose.up()
        self._out.info("Services started!")

    def update_images(self) -> None:
        self._out.info("Pulling latest images...")
        self._compose.pull()
        self._out.info("Recreating containers with new images...")
        self._compose.up()
        self._out.info("Update complete!")

    def backup_data(self) -> list[BackupArtifact]:
        backup_dir = self._settings.backup_dir
        if not backup_dir.is_absolute():
            backup_dir = self._workdir / backup_dir
        backup_dir.mkdir(parents=True, exist_ok=True)

        moment = self._now()
        targets = (
            ("Ollama", "ollama", self._settings.ollama_volume),
            ("Open WebUI", "webui", self._settings.webui_volume),
        )

        artifacts: list[BackupArtifact] = []
        for label, prefix, volume in targets:
            self._out.info(f"Backing up {label} data...")
            archive = backup_archive_name(prefix, moment)
            self._docker.archive_volume(
                volume=volume,
                backup_dir=backup_dir,
                archive_name=archive,
                image=self._settings.backup_image,
            )
            artifacts.append(BackupArtifact(volume=volume, path=backup_dir / archive, created_at=moment))

        self._out.info(f"Backups saved to: {backup_dir}/")
        for path in sorted(backup_dir.iterdir()):
            if path.is_file():
                self._out.echo(f"  {path.stat().st_size:>12,}  {path.name}")
        return artifacts

    def show_disk_usage(self) -> None:
        self._out.info("Disk usage:")
        self._out.echo("")
        self._out.echo(format_usage_line(Path("/")))
        self._out.echo("")
        self._out.info("Docker volumes:")
        for line in volume_section(self._docker.system_df().stdout):
            self._out.echo(line)

    def show_gpu_usage(self) -> None:
        self._out.info("GPU Status:")
        self._ollama.nvidia_smi()

    def cleanup_images(self) -> None:
        self._out.info("Cleaning up unused Docker images...")
        self._docker.prune_images()
        self._out.info("Cleanup complete!")

    def _follow(self, stream: Callable[[], object]) -> None:
        try:
            stream()
        except KeyboardInterrupt:
            self._out.echo("")
            logger.debug("log tail interrupted")


def build_command_table(actions: MaintenanceActions) -> dict[str, MenuEntry]:
    """Map menu keys `1`..`15` to handlers. `0` (exit) is handled by the loop."""

    entries = [
        ("View Status", actions.view_status),
        ("View Logs (all services)", actions.view_logs_all),
        ("View Ollama Logs", actions.view_logs_ollama),
        ("View Open WebUI Logs", actions.view_logs_webui),
        ("List Available Models", actions.list_models),
        ("Pull New Model", actions.pull_model),
        ("Remove Model", actions.remove_model),
        ("Restart Services", actions.restart_services),
        ("Stop Services", actions.stop_services),
        ("Start Services", actions.start_services),
        ("Update Images", actions.update_images),
        ("Backup Data", actions.backup_data),
        ("Show Disk Usage", actions.show_disk_usage),
        ("Show GPU Usage", actions.show_gpu_usage),
        ("Clean Up Unused Images", actions.cleanup_images),
    ]
    return {str(idx): MenuEntry(label, handler) for idx, (label, handler) in enumerate(entries, start=1)}


class MaintenanceMenu:
    """Read a selection, dispatch it, pause, repeat until `0`."""

    def __init__(
        self,
        table: dict[str, MenuEntry],
        *,
        reporter: Reporter | None = None,
        render: Callable[[dict[str, MenuEntry]], None] | None = None,
    ) -> None:
        self._table = table
        self._out = reporter or Reporter()
        self._render = render

    def dispatch(self, choice: str) -> bool:
        """Run one selection. Returns False when the loop should stop."""

        key = choice.strip()
        if key == EXIT_KEY:
            self._out.info("Exiting...")
            return False

        entry = self._table.get(key)
        if entry is None:
            self._out.error("Invalid option")
            return True

        logger.debug("menu dispatch %s -> %s", key, entry.label)
        entry.handler()
        return True

    def run(self) -> int:
        while True:
            if self._render is not None:
                self._render(self._table)
            choice = self._out.prompt("Select option: ")
            if not self.dispatch(choice):
                return 0
            self._out.echo("")
            self._out.prompt("Press Enter to continue...")
