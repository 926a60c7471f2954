"""Adaptador para el CLI `docker` (fuera de compose)."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.domain.models import CommandResult
from core.interfaces.runner import CommandRunner


class DockerClient:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def is_installed(self) -> bool:
        return self._runner.which("docker") is not None

    def gpu_passthrough_works(self, image: str) -> bool:
        """Lanza un contenedor desechable con `--gpus all` y ejecuta nvidia-smi."""

        result = self._runner.run(["docker", "run", "--rm", "--gpus", "all", image, "nvidia-smi"])
        return result.ok

    def exec(
        self,
        container: str,
        args: Sequence[str],
        *,
        capture: bool = True,
        check: bool = False,
    ) -> CommandResult:
        return self._runner.run(["docker", "exec", container, *args], capture=capture, check=check)

    def logs(self, container: str, *, follow: bool = True) -> CommandResult:
        args = ["docker", "logs"]
        if follow:
            args.append("-f")
        return self._runner.run([*args, container], capture=False)

    def archive_volume(self, *, volume: str, backup_dir: Path, archive_name: str, image: str) -> CommandResult:
        """Empaqueta `/data` de un volumen en `<backup_dir>/<archive_name>` con un contenedor efímero.

        `backup_dir` se monta como bind mount, así que debe ser absoluto.
        """

        return self._runner.run(
            [
                "docker",
                "run",
                "--rm",
                "-v",
                f"{volume}:/data",
                "-v",
                f"{backup_dir}:/backup",
                image,
                "tar",
                "czf",
                f"/backup/{archive_name}",
                "/data",
            ],
            capture=False,
            check=True,
        )

    def system_df(self) -> CommandResult:
        return self._runner.run(["docker", "system", "df", "-v"], check=True)

    def prune_images(self) -> CommandResult:
        return self._runner.run(["docker", "image", "prune", "-a", "-f"], capture=False, check=True)
