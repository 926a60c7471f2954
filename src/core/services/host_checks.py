"""Host preconditions: privileges, container runtime, GPU passthrough, disk."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Iterator, NamedTuple

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from core.config import StackSettings
from core.domain.errors import RequirementError
from core.domain.models import DiskSpace, RequirementCheck

DOCKER_INSTALL_URL = "https://docs.docker.com/engine/install/"
NVIDIA_TOOLKIT_URL = (
    "https://docs.nvidia.com/datacenter/cloud-native/container-toolkit/install-guide.html"
)

_GIB = 1024**3


class _DiskUsage(NamedTuple):
    total: int
    used: int
    free: int


def is_root(geteuid: Callable[[], int] | None = None) -> bool:
    """True when the effective uid is 0. Always False where uids do not exist."""

    geteuid = geteuid or getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0


def iter_requirement_checks(
    docker: DockerClient,
    compose: ComposeClient,
    settings: StackSettings,
) -> Iterator[RequirementCheck]:
    """Yield each requirement check in order. Lazy, so callers can stop early."""

    installed = docker.is_installed()
    yield RequirementCheck(
        name="Docker",
        ok=installed,
        detail="docker found on PATH" if installed else "Docker is not installed. Please install Docker first.",
        hints=[] if installed else [f"Visit: {DOCKER_INSTALL_URL}"],
    )

    compose_ok = compose.version().ok
    yield RequirementCheck(
        name="Docker Compose",
        ok=compose_ok,
        detail="compose plugin available"
        if compose_ok
        else "Docker Compose is not available. Please install Docker Compose.",
    )

    if not settings.check_gpu:
        yield RequirementCheck(name="GPU passthrough", ok=True, detail="skipped (check_gpu disabled)")
        return

    gpu_ok = docker.gpu_passthrough_works(settings.gpu_test_image)
    yield RequirementCheck(
        name="GPU passthrough",
        ok=gpu_ok,
        detail="nvidia-smi ran inside a test container"
        if gpu_ok
        else "NVIDIA Docker runtime is not properly configured.",
        hints=[]
        if gpu_ok
        else ["Please install nvidia-container-toolkit:", f"  {NVIDIA_TOOLKIT_URL}"],
    )


def ensure_requirements(
    docker: DockerClient,
    compose: ComposeClient,
    settings: StackSettings,
) -> list[RequirementCheck]:
    """Run the checks in order and raise on the first failure."""

    passed: list[RequirementCheck] = []
    for check in iter_requirement_checks(docker, compose, settings):
        if not check.ok:
            raise RequirementError(check.detail, check.hints)
        passed.append(check)
    return passed


def measure_disk_space(
    path: Path,
    required_gb: int,
    *,
    disk_usage: Callable[[str], _DiskUsage] = shutil.disk_usage,
) -> DiskSpace:
    usage = disk_usage(str(path))
    return DiskSpace(path=path, free_gb=usage.free // _GIB, required_gb=required_gb)


def format_usage_line(path: Path, *, disk_usage: Callable[[str], _DiskUsage] = shutil.disk_usage) -> str:
    """One `df -h`-style line for the filesystem holding `path`."""

    usage = disk_usage(str(path))
    pct = (usage.used / usage.total * 100) if usage.total else 0.0
    return (
        f"{str(path):<12} size {usage.total / _GIB:.1f}G  used {usage.used / _GIB:.1f}G  "
        f"avail {usage.free / _GIB:.1f}G  use {pct:.0f}%"
    )
