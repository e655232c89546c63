"""
Pytest configuration and shared fixtures for zigkit tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from zigkit.config.settings import WorktreeSettings
from zigkit.core.platform import Arch, Os, PlatformTarget
from zigkit.core.worktree import Worktree


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Worktree Double
# ============================================================================


class FakeWorktree(Worktree):
    """In-memory worktree with a fixed search path, environment and settings."""

    def __init__(
        self,
        root: Path,
        binaries: Optional[Dict[str, str]] = None,
        env: Optional[List[Tuple[str, str]]] = None,
        settings: Optional[WorktreeSettings] = None,
        settings_error: Optional[Exception] = None,
    ):
        self._root = Path(root)
        self.binaries = binaries or {}
        self.env = env if env is not None else [("PATH", "/usr/bin")]
        self._settings = settings or WorktreeSettings()
        self.settings_error = settings_error
        self.which_calls: List[str] = []

    @property
    def root_path(self) -> Path:
        return self._root

    def which(self, binary_name: str) -> Optional[str]:
        self.which_calls.append(binary_name)
        return self.binaries.get(binary_name)

    def shell_env(self) -> List[Tuple[str, str]]:
        return list(self.env)

    def settings(self) -> WorktreeSettings:
        if self.settings_error is not None:
            raise self.settings_error
        return self._settings


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def make_worktree(tmp_path: Path):
    """Factory for FakeWorktree instances rooted in a temporary directory."""

    def factory(**kwargs) -> FakeWorktree:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        return FakeWorktree(root, **kwargs)

    return factory


@pytest.fixture
def linux_x64() -> PlatformTarget:
    return PlatformTarget(Os.LINUX, Arch.X86_64)


@pytest.fixture
def mac_arm() -> PlatformTarget:
    return PlatformTarget(Os.MAC, Arch.AARCH64)


@pytest.fixture
def windows_x64() -> PlatformTarget:
    return PlatformTarget(Os.WINDOWS, Arch.X86_64)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Empty zigkit cache root."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))
    monkeypatch.delenv("ZIGKIT_CACHE_DIR", raising=False)

    return fake_home


@pytest.fixture
def zls_tarball() -> bytes:
    """Gzip tar shaped like a ZLS release: the binary at the archive root."""
    return make_tar_gz({"zls": b"#!/bin/sh\necho zls\n", "LICENSE": b"MIT"})


@pytest.fixture
def zls_zip() -> bytes:
    """Zip shaped like a Windows ZLS release."""
    return make_zip({"zls.exe": b"MZ", "LICENSE": b"MIT"})


def make_tar_gz(files: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def make_zip(files: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from zigkit.core import platform

    platform.clear_platform_cache()
    yield
    platform.clear_platform_cache()


@pytest.fixture
def tar_gz_factory():
    """Build gzip tar bytes from a name -> content mapping."""
    return make_tar_gz


@pytest.fixture
def zip_factory():
    """Build zip bytes from a name -> content mapping."""
    return make_zip
