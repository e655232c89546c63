"""
Tests for language server download and installation.
"""

import os
import stat
from unittest.mock import Mock, patch

import pytest

from zigkit.core.download import DownloadError
from zigkit.core.exceptions import DownloadFailedError, ExecutablePermissionError
from zigkit.core.filesystem import FilesystemError
from zigkit.core.locking import LockManager
from zigkit.zls.fetcher import ArtifactFetcher, prune_stale_versions
from zigkit.zls.models import InstallationStatus

URL = "https://builds.zigtools.org/zls-x86_64-linux-0.14.0.tar.gz"


def serve(content: bytes):
    """download_file stand-in writing fixed archive bytes."""

    def fake_download(url, destination, **kwargs):
        destination.write_bytes(content)
        return destination

    return Mock(side_effect=fake_download)


@pytest.fixture
def install_dir(cache_dir):
    path = cache_dir / "zls"
    path.mkdir()
    return path


@pytest.fixture
def fetcher(cache_dir):
    return ArtifactFetcher(LockManager(cache_dir / "lock"), status_reporter=Mock())


class TestFetch:
    """Test ArtifactFetcher.fetch method."""

    def test_fresh_install(self, fetcher, install_dir, linux_x64, zls_tarball):
        """Test download, extraction and status reporting."""
        version_dir = install_dir / "zls-0.14.0"
        binary = version_dir / "zls"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_tarball)) as download:
            assert fetcher.fetch(URL, version_dir, binary, linux_x64) is True

        assert binary.is_file()
        assert download.call_args[0][0] == URL
        fetcher.status_reporter.assert_called_once_with(InstallationStatus.DOWNLOADING)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_binary_executable(self, fetcher, install_dir, linux_x64, zls_tarball):
        """Test the extracted binary is marked executable."""
        version_dir = install_dir / "zls-0.14.0"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_tarball)):
            fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert (version_dir / "zls").stat().st_mode & stat.S_IXUSR

    def test_zip_on_windows(self, fetcher, install_dir, windows_x64, zls_zip):
        """Test Windows archives are extracted as zip."""
        version_dir = install_dir / "zls-0.14.0"
        binary = version_dir / "zls.exe"
        url = "https://builds.zigtools.org/zls-x86_64-windows-0.14.0.zip"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_zip)):
            assert fetcher.fetch(url, version_dir, binary, windows_x64) is True

        assert binary.read_bytes() == b"MZ"

    def test_idempotent(self, fetcher, install_dir, linux_x64, zls_tarball):
        """Test an installed binary is not downloaded again."""
        version_dir = install_dir / "zls-0.14.0"
        binary = version_dir / "zls"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_tarball)) as download:
            fetcher.fetch(URL, version_dir, binary, linux_x64)
            assert fetcher.fetch(URL, version_dir, binary, linux_x64) is False

        assert download.call_count == 1
        assert fetcher.status_reporter.call_count == 1

    def test_download_failure(self, fetcher, install_dir, linux_x64):
        """Test a failed download raises DownloadFailedError and leaves nothing."""
        version_dir = install_dir / "zls-0.14.0"
        failing = Mock(side_effect=DownloadError("HTTP 404"))

        with patch("zigkit.zls.fetcher.download_file", failing):
            with pytest.raises(DownloadFailedError, match="failed to download file: HTTP 404"):
                fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert not version_dir.exists()

    def test_corrupt_archive(self, fetcher, install_dir, linux_x64):
        """Test an unreadable archive raises DownloadFailedError."""
        version_dir = install_dir / "zls-0.14.0"

        with patch("zigkit.zls.fetcher.download_file", serve(b"not an archive")):
            with pytest.raises(DownloadFailedError):
                fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert not version_dir.exists()

    def test_binary_missing_from_archive(
        self, fetcher, install_dir, linux_x64, tar_gz_factory
    ):
        """Test an archive without the binary raises ExecutablePermissionError."""
        version_dir = install_dir / "zls-0.14.0"
        archive = tar_gz_factory({"README.md": b"hi"})

        with patch("zigkit.zls.fetcher.download_file", serve(archive)):
            with pytest.raises(ExecutablePermissionError):
                fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert not version_dir.exists()

    def test_permission_failure_discards_install(
        self, fetcher, install_dir, linux_x64, zls_tarball
    ):
        """Test a binary that cannot be made executable is not left installed."""
        version_dir = install_dir / "zls-0.14.0"
        binary_path = version_dir / "zls"
        download = serve(zls_tarball)

        with patch("zigkit.zls.fetcher.download_file", download):
            with patch(
                "zigkit.zls.fetcher.make_executable",
                side_effect=PermissionError("denied"),
            ):
                with pytest.raises(ExecutablePermissionError, match="executable"):
                    fetcher.fetch(URL, version_dir, binary_path, linux_x64)

            assert not version_dir.exists()

            assert fetcher.fetch(URL, version_dir, binary_path, linux_x64) is True

        assert download.call_count == 2
        assert binary_path.is_file()


class TestPruning:
    """Test removal of stale versions."""

    def test_stale_versions_removed(self, fetcher, install_dir, linux_x64, zls_tarball):
        """Test sibling directories and files are removed after a fresh install."""
        (install_dir / "zls-0.12.0").mkdir()
        (install_dir / "zls-0.12.0" / "zls").write_text("")
        (install_dir / "stray.tar.gz").write_text("")
        version_dir = install_dir / "zls-0.14.0"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_tarball)):
            fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert [p.name for p in install_dir.iterdir()] == ["zls-0.14.0"]

    def test_prune_disabled(self, cache_dir, install_dir, linux_x64, zls_tarball):
        """Test prune_stale=False keeps other versions."""
        (install_dir / "zls-0.12.0").mkdir()
        fetcher = ArtifactFetcher(
            LockManager(cache_dir / "lock"), status_reporter=Mock(), prune_stale=False
        )
        version_dir = install_dir / "zls-0.14.0"

        with patch("zigkit.zls.fetcher.download_file", serve(zls_tarball)):
            fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64)

        assert (install_dir / "zls-0.12.0").exists()

    def test_no_prune_when_already_installed(self, fetcher, install_dir, linux_x64):
        """Test nothing is removed when no download happened."""
        version_dir = install_dir / "zls-0.14.0"
        version_dir.mkdir()
        (version_dir / "zls").write_text("")
        (install_dir / "zls-0.12.0").mkdir()

        assert fetcher.fetch(URL, version_dir, version_dir / "zls", linux_x64) is False
        assert (install_dir / "zls-0.12.0").exists()

    def test_prune_failure_swallowed(self, install_dir):
        """Test a failed removal is logged and does not stop the others."""
        keep = install_dir / "zls-0.14.0"
        keep.mkdir()
        (install_dir / "zls-0.12.0").mkdir()
        (install_dir / "zls-0.13.0").mkdir()

        real_calls = []

        def flaky(path, require_prefix=None):
            real_calls.append(path.name)
            if path.name == "zls-0.12.0":
                raise FilesystemError("busy")
            path.rmdir()

        with patch("zigkit.zls.fetcher.safe_rmtree", side_effect=flaky):
            removed = prune_stale_versions(keep)

        assert removed == 1
        assert sorted(real_calls) == ["zls-0.12.0", "zls-0.13.0"]
        assert (install_dir / "zls-0.12.0").exists()
        assert not (install_dir / "zls-0.13.0").exists()
        assert keep.exists()

    def test_missing_install_dir(self, tmp_path):
        """Test pruning a missing install root removes nothing."""
        assert prune_stale_versions(tmp_path / "nope" / "zls-0.14.0") == 0
