import asyncio

import pytest

from pennsieve_fetch.download.downloader import ExternalDownloader
from pennsieve_fetch.exceptions import DownloadError


def test_build_command_matches_wget_invocation():
    downloader = ExternalDownloader()
    assert downloader.build_command("042", "https://s3.example/a?sig=x") == [
        "wget",
        "-v",
        "-O",
        "042",
        "https://s3.example/a?sig=x",
    ]


def test_downloads_into_working_dir(tmp_path, fake_wget):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    downloader = ExternalDownloader(str(fake_wget), working_dir=input_dir)

    result = asyncio.run(downloader.download("https://s3.example/file-1", "042"))

    assert (input_dir / "042").read_text() == "https://s3.example/file-1"
    assert result.returncode == 0
    assert result.stdout.strip() == "fetching https://s3.example/file-1"
    assert "Saving to: 042" in result.stderr


def test_non_zero_exit_raises_with_captured_stderr(tmp_path, fake_wget):
    downloader = ExternalDownloader(str(fake_wget), working_dir=tmp_path)

    with pytest.raises(DownloadError) as exc_info:
        asyncio.run(downloader.download("https://s3.example/fail", "042"))

    assert exc_info.value.returncode == 4
    assert "ERROR 403: Forbidden." in exc_info.value.stderr
    assert "fetching" in exc_info.value.stdout
    assert not (tmp_path / "042").exists()


def test_missing_executable_raises(tmp_path):
    missing = tmp_path / "no-such-wget"
    downloader = ExternalDownloader(str(missing), working_dir=tmp_path)

    with pytest.raises(DownloadError) as exc_info:
        asyncio.run(downloader.download("https://s3.example/a", "042"))

    assert exc_info.value.returncode is None
    assert exc_info.value.stderr


def test_nul_byte_in_url_raises_download_error(tmp_path, fake_wget):
    downloader = ExternalDownloader(str(fake_wget), working_dir=tmp_path)

    with pytest.raises(DownloadError) as exc_info:
        asyncio.run(downloader.download("https://s3.example/\x00bad", "042"))

    assert exc_info.value.returncode is None
