import json

import pytest
from aiohttp import web
from typer.testing import CliRunner

from pennsieve_fetch import __version__
from pennsieve_fetch.cli.app import app

runner = CliRunner()

ENV_NAMES = (
    "INTEGRATION_ID",
    "INPUT_DIR",
    "SESSION_TOKEN",
    "PENNSIEVE_API_HOST",
    "PENNSIEVE_API_HOST2",
    "DOWNLOADER",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_extract():
    result = runner.invoke(
        app, ["extract", "sub-042-ses-01_scan.nii.gz", "recording.wav"]
    )

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "sub-042-ses-01_scan.nii.gz -> 042",
        "recording.wav -> recording.wav",
    ]


def test_validate_reads_environment_and_hides_token(monkeypatch):
    monkeypatch.setenv("INTEGRATION_ID", "int-77")
    monkeypatch.setenv("SESSION_TOKEN", "super-secret")
    monkeypatch.setenv("PENNSIEVE_API_HOST", "https://api.example")

    result = runner.invoke(app, ["validate"])

    assert result.exit_code == 0
    assert "int-77" in result.stdout
    assert "https://api.example" in result.stdout
    assert "super-secret" not in result.stdout


def test_invalid_configuration_exits_1():
    result = runner.invoke(app, ["validate", "--log-level", "chatty"])
    assert result.exit_code == 1


def test_unreachable_api_exits_1_without_downloading(tmp_path, unused_port, fake_wget):
    marker = tmp_path / "input"
    marker.mkdir()
    host = f"http://127.0.0.1:{unused_port}"

    result = runner.invoke(
        app,
        [
            "run",
            "--integration-id",
            "int-1",
            "--input-dir",
            str(marker),
            "--session-token",
            "tok",
            "--api-host",
            host,
            "--api-host2",
            host,
            "--downloader",
            str(fake_wget),
        ],
    )

    assert result.exit_code == 1
    assert list(marker.iterdir()) == []


def _records(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def _pennsieve_app():
    async def get_integration(request):
        return web.json_response(
            {
                "uuid": request.match_info["integration_id"],
                "packageIds": ["N:package:1", "N:package:2"],
                "params": None,
            }
        )

    async def post_manifest(request):
        return web.json_response(
            {
                "data": [
                    {
                        "nodeId": "N:package:1",
                        "fileName": "sub-01-eeg.edf",
                        "path": None,
                        "url": "https://s3.example/fail/1",
                    },
                    {
                        "nodeId": "N:package:2",
                        "fileName": "sub-02.edf",
                        "path": [],
                        "url": "https://s3.example/ok/2",
                    },
                ]
            }
        )

    app = web.Application()
    app.router.add_get("/integrations/{integration_id}", get_integration)
    app.router.add_post("/packages/download-manifest", post_manifest)
    return app


def test_run_exits_0_when_a_file_fails(tmp_path, fake_wget, serve_app, monkeypatch):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    host = serve_app(_pennsieve_app())
    monkeypatch.setenv("INTEGRATION_ID", "int-1")
    monkeypatch.setenv("INPUT_DIR", str(input_dir))
    monkeypatch.setenv("SESSION_TOKEN", "tok")
    monkeypatch.setenv("PENNSIEVE_API_HOST", host)
    monkeypatch.setenv("PENNSIEVE_API_HOST2", host)
    monkeypatch.setenv("DOWNLOADER", str(fake_wget))

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 0
    assert (input_dir / "02").read_text() == "https://s3.example/ok/2"
    assert not (input_dir / "01").exists()

    records = _records(result.output)
    started = [r for r in records if r["msg"] == "run_started"]
    assert started[0]["integration_id"] == "int-1"
    (failed,) = [r for r in records if r["msg"] == "download_failed"]
    assert failed["target_name"] == "01"
    assert "ERROR 403: Forbidden." in failed["stderr"]
