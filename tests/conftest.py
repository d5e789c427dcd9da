import asyncio
import io
import json
import socket
import sys
import threading

import pytest
from aiohttp import web

from pennsieve_fetch.utils.structured_logger import create_structured_logger


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def loggers(log_stream):
    """(base, download, api, session) loggers writing DEBUG records to log_stream."""
    return create_structured_logger(level="DEBUG", stream=log_stream)


@pytest.fixture
def read_records(log_stream):
    def _read():
        return [json.loads(line) for line in log_stream.getvalue().splitlines()]

    return _read


@pytest.fixture
def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def fake_wget(tmp_path):
    """
    Writes a wget stand-in script. Called as `<script> -v -O <target> <url>`,
    it writes the URL into the target file, or exits 4 for URLs containing
    'fail'.
    """
    if sys.platform == "win32":
        pytest.skip("shell script downloader requires a POSIX shell")

    script = tmp_path / "fake-wget"
    script.write_text(
        "#!/bin/sh\n"
        'echo "fetching $4"\n'
        'case "$4" in\n'
        '  *fail*) echo "ERROR 403: Forbidden." >&2; exit 4 ;;\n'
        "esac\n"
        'echo "Saving to: $3" >&2\n'
        'printf "%s" "$4" > "$3"\n'
    )
    script.chmod(0o755)
    return script


@pytest.fixture
def serve_app(unused_port):
    """
    Serves an aiohttp application from a background thread so code that calls
    `asyncio.run` itself (the CLI) can talk to it. Returns the base URL.
    """
    loop = asyncio.new_event_loop()
    ready = threading.Event()
    runners = []
    threads = []

    def _serve(app):
        async def _start():
            runner = web.AppRunner(app)
            await runner.setup()
            await web.TCPSite(runner, "127.0.0.1", unused_port).start()
            runners.append(runner)

        def _thread_main():
            asyncio.set_event_loop(loop)
            loop.run_until_complete(_start())
            ready.set()
            loop.run_forever()
            loop.run_until_complete(runners[0].cleanup())
            loop.close()

        thread = threading.Thread(target=_thread_main, daemon=True)
        thread.start()
        assert ready.wait(timeout=10), "API server did not start"
        threads.append(thread)
        return f"http://127.0.0.1:{unused_port}"

    yield _serve

    if threads:
        loop.call_soon_threadsafe(loop.stop)
        threads[0].join(timeout=10)
    else:
        loop.close()
