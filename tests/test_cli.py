"""CLI: discord-relay serve"""

from click.testing import CliRunner

from discord_relay import __version__
from discord_relay.cli import main as cli
from discord_relay.config import Settings


class FakeServer:
    def __init__(self, started: bool):
        self.started = started
        self.ran = False

    def run(self):
        self.ran = True


def _isolate(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "configure_logging", lambda *args: None)
    for key in ("DISCORD_TOKEN", "RELAY_HOST", "RELAY_PORT", "RELAY_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_version():
    result = CliRunner().invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_serve_without_token_exits(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    result = CliRunner().invoke(cli.main, ["serve"])
    assert result.exit_code == 1
    assert "DISCORD_TOKEN" in result.output


def test_serve_applies_options(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    monkeypatch.setenv("DISCORD_TOKEN", "abc")
    seen = {}
    server = FakeServer(started=True)

    def fake_build(settings):
        seen["settings"] = settings
        return server

    monkeypatch.setattr(cli, "build_server", fake_build)
    result = CliRunner().invoke(cli.main, ["serve", "--host", "127.0.0.1", "--port", "8080", "--log-level", "debug"])

    assert result.exit_code == 0
    assert server.ran
    assert seen["settings"].host == "127.0.0.1"
    assert seen["settings"].port == 8080
    assert seen["settings"].log_level == "DEBUG"


def test_serve_exits_when_startup_fails(monkeypatch, tmp_path):
    _isolate(monkeypatch, tmp_path)
    monkeypatch.setenv("DISCORD_TOKEN", "abc")
    monkeypatch.setattr(cli, "build_server", lambda settings: FakeServer(started=False))

    result = CliRunner().invoke(cli.main, ["serve"])
    assert result.exit_code == 1
    assert "failed to start" in result.output


def test_build_server_wires_settings():
    settings = Settings(discord_token="abc", host="127.0.0.1", port=8080, max_concurrency=4)
    server = cli.build_server(settings)
    assert server.config.host == "127.0.0.1"
    assert server.config.port == 8080
    assert server.config.limit_concurrency == 4
