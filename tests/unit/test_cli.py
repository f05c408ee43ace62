"""Unit tests for the command line entry point."""

import pytest
from loguru import logger

from leettui import cli


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "CONFIG_DIR", tmp_path)
    yield tmp_path
    logger.remove()


def test_invalid_config_exits_with_status_2(tmp_path, log_dir, capsys):
    config_path = tmp_path / "config.env"
    config_path.write_text("LANGUAGE=python3\n")

    status = cli.main(["--config", str(config_path)])

    assert status == 2
    assert "leettui:" in capsys.readouterr().err
    assert "Configuration error" in (log_dir / cli.LOG_FILENAME).read_text()


def test_setup_logging_writes_to_file(log_dir):
    path = cli.setup_logging()
    logger.info("hello from the test")

    assert path == log_dir / "leettui.log"
    assert "hello from the test" in path.read_text()


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])

    assert exc_info.value.code == 0
    assert "leettui" in capsys.readouterr().out
