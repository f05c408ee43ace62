"""Unit tests for configuration loading and saving."""

import pytest
from pydantic import ValidationError

from leettui.config import Config, load_config, save_config
from leettui.domain.exceptions import ConfigError, IncompleteCredentialsError
from leettui.domain.models import Session


def test_missing_file_means_first_run(tmp_path):
    assert load_config(tmp_path / "config.env") is None


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "config.env"
    config = Config(
        workspace_dir="~/leetcode",
        language="rust",
        editor="code --wait",
        leetcode_session="sid",
        csrf_token="csrf",
        poll_max_attempts=5,
    )

    assert save_config(config, path) == path
    loaded = load_config(path)

    assert loaded == config
    assert "WORKSPACE_DIR" in path.read_text()
    assert loaded.session() == Session("sid", "csrf")


def test_defaults_and_workspace_expansion(tmp_path):
    path = tmp_path / "config.env"
    path.write_text("WORKSPACE_DIR=~/leetcode\n")

    config = load_config(path)

    assert config.language == "python3"
    assert config.editor == "vim"
    assert config.workspace_root.name == "leetcode"
    assert "~" not in str(config.workspace_root)
    assert not config.is_authenticated
    assert config.session() is None


def test_signing_out_removes_tokens(tmp_path):
    path = tmp_path / "config.env"
    save_config(Config(workspace_dir="/w", leetcode_session="sid", csrf_token="csrf"), path)

    save_config(Config(workspace_dir="/w"), path)

    assert "LEETCODE_SESSION" not in path.read_text()
    assert load_config(path).session() is None


@pytest.mark.parametrize(
    "content",
    [
        "LANGUAGE=python3\n",
        "WORKSPACE_DIR=/w\nREQUEST_TIMEOUT=0\n",
        "WORKSPACE_DIR=/w\nPOLL_MAX_ATTEMPTS=zero\n",
        "WORKSPACE_DIR=/w\nLEETCODE_SESSION=sid\n",
        "WORKSPACE_DIR=/w\nLANGUAGE=java\n",
    ],
)
def test_invalid_config_raises_config_error(tmp_path, content):
    path = tmp_path / "config.env"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_config(path)


def test_blank_tokens_mean_signed_out():
    config = Config(workspace_dir="/w", leetcode_session=" ", csrf_token="")

    assert config.leetcode_session is None
    assert config.session() is None


def test_partial_session_tokens_are_rejected():
    assert Session.from_tokens(None, None) is None
    with pytest.raises(IncompleteCredentialsError):
        Session.from_tokens("sid", None)


def test_session_tokens_hidden_from_repr():
    assert "secret" not in repr(Session("secret", "also-secret"))


@pytest.mark.parametrize(
    "value, expected", [("Python", "python3"), (" C++ ", "cpp"), ("rs", "rust")]
)
def test_language_is_normalised_to_judge_slug(value, expected):
    assert Config(workspace_dir="/w", language=value).language == expected


def test_unsupported_language_is_rejected_up_front():
    with pytest.raises(ValidationError, match="Unsupported language"):
        Config(workspace_dir="/w", language="haskell")
