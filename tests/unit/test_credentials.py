"""Unit tests for credential providers."""

import pytest

from leettui.domain.exceptions import IncompleteCredentialsError
from leettui.domain.models import Session
from leettui.infrastructure import (
    ChainedCredentialProvider,
    EnvironmentCredentialProvider,
    StaticCredentialProvider,
)


def test_environment_provider_reads_both_tokens(monkeypatch):
    monkeypatch.setenv("LEETCODE_SESSION", "env-sid")
    monkeypatch.setenv("LEETCODE_CSRF_TOKEN", "env-csrf")

    session = EnvironmentCredentialProvider(load_env_file=False).resolve()

    assert session == Session("env-sid", "env-csrf")


def test_environment_provider_without_tokens(monkeypatch):
    monkeypatch.delenv("LEETCODE_SESSION", raising=False)
    monkeypatch.delenv("LEETCODE_CSRF_TOKEN", raising=False)

    assert EnvironmentCredentialProvider(load_env_file=False).resolve() is None


def test_environment_provider_rejects_half_a_session(monkeypatch):
    monkeypatch.setenv("LEETCODE_SESSION", "env-sid")
    monkeypatch.delenv("LEETCODE_CSRF_TOKEN", raising=False)

    with pytest.raises(IncompleteCredentialsError):
        EnvironmentCredentialProvider(load_env_file=False).resolve()


def test_chain_prefers_first_session(monkeypatch):
    monkeypatch.setenv("LEETCODE_SESSION", "env-sid")
    monkeypatch.setenv("LEETCODE_CSRF_TOKEN", "env-csrf")
    chain = ChainedCredentialProvider(
        EnvironmentCredentialProvider(load_env_file=False),
        StaticCredentialProvider("config-sid", "config-csrf"),
    )

    assert chain.resolve() == Session("env-sid", "env-csrf")


def test_chain_falls_back_to_static(monkeypatch):
    monkeypatch.delenv("LEETCODE_SESSION", raising=False)
    monkeypatch.delenv("LEETCODE_CSRF_TOKEN", raising=False)
    chain = ChainedCredentialProvider(
        EnvironmentCredentialProvider(load_env_file=False),
        StaticCredentialProvider("config-sid", "config-csrf"),
    )

    assert chain.resolve() == Session("config-sid", "config-csrf")


def test_chain_without_any_session():
    chain = ChainedCredentialProvider(StaticCredentialProvider(None, None))

    assert chain.resolve() is None
