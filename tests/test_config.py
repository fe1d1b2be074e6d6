"""Tests for configuration and secret resolution."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from chainkit import config


class TestSecretResolution:
    def test_env_var_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        with patch.object(config, "_get_ssm_parameter") as ssm:
            assert config.get_openai_api_key() == "sk-env"
        ssm.assert_not_called()

    def test_placeholder_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "your_openai_api_key_here")
        with patch.object(config, "_ON_AWS", False):
            with pytest.raises(OSError, match="/chainkit/OPENAI_API_KEY"):
                config.get_openai_api_key()

    def test_falls_back_to_ssm_on_aws(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with patch.object(config, "_ON_AWS", True), \
                patch.object(config, "_get_ssm_parameter", return_value="sk-ssm") as ssm:
            assert config.get_openai_api_key() == "sk-ssm"
        ssm.assert_called_once_with("OPENAI_API_KEY")

    def test_ssm_not_consulted_locally(self, monkeypatch):
        monkeypatch.delenv("OPENAI_ORGANIZATION", raising=False)
        with patch.object(config, "_ON_AWS", False), \
                patch.object(config, "_get_ssm_parameter") as ssm:
            assert config.get_openai_organization() is None
        ssm.assert_not_called()


class TestNumbers:
    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("SOME_LIMIT", "7")
        assert config._number("SOME_LIMIT", "1", int) == 7

    def test_default(self, monkeypatch):
        monkeypatch.delenv("SOME_LIMIT", raising=False)
        assert config._number("SOME_LIMIT", "2.5", float) == 2.5

    def test_bad_value_names_the_variable(self, monkeypatch):
        monkeypatch.setenv("SOME_LIMIT", "ten")
        with pytest.raises(ValueError, match="SOME_LIMIT must be an integer"):
            config._number("SOME_LIMIT", "1", int)
