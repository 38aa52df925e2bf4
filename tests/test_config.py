"""
Tests for AuthConfig and environment loading.
"""

import dataclasses

import pytest

from simpleauth.algorithms import HashAlg
from simpleauth.config import DEFAULT_EXPIRE, AuthConfig
from simpleauth.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PRE_SHARED_KEY", "EXPIRE", "ALGORITHM"):
        monkeypatch.delenv(f"SIMPLEAUTH_{name}", raising=False)
    return monkeypatch


class TestAuthConfig:
    """Tests for configuration validation."""

    def test_defaults(self):
        """Should default to an empty key, 300 seconds and SHA256."""
        config = AuthConfig()

        assert config.pre_shared_key == ""
        assert config.expire == DEFAULT_EXPIRE == 300
        assert config.algorithm is HashAlg.SHA256

    def test_algorithm_name_is_resolved(self):
        """Should resolve an algorithm name to its member."""
        assert AuthConfig(algorithm="SHA512").algorithm is HashAlg.SHA512

    def test_none_key(self):
        """Should treat a None key as empty."""
        assert AuthConfig(pre_shared_key=None).pre_shared_key == ""

    def test_key_bytes_are_utf8(self):
        """Should expose the key as UTF-8 bytes."""
        assert AuthConfig(pre_shared_key="clé").key_bytes == "clé".encode("utf-8")

    @pytest.mark.parametrize("expire", [0, -10, True, "60", 1.5, None])
    def test_invalid_expire(self, expire):
        """Should reject windows that are not positive ints."""
        with pytest.raises(ConfigurationError):
            AuthConfig(expire=expire)

    def test_unknown_algorithm(self):
        """Should fail at configuration time for unsupported algorithms."""
        with pytest.raises(ConfigurationError):
            AuthConfig(algorithm="MD5")

    def test_non_string_key(self):
        """Should reject keys that are not str."""
        with pytest.raises(ConfigurationError):
            AuthConfig(pre_shared_key=b"bytes")

    def test_frozen(self):
        """Should not allow fields to be reassigned."""
        config = AuthConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.expire = 10

    def test_replace_validates(self):
        """Should validate the fields passed to replace()."""
        config = AuthConfig(pre_shared_key="k")

        assert config.replace(expire=60) == AuthConfig(pre_shared_key="k", expire=60)
        with pytest.raises(ConfigurationError):
            config.replace(expire=0)


class TestFromEnv:
    """Tests for AuthConfig.from_env()."""

    def test_defaults_when_unset(self, clean_env):
        """Should fall back to defaults when no variable is set."""
        assert AuthConfig.from_env() == AuthConfig()

    def test_reads_variables(self, clean_env):
        """Should read key, window and algorithm from the environment."""
        clean_env.setenv("SIMPLEAUTH_PRE_SHARED_KEY", "s3cret")
        clean_env.setenv("SIMPLEAUTH_EXPIRE", "60")
        clean_env.setenv("SIMPLEAUTH_ALGORITHM", "SHA512")

        config = AuthConfig.from_env()

        assert config.pre_shared_key == "s3cret"
        assert config.expire == 60
        assert config.algorithm is HashAlg.SHA512

    def test_custom_prefix(self, clean_env):
        """Should honour a custom variable prefix."""
        clean_env.setenv("GATEWAY_PRE_SHARED_KEY", "gw")

        assert AuthConfig.from_env(prefix="GATEWAY_").pre_shared_key == "gw"

    @pytest.mark.parametrize("name,value", [
        ("SIMPLEAUTH_EXPIRE", "soon"),
        ("SIMPLEAUTH_EXPIRE", "0"),
        ("SIMPLEAUTH_ALGORITHM", "sha256"),
    ])
    def test_invalid_values(self, clean_env, name, value):
        """Should raise ConfigurationError for unusable values."""
        clean_env.setenv(name, value)

        with pytest.raises(ConfigurationError):
            AuthConfig.from_env()
