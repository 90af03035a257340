"""Environment-driven configuration."""

import pytest
from pydantic import ValidationError

from core.config import Config, load_config
from core.exceptions import ConfigurationError


@pytest.fixture
def no_env_file(tmp_path):
    return tmp_path / "missing.env"


def test_defaults(no_env_file):
    config = load_config({}, env_file=no_env_file)

    assert config.proxy.port == 3000
    assert config.auth.api_key == "your-secret-api-key-here"
    assert config.upstream.target.base_url == "http://localhost:11434"
    assert config.cors.allowed_origins == ()
    assert config.limits.max_body_size == 50 * 1024 * 1024
    assert config.limits.upstream_timeout == 600.0


def test_environment_values(no_env_file):
    config = load_config(
        {
            "PORT": "8080",
            "API_KEY": "abc",
            "OLLAMA_URL": "https://gpu-box.internal",
            "CORS_ALLOWED_ORIGINS": "https://a.example, https://b.example,",
            "DASHBOARD": "false",
            "UPSTREAM_TIMEOUT": "30",
        },
        env_file=no_env_file,
    )

    assert config.proxy.port == 8080
    assert config.proxy.dashboard is False
    assert config.auth.api_key == "abc"
    assert config.upstream.target.scheme == "https"
    assert config.upstream.target.port == 443
    assert config.cors.allowed_origins == ("https://a.example", "https://b.example")
    assert config.limits.upstream_timeout == 30.0


def test_upstream_path_is_ignored(no_env_file):
    config = load_config({"OLLAMA_URL": "http://10.0.0.5:9000/some/prefix"}, env_file=no_env_file)

    target = config.upstream.target
    assert (target.scheme, target.host, target.port) == ("http", "10.0.0.5", 9000)


def test_env_file_loses_to_real_environment(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("API_KEY=from-file\nPORT=4000\n")

    config = load_config({"API_KEY": "from-env"}, env_file=env_file)

    assert config.auth.api_key == "from-env"
    assert config.proxy.port == 4000


@pytest.mark.parametrize(
    "environ",
    [
        {"PORT": "not-a-port"},
        {"PORT": "70000"},
        {"OLLAMA_URL": "ftp://localhost:11434"},
        {"OLLAMA_URL": "http://"},
        {"OLLAMA_URL": "http://localhost:port"},
        {"API_KEY": "   "},
        {"MAX_BODY_SIZE": "0"},
    ],
)
def test_invalid_values_raise(environ, no_env_file):
    with pytest.raises(ConfigurationError):
        load_config(environ, env_file=no_env_file)


def test_config_is_immutable():
    config = Config()

    with pytest.raises(ValidationError):
        config.auth.api_key = "changed"
