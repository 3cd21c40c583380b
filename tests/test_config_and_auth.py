import pytest

from vk_mcp_server.auth import extract_access_token
from vk_mcp_server.config_loader import ServerConfig, create_client, load_config_from_env, require_access_token
from vk_mcp_server.errors import MissingAccessTokenError

ENV_VARS = (
    "VK_ACCESS_TOKEN",
    "VK_API_VERSION",
    "VK_GROUP_ID",
    "VK_REQUEST_TIMEOUT",
    "MCP_SERVER_HOST",
    "MCP_SERVER_PORT",
    "MCP_HTTP_HOST",
    "MCP_HTTP_PORT",
    "PORT",
    "MCP_SHARED_SECRET",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        # setenv first so values loaded from .env are rolled back too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env):
    cfg = load_config_from_env()
    assert cfg.vk_access_token is None
    assert cfg.vk_api_version == "5.199"
    assert cfg.server_port == 8765
    assert cfg.http_port == 3000
    assert cfg.log_level == "INFO"


def test_values_from_environment(clean_env):
    clean_env.setenv("VK_ACCESS_TOKEN", " token ")
    clean_env.setenv("VK_GROUP_ID", "123")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("VK_REQUEST_TIMEOUT", "3.5")

    cfg = load_config_from_env()
    assert cfg.vk_access_token == "token"
    assert cfg.vk_group_id == "123"
    assert cfg.http_port == 8080
    assert cfg.log_level == "DEBUG"
    assert cfg.request_timeout == 3.5


def test_http_port_wins_over_port(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("MCP_HTTP_PORT", "9000")
    assert load_config_from_env().http_port == 9000


def test_dotenv_file_is_read(clean_env, tmp_path):
    (tmp_path / ".env").write_text("VK_GROUP_ID=777\n")
    assert load_config_from_env().vk_group_id == "777"


def test_token_is_required_for_clients():
    with pytest.raises(MissingAccessTokenError) as info:
        require_access_token(ServerConfig())
    assert str(info.value) == "VK_ACCESS_TOKEN environment variable is required"


def test_create_client_uses_configured_version():
    client = create_client(ServerConfig(vk_api_version="5.131"), access_token="abc")
    assert client.api_version == "5.131"


def test_bearer_token():
    assert extract_access_token({"Authorization": "Bearer abc"}) == "abc"
    assert extract_access_token({"authorization": "bearer  abc "}) == "abc"


def test_token_headers():
    assert extract_access_token({"X-VK-Access-Token": "one"}) == "one"
    assert extract_access_token({"X-Access-Token": "two"}) == "two"
    assert extract_access_token({"Authorization": "Basic zzz", "X-Access-Token": "two"}) == "two"


def test_missing_token():
    with pytest.raises(MissingAccessTokenError):
        extract_access_token({"Authorization": "Bearer "})
