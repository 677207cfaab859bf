import pytest

from notion_sync.core.dependencies import build_container, get_api_client, get_token_store
from notion_sync.core.lifespan import lifespan
from notion_sync.core.settings import Settings
from notion_sync.integrations.core.exceptions import ConfigurationError
from notion_sync.repositories.in_memory import InMemoryTokenStore
from notion_sync.repositories.token_repository import PostgresTokenStore
from notion_sync.utils.crypto import generate_encryption_key


def make_settings(**overrides) -> Settings:
    values = {
        "notion_client_id": "client-123",
        "notion_client_secret": "shh",
        "notion_redirect_uri": "https://app.example.com/cb",
        **overrides,
    }
    return Settings(_env_file=None, **values)


def test_missing_client_credentials_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        build_container(make_settings(notion_client_secret=""))


def test_api_client_sends_notion_version():
    client = get_api_client(make_settings(notion_version="2022-06-28"))
    assert client._default_headers == {"Notion-Version": "2022-06-28"}


def test_postgres_backend_requires_encryption_key():
    with pytest.raises(ConfigurationError):
        get_token_store(make_settings(token_store_backend="postgres"))

    store = get_token_store(
        make_settings(token_store_backend="postgres", encryption_key=generate_encryption_key())
    )
    assert isinstance(store, PostgresTokenStore)


async def test_container_wiring():
    container = build_container(make_settings(crawl_block_depth=3))

    assert isinstance(container.token_store, InMemoryTokenStore)
    assert container.db_connection is None
    assert container.oauth_service.describe()["client_id"] != "client-123"
    assert container.crawl_service._block_depth == 3
    assert container.crawl_service._credentials_manager is container.credentials_manager
    await container.close()


async def test_lifespan_yields_container_and_closes():
    async with lifespan(make_settings()) as container:
        assert await container.crawl_service.get_snapshot("u1") is None


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [({"log_level": "WARNING"}, "WARNING"), ({"log_level": "WARNING", "debug": True}, "DEBUG")],
)
async def test_lifespan_log_level_follows_debug_flag(monkeypatch, overrides, expected):
    levels = []
    monkeypatch.setattr("notion_sync.core.lifespan.setup_logging", levels.append)

    async with lifespan(make_settings(**overrides)):
        pass
    assert levels == [expected]
