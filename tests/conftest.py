import pytest

from notion_sync.integrations.providers.notion.provider import NotionProvider
from notion_sync.integrations.core.credentials import CredentialsManager
from notion_sync.repositories.in_memory import InMemorySnapshotStore, InMemoryTokenStore
from tests.helpers import BASE_URL, FakeNotionApi, ScriptedApiClient


@pytest.fixture
def fake_api() -> FakeNotionApi:
    return FakeNotionApi(page_size=2)


@pytest.fixture
def api_client(fake_api: FakeNotionApi) -> ScriptedApiClient:
    return ScriptedApiClient(handler=fake_api, default_headers={"Notion-Version": "2022-06-28"})


@pytest.fixture
def provider(api_client: ScriptedApiClient) -> NotionProvider:
    return NotionProvider(api_client, base_url=BASE_URL, page_size=2)


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def snapshot_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def credentials_manager(token_store: InMemoryTokenStore) -> CredentialsManager:
    return CredentialsManager(token_store)
