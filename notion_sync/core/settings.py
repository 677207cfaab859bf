from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Notion Workspace Sync"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    notion_client_id: str = ""
    notion_client_secret: str = ""
    notion_redirect_uri: str = ""
    notion_oauth_owner: str | None = "user"
    notion_api_base_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_page_size: int = 100
    notion_requests_per_second: float = 3.0
    notion_burst_size: int = 10

    http_timeout_seconds: float = 30.0
    http_max_retries: int = 3

    crawl_max_concurrency: int = 8
    crawl_block_depth: int = 1
    oauth_state_ttl_seconds: int = 600

    token_store_backend: str = "memory"

    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = ""
    database_name: str = "notion_sync"
    database_pool_min_size: int = 1
    database_pool_max_size: int = 10

    encryption_key: str = ""


settings = Settings()
