from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_DOMAINS = [
    "terabox.com",
    "1024tera.com",
    "teraboxapp.com",
    "nephobox.com",
    "freeterabox.com",
    "momerybox.com",
    "tibibox.com",
    "dubox.com",
    "teraboxlink.com",
]


class Settings(BaseSettings):
    app_name: str = "terabox-link-service"
    app_env: str = "dev"
    terabox_cookie: str = ""
    api_base_url: str = "https://www.terabox.com"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    allowed_domains: list[str] = DEFAULT_ALLOWED_DOMAINS
    max_files: int = 10
    link_delay_seconds: float = 2.0
    info_timeout_seconds: float = 15.0
    link_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TBX_")

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
