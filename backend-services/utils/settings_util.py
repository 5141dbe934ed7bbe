"""
Process-wide gateway settings.

Read once from the environment (and any .env file loaded by the app module)
into a frozen object that is injected into GatewayService. Tests build their
own GatewaySettings instead of touching the environment.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = ('development', 'dev', 'local')


class GatewaySettings(BaseSettings):
    model_config = SettingsConfigDict(
        frozen=True,
        case_sensitive=False,
        extra='ignore',
        populate_by_name=True,
        env_ignore_empty=True,
    )

    google_api_key: str = Field(
        '',
        validation_alias=AliasChoices('GOOGLE_API_KEY', 'google_api_key'),
        description='Credential attached to every upstream call',
    )

    http_proxy: str | None = Field(
        None,
        validation_alias=AliasChoices('HTTP_PROXY', 'http_proxy'),
        description='Outbound proxy, honoured only in local development',
    )

    environment: str = Field(
        'production',
        validation_alias=AliasChoices('ENVIRONMENT', 'environment'),
    )

    vercel: bool = Field(
        False,
        validation_alias=AliasChoices('VERCEL', 'vercel'),
    )

    gemini_model: str = Field(
        'gemini-3-flash-preview',
        min_length=1,
        validation_alias=AliasChoices('GEMINI_MODEL', 'gemini_model'),
    )

    gemini_api_base: str = Field(
        'https://generativelanguage.googleapis.com/v1beta',
        min_length=1,
        validation_alias=AliasChoices('GEMINI_API_BASE', 'gemini_api_base'),
    )

    upstream_timeout: float | None = Field(
        None,
        gt=0,
        validation_alias=AliasChoices('UPSTREAM_TIMEOUT', 'upstream_timeout'),
        description='Seconds before an upstream call is abandoned; unset waits forever',
    )

    enable_client_cache: bool = Field(
        True,
        validation_alias=AliasChoices('ENABLE_HTTPX_CLIENT_CACHE', 'enable_client_cache'),
    )

    @property
    def is_local(self) -> bool:
        return (self.environment or '').strip().lower() in LOCAL_ENVIRONMENTS

    @property
    def execution_context(self) -> str:
        if self.is_local:
            return 'local'
        if self.vercel:
            return 'vercel'
        return 'cloud'

    @property
    def proxy_url(self) -> str | None:
        """Proxy to route upstream calls through, or None outside local development."""
        if self.is_local and self.http_proxy:
            return self.http_proxy
        return None

    @property
    def generate_content_url(self) -> str:
        return f"{self.gemini_api_base.rstrip('/')}/models/{self.gemini_model}:generateContent"


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    return GatewaySettings()
