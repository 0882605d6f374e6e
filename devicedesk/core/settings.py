from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Common Config for all settings classes to pick up .env
settings_config = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore"
)

class GeminiSettings(BaseSettings):
    api_key: str = Field("", alias="GEMINI_API_KEY")
    model: str = Field("gemini-2.5-flash", alias="GEMINI_MODEL")

    model_config = settings_config

class GroqSettings(BaseSettings):
    api_key: str = Field("", alias="GROQ_API_KEY")
    base_url: str = Field("https://api.groq.com/openai/v1", alias="GROQ_BASE_URL")
    default_model: str = Field("llama-3.3-70b-versatile", alias="GROQ_DEFAULT_MODEL")

    model_config = settings_config

class SelfHostedSettings(BaseSettings):
    # Empty base_url means no self-hosted endpoint is deployed
    base_url: str = Field("", alias="SELF_HOSTED_BASE_URL")
    api_key: str = Field("none", alias="SELF_HOSTED_API_KEY")
    default_model: str = Field("qwen2.5:0.5b", alias="SELF_HOSTED_DEFAULT_MODEL")

    model_config = settings_config

class LLMSettings(BaseSettings):
    provider: str = Field("gemini", alias="LLM_PROVIDER")
    classifier_model: str = Field("", alias="LLM_CLASSIFIER_MODEL")
    temperature: float = Field(0.2, alias="LLM_TEMPERATURE")

    model_config = settings_config

class DeviceBackendSettings(BaseSettings):
    backend: str = Field("mock", alias="DEVICE_BACKEND")
    mock_latency_seconds: float = Field(1.0, alias="MOCK_LATENCY_SECONDS")
    graph_base_url: str = Field("https://graph.microsoft.com/v1.0", alias="GRAPH_BASE_URL")
    graph_access_token: str = Field("", alias="GRAPH_ACCESS_TOKEN")
    graph_timeout_seconds: float = Field(30.0, alias="GRAPH_TIMEOUT_SECONDS")

    model_config = settings_config

class AuthSettings(BaseSettings):
    secret_key: str = Field("dev_secret_key_change_in_prod", alias="SECRET_KEY")
    algorithm: str = Field("HS256", alias="ALGORITHM")
    allow_dev_token: bool = Field(True, alias="ALLOW_DEV_TOKEN")

    model_config = settings_config

class AppSettings(BaseSettings):
    env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    max_message_length: int = Field(2000, alias="MAX_MESSAGE_LENGTH")

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    groq: GroqSettings = Field(default_factory=GroqSettings)
    self_hosted: SelfHostedSettings = Field(default_factory=SelfHostedSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    devices: DeviceBackendSettings = Field(default_factory=DeviceBackendSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)

    model_config = settings_config

settings = AppSettings()
