from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_max_tokens: int = 2500

    # OpenAI (chat + DALL-E)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.7
    dalle_model: str = "dall-e-3"

    # Google Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"

    # Stability AI
    stability_api_key: str = ""
    stability_base_url: str = "https://api.stability.ai"
    stability_engine: str = "stable-diffusion-xl-1024-v1-0"

    # Image proxies (served by this app)
    image_proxy_base_url: str = "http://localhost:8000"
    max_generated_images_per_pipeline: int = 3

    # Transport timeouts (seconds)
    text_timeout_s: float = 120.0
    image_timeout_s: float = 90.0

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def missing(self, *fields: str) -> list[str]:
        """Names of the given credential fields that are empty."""
        return [name for name in fields if not getattr(self, name)]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
