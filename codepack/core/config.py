from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CODEPACK_",
        extra="ignore",
    )

    # App
    app_name: str = "Codepack"
    debug: bool = False
    log_level: str = "INFO"

    # Templates (loaded once at startup, read-only afterwards)
    templates_dir: Path = PACKAGE_TEMPLATES_DIR
    template_target: str = "rust"

    # Launcher
    host: str = "127.0.0.1"
    port: int = 0  # 0 = ephemeral, reported through the handshake line
    handshake_protocol: str = "http"

    # Text model defaults, used when a request omits them
    default_llm_timeout_s: float = 120.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
