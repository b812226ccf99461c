from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SOURCEMAPS_",
        extra="ignore",
    )

    log_level: str = "INFO"

    threads: int = Field(default=3, ge=1)
    gzip: bool = True

    public_dir: str = "public"
    assets_dir: str = "assets"
    script_extension: str = ".js"
    original_marker: str = ".orig"

    minifier_engine: str = "rjsmin"
    terser_binary: str = "terser"
