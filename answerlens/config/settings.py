from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    storage_backend: str = "postgres"
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "answerlens"
    db_username: str = "answerlens"
    db_password: str = "secret"

    max_file_size_bytes: int = 20 * 1024 * 1024

    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    ocr_max_retries: int = 3
    ocr_backoff_base_seconds: float = 1.0
    ocr_timeout_seconds: int = 60
    ocr_max_concurrency: int = 3
    ocr_fix_char_confusions: bool = True
    ocr_tesseract_psm: int = 3

    pdf_engine: str = "pymupdf"
    pdf_render_dpi: int = 200
    pdf_max_pages: int = 20

    min_text_length: int = 50
    chunk_max_length: int = 8000
    reuse_completed_analyses: bool = False

    analysis_provider: str = "openai"
    analysis_api_key: str = ""
    analysis_model_name: str = "gpt-4o-mini"
    analysis_base_url: str = ""
    analysis_timeout_seconds: int = 60
    analysis_temperature: float = 0.3
    analysis_max_retries: int = 2
    analysis_backoff_base_seconds: float = 1.0
    analysis_max_concurrency: int = 3
    analysis_dedup_prefix_length: int = 50
