"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )
    
    # App settings
    app_name: str = "Highlight Reel"
    debug: bool = True
    
    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    
    # Frontend
    frontend_url: str = "http://localhost:5173"
    
    # Seek settling (seconds) - tuned against the embedded player's observed latency
    initial_settle_seconds: float = 0.5  # Before the first segment after a load
    seek_settle_seconds: float = 0.2  # Before every subsequent segment
    ready_grace_seconds: float = 0.1  # Extra wait after the player reports ready
    
    # Reel start retries (host side)
    start_initial_delay_seconds: float = 1.5
    start_retry_attempts: int = 5
    start_retry_backoff_seconds: float = 1.0
    
    # Simulated player
    simulated_load_seconds: float = 0.5


settings = Settings()
