from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # OpenAI
    OPENAI_API_KEY: str | None = Field(None)
    TRANSCRIPTION_MODEL: str = Field("whisper-1")
    TRANSLATION_MODEL: str = Field("gpt-4o-mini")
    ENGINE_TIMEOUT_SEC: float = Field(30.0)
    ENGINE_MAX_RETRIES: int = Field(2)

    # Languages
    SOURCE_LANGUAGE: str = Field("English")
    TARGET_LANGUAGE: str = Field("Vietnamese")

    # Audio capture & chunking
    CAPTURE_SAMPLE_RATE: int = Field(48000)
    CHUNK_DURATION_MS: int = Field(5000)
    FLUSH_PARTIAL_CHUNK: bool = Field(True)

    # Transcoding
    TRANSCODER: str = Field("ffmpeg")
    FFMPEG_BINARY: str = Field("ffmpeg")
    TRANSCODE_TIMEOUT_SEC: float = Field(20.0)

    # Fan-out
    ORDERED_FANOUT: bool = Field(False)

    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(5000)
    DEBUG: bool = Field(True)

    # Metrics
    METRICS_ENABLED: bool = Field(False)
    METRICS_PORT: int = Field(8001)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()
