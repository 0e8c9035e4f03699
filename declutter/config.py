"""애플리케이션 설정"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """환경변수 기반 설정"""

    # API Keys (비어 있으면 Gemini 호출 시점에 실패 처리)
    gemini_api_key: str = ""

    # Application
    app_name: str = "DeclutterAI"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # File Upload
    max_upload_size_mb: int = 10
    thumbnail_size: int = 160

    # Gemini API
    gemini_model: str = "gemini-3.1-pro-preview"
    gemini_timeout_seconds: int = 60

    # Chat
    discard_stale_replies: bool = True  # 선택이 바뀐 뒤 도착한 답변은 버림

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = False


# 전역 설정 인스턴스
settings = Settings()
