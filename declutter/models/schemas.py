from datetime import datetime, timezone
from typing import List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_ROOM = "Unknown Room"


def _new_record_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisRecord(BaseModel):
    """방 분석 결과 (생성 후 변경 불가)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_record_id)
    image_reference: str
    mime_type: str
    thumbnail_reference: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    room_type: str = UNKNOWN_ROOM
    suggestions_text: str


class ChatMessage(BaseModel):
    """채팅 메시지"""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    """채팅 요청"""
    message: str


class GalleryItem(BaseModel):
    """갤러리 목록 항목 (원본 이미지 제외)"""
    id: str
    room_type: str
    created_at: datetime
    thumbnail_reference: Optional[str] = None


class SelectedAnalysis(BaseModel):
    """선택된 분석 상세"""
    id: str
    room_type: str
    suggestions_text: str
    created_at: datetime
    image_url: str


class SessionSnapshot(BaseModel):
    """세션 상태 응답"""
    gallery: List[GalleryItem]
    selected: Optional[SelectedAnalysis] = None
    transcript: List[ChatMessage]
    busy_analyzing: bool
    busy_chatting: bool
    last_error: Optional[str] = None
