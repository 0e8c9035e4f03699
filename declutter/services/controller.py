from typing import Callable, Optional, Tuple

from ..models.schemas import (
    AnalysisRecord,
    ChatMessage,
    GalleryItem,
    SelectedAnalysis,
    SessionSnapshot,
)
from ..state import session
from ..state.session import SessionState, SessionStore
from ..utils.logger import logger
from ..utils.media import decode_data_url
from .analysis import AnalysisOrchestrator
from .conversation import ConversationOrchestrator
from .gemini_service import GeminiService, get_gemini_service


class SessionController:
    """세션 상태와 두 오케스트레이터를 소유하는 최상위 컨트롤러"""

    def __init__(
        self,
        service_factory: Callable[[], GeminiService] = get_gemini_service,
        store: Optional[SessionStore] = None
    ):
        self.store = store or SessionStore()
        self.analysis = AnalysisOrchestrator(self.store, service_factory)
        self.conversation = ConversationOrchestrator(self.store, service_factory)

    @property
    def state(self) -> SessionState:
        return self.store.state

    async def analyze(self, image: bytes, mime_type: str) -> Optional[AnalysisRecord]:
        return await self.analysis.analyze(image, mime_type)

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        return await self.conversation.send_message(text)

    def select_record(self, record_id: str) -> AnalysisRecord:
        state = self.store.apply(session.select_record, record_id)
        logger.info(f"Selected analysis {record_id}")
        return state.selected

    def delete_record(self, record_id: str) -> None:
        self.store.apply(session.delete_record, record_id)
        logger.info(f"Deleted analysis {record_id}")

    def image_for(self, record_id: str) -> Tuple[str, bytes]:
        """원본 이미지 (mime_type, bytes)"""
        record = session.find_record(self.state, record_id)
        return decode_data_url(record.image_reference)

    def snapshot(self) -> SessionSnapshot:
        state = self.state
        selected = None
        if state.selected is not None:
            selected = SelectedAnalysis(
                id=state.selected.id,
                room_type=state.selected.room_type,
                suggestions_text=state.selected.suggestions_text,
                created_at=state.selected.created_at,
                image_url=f"/api/images/{state.selected.id}",
            )

        return SessionSnapshot(
            gallery=[
                GalleryItem(
                    id=record.id,
                    room_type=record.room_type,
                    created_at=record.created_at,
                    thumbnail_reference=record.thumbnail_reference,
                )
                for record in state.gallery
            ],
            selected=selected,
            transcript=list(state.transcript),
            busy_analyzing=state.busy_analyzing,
            busy_chatting=state.busy_chatting,
            last_error=state.last_error,
        )


# 싱글톤 인스턴스 (단일 사용자, 프로세스 수명 동안 유지)
_controller = None

def get_controller() -> SessionController:
    """SessionController 인스턴스 가져오기"""
    global _controller
    if _controller is None:
        _controller = SessionController()
    return _controller
