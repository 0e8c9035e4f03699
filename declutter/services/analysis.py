from typing import Callable, Optional

from ..config import settings
from ..errors import AnalysisError
from ..models.schemas import AnalysisRecord
from ..state.session import (
    SessionStore,
    apply_analysis_failure,
    apply_analysis_finished,
    apply_analysis_started,
    apply_analysis_success,
)
from ..utils.logger import logger
from ..utils.media import encode_image, make_thumbnail, to_data_url
from .gemini_service import GeminiService, get_gemini_service
from .prompts import (
    ANALYSIS_ERROR_MESSAGE,
    ANALYSIS_PROMPT,
    NO_SUGGESTIONS_TEXT,
    greeting_for,
    parse_room_type,
)


class AnalysisOrchestrator:
    """업로드 이미지 -> Gemini 분석 요청 -> AnalysisRecord"""

    def __init__(
        self,
        store: SessionStore,
        service_factory: Callable[[], GeminiService] = get_gemini_service,
        thumbnail_size: Optional[int] = None
    ):
        self.store = store
        self.service_factory = service_factory
        self.thumbnail_size = thumbnail_size or settings.thumbnail_size

    async def analyze(self, image: bytes, mime_type: str) -> Optional[AnalysisRecord]:
        """방 사진 분석

        성공하면 새 기록을 갤러리 맨 앞에 추가하고 선택한다.
        실패하면 last_error 만 설정하고 None 을 반환한다 (예외를 다시 던지지 않음).
        busy_analyzing 은 모든 종료 경로에서 해제된다.
        """
        self.store.apply(apply_analysis_started)
        try:
            record = await self._request_analysis(image, mime_type)
            self.store.apply(apply_analysis_success, record, greeting_for(record.room_type))
            logger.info(f"Analysis completed: {record.id} ({record.room_type})")
            return record

        except AnalysisError as e:
            logger.error(f"Analysis failed: {str(e)}", exc_info=True)
            self.store.apply(apply_analysis_failure, ANALYSIS_ERROR_MESSAGE)
            return None

        finally:
            self.store.apply(apply_analysis_finished)

    async def _request_analysis(self, image: bytes, mime_type: str) -> AnalysisRecord:
        try:
            encoded = encode_image(image)
            service = self.service_factory()
            text = await service.generate_from_image_and_text(image, mime_type, ANALYSIS_PROMPT)

            suggestions = text or NO_SUGGESTIONS_TEXT

            return AnalysisRecord(
                image_reference=to_data_url(encoded, mime_type),
                mime_type=mime_type,
                thumbnail_reference=make_thumbnail(image, self.thumbnail_size),
                room_type=parse_room_type(suggestions),
                suggestions_text=suggestions,
            )
        except Exception as e:
            raise AnalysisError(f"{type(e).__name__}: {str(e)}") from e
