from typing import Callable, Optional, Sequence

from ..config import settings
from ..errors import ChatError
from ..models.schemas import AnalysisRecord, ChatMessage
from ..state.session import (
    SessionStore,
    append_assistant_turn,
    append_user_turn,
    set_chatting,
)
from ..utils.logger import logger
from .gemini_service import GeminiService, get_gemini_service
from .prompts import CHAT_ERROR_TEXT, EMPTY_REPLY_TEXT, build_system_framing


class ConversationOrchestrator:
    """선택된 분석을 컨텍스트로 한 후속 대화"""

    def __init__(
        self,
        store: SessionStore,
        service_factory: Callable[[], GeminiService] = get_gemini_service,
        discard_stale_replies: Optional[bool] = None
    ):
        self.store = store
        self.service_factory = service_factory
        self.discard_stale_replies = (
            settings.discard_stale_replies if discard_stale_replies is None else discard_stale_replies
        )

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        """사용자 메시지 전송

        빈 메시지이거나 이미 응답 대기 중이면 아무것도 하지 않는다.
        사용자 메시지는 요청 전에 바로 추가되고, 응답(또는 대체 문구)이
        이어서 추가된다. 실패는 대화 안의 assistant 메시지로 흡수된다.
        """
        message = (text or "").strip()
        state = self.store.state
        if not message or state.busy_chatting:
            return None

        history = state.transcript
        selected = state.selected
        generation = state.generation

        self.store.apply(append_user_turn, message)
        self.store.apply(set_chatting, True)
        try:
            try:
                reply = await self._request_reply(selected, history, message) or EMPTY_REPLY_TEXT
            except ChatError as e:
                logger.error(f"Chat failed: {str(e)}", exc_info=True)
                reply = CHAT_ERROR_TEXT

            if self.discard_stale_replies and self.store.state.generation != generation:
                logger.warning("Selection changed while waiting for reply, discarding it")
                return None

            self.store.apply(append_assistant_turn, reply)
            return self.store.state.transcript[-1]

        finally:
            self.store.apply(set_chatting, False)

    async def _request_reply(
        self,
        selected: Optional[AnalysisRecord],
        history: Sequence[ChatMessage],
        message: str
    ) -> str:
        framing = build_system_framing(selected)
        try:
            service = self.service_factory()
            return await service.generate_from_conversation(framing, history, message)
        except Exception as e:
            raise ChatError(f"{type(e).__name__}: {str(e)}") from e
