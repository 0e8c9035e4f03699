import asyncio
from typing import List, Optional, Sequence

from google import genai
from google.genai import types

from ..config import settings
from ..errors import GeminiServiceError
from ..models.schemas import ChatMessage
from ..utils.logger import logger


# ChatMessage.role -> Gemini Content.role
_GEMINI_ROLES = {"user": "user", "assistant": "model"}


class GeminiService:
    """Google Gemini API 서비스 (단발성 요청/응답, 스트리밍 없음)"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.gemini_api_key
        if not api_key:
            raise ValueError("GEMINI_API_KEY is not configured")

        self.model = model or settings.gemini_model
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=settings.gemini_timeout_seconds * 1000),
        )

        logger.info(f"GeminiService initialized (model={self.model})")

    async def generate_from_image_and_text(
        self,
        image: bytes,
        mime_type: str,
        prompt: str
    ) -> str:
        """이미지 + 텍스트 프롬프트로 응답 생성 (방 분석용)"""
        try:
            logger.info(f"Requesting image analysis ({mime_type}, {len(image)} bytes)")

            contents = [
                types.Part.from_bytes(data=image, mime_type=mime_type),
                prompt,
            ]

            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=contents,
            )

            text = response.text or ""
            logger.info(f"Image analysis response received ({len(text)} chars)")
            return text

        except Exception as e:
            logger.error(f"Image analysis request failed: {type(e).__name__}: {str(e)}", exc_info=True)
            raise GeminiServiceError(f"Image analysis request failed: {str(e)}") from e

    async def generate_from_conversation(
        self,
        system_framing: str,
        history: Sequence[ChatMessage],
        final_user_turn: str
    ) -> str:
        """시스템 지시문 + 전체 대화 이력으로 응답 생성 (채팅용)

        매 호출마다 지시문과 이력을 모두 다시 보낸다. 서버 측 채팅 세션은 쓰지 않음.
        """
        try:
            contents: List[types.Content] = [
                types.Content(
                    role=_GEMINI_ROLES[message.role],
                    parts=[types.Part.from_text(text=message.text)],
                )
                for message in history
            ]
            contents.append(
                types.Content(role="user", parts=[types.Part.from_text(text=final_user_turn)])
            )

            logger.info(f"Requesting chat reply ({len(contents)} turns)")

            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(system_instruction=system_framing),
            )

            return response.text or ""

        except Exception as e:
            logger.error(f"Chat request failed: {type(e).__name__}: {str(e)}", exc_info=True)
            raise GeminiServiceError(f"Chat request failed: {str(e)}") from e


# 싱글톤 인스턴스
_gemini_service = None

def get_gemini_service() -> GeminiService:
    """GeminiService 인스턴스 가져오기 (API 키가 없으면 ValueError)"""
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiService()
    return _gemini_service
