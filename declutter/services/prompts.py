"""Gemini 프롬프트 및 사용자 안내 문구"""
import re
from typing import Optional

from ..models.schemas import UNKNOWN_ROOM, AnalysisRecord


ANALYSIS_PROMPT = (
    "Analyze this room photo. Identify the room type and provide specific, actionable "
    "decluttering and organization suggestions. Format the response as follows:\n"
    "Room Type: [Type]\n\n"
    "Suggestions:\n"
    "- [Suggestion 1]\n"
    "- [Suggestion 2]\n"
    "..."
)

GENERIC_FRAMING = (
    "You are an expert interior organizer. "
    "Help the user declutter and organize their home."
)

NO_SUGGESTIONS_TEXT = "No suggestions generated."
ANALYSIS_ERROR_MESSAGE = "Failed to analyze image. Please check your API key and connection."
EMPTY_REPLY_TEXT = "I'm sorry, I couldn't process that."
CHAT_ERROR_TEXT = "Sorry, I encountered an error. Please try again."

_ROOM_TYPE_PATTERN = re.compile(r"Room Type:\s*(.*)", re.IGNORECASE)


def parse_room_type(text: str) -> str:
    """응답에서 'Room Type:' 줄을 찾아 방 종류 추출

    줄을 찾지 못하거나 값이 비어 있으면 UNKNOWN_ROOM 을 반환한다.
    파싱 실패는 오류가 아니다.
    """
    match = _ROOM_TYPE_PATTERN.search(text or "")
    if not match:
        return UNKNOWN_ROOM
    room_type = match.group(1).strip()
    return room_type or UNKNOWN_ROOM


def greeting_for(room_type: str) -> str:
    return f"I've analyzed your {room_type}. How can I help you further with organizing this space?"


def build_system_framing(record: Optional[AnalysisRecord]) -> str:
    """선택된 분석 결과를 대화 컨텍스트로 포함한 시스템 지시문"""
    if record is None:
        return GENERIC_FRAMING
    return (
        "You are an expert interior organizer. "
        f"You are currently helping the user with their {record.room_type}. "
        f"Use the previous analysis as context: {record.suggestions_text}"
    )
