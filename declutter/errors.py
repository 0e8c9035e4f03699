"""도메인 예외"""


class DeclutterError(Exception):
    """DeclutterAI 공통 예외"""


class GeminiServiceError(DeclutterError):
    """Gemini API 호출 실패 (인증, 네트워크, 쿼터, 응답 형식)"""


class AnalysisError(DeclutterError):
    """이미지 분석 실패 - 분석 오케스트레이터 경계에서 흡수됨"""


class ChatError(DeclutterError):
    """채팅 응답 실패 - 대화 오케스트레이터 경계에서 흡수됨"""


class RecordNotFoundError(DeclutterError):
    """갤러리에 없는 분석 기록"""

    def __init__(self, record_id: str):
        super().__init__(f"Analysis record not found: {record_id}")
        self.record_id = record_id
