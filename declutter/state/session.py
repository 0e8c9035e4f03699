"""세션 상태 컨테이너와 상태 전이 함수

모든 전이 함수는 순수 함수다. 기존 SessionState 를 수정하지 않고
변경이 반영된 새 인스턴스를 반환한다. 현재 상태는 SessionStore 가
보관하며, 오케스트레이터는 store.apply() 로만 전이를 적용한다.

generation 은 대화 범위(선택된 분석)가 바뀔 때마다 증가한다.
응답 대기 중에 범위가 바뀌었는지 판단하는 데 사용된다.
"""
from typing import Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..errors import RecordNotFoundError
from ..models.schemas import AnalysisRecord, ChatMessage


class SessionState(BaseModel):
    """프로세스 수명 동안 유지되는 단일 세션 상태"""
    model_config = ConfigDict(frozen=True)

    gallery: Tuple[AnalysisRecord, ...] = ()
    selected: Optional[AnalysisRecord] = None
    transcript: Tuple[ChatMessage, ...] = ()
    busy_analyzing: bool = False
    busy_chatting: bool = False
    last_error: Optional[str] = None
    generation: int = 0


def find_record(state: SessionState, record_id: str) -> AnalysisRecord:
    """id 로 갤러리 기록 조회"""
    for record in state.gallery:
        if record.id == record_id:
            return record
    raise RecordNotFoundError(record_id)


def apply_analysis_started(state: SessionState) -> SessionState:
    return state.model_copy(update={"busy_analyzing": True, "last_error": None})


def apply_analysis_success(
    state: SessionState, record: AnalysisRecord, greeting: str
) -> SessionState:
    """새 기록을 맨 앞에 추가하고 선택, 대화는 인사말 하나로 초기화"""
    return state.model_copy(update={
        "gallery": (record,) + state.gallery,
        "selected": record,
        "transcript": (ChatMessage(role="assistant", text=greeting),),
        "generation": state.generation + 1,
    })


def apply_analysis_failure(state: SessionState, message: str) -> SessionState:
    # 갤러리, 선택, 대화는 건드리지 않음
    return state.model_copy(update={"last_error": message})


def apply_analysis_finished(state: SessionState) -> SessionState:
    return state.model_copy(update={"busy_analyzing": False})


def append_user_turn(state: SessionState, text: str) -> SessionState:
    """사용자 메시지 즉시 추가 (응답 전에 화면에 보임)"""
    message = ChatMessage(role="user", text=text)
    return state.model_copy(update={"transcript": state.transcript + (message,)})


def append_assistant_turn(state: SessionState, text: str) -> SessionState:
    message = ChatMessage(role="assistant", text=text)
    return state.model_copy(update={"transcript": state.transcript + (message,)})


def set_chatting(state: SessionState, busy: bool) -> SessionState:
    return state.model_copy(update={"busy_chatting": busy})


def select_record(state: SessionState, record_id: str) -> SessionState:
    """기록 선택 - 이전 대화는 버려짐 (대화는 선택 단위로만 유지)"""
    record = find_record(state, record_id)
    return state.model_copy(update={
        "selected": record,
        "transcript": (),
        "generation": state.generation + 1,
    })


def delete_record(state: SessionState, record_id: str) -> SessionState:
    """기록 삭제 - 선택된 기록이었다면 선택과 대화도 초기화"""
    record = find_record(state, record_id)
    update = {"gallery": tuple(r for r in state.gallery if r.id != record.id)}

    if state.selected is not None and state.selected.id == record.id:
        update.update({
            "selected": None,
            "transcript": (),
            "generation": state.generation + 1,
        })

    return state.model_copy(update=update)


class SessionStore:
    """현재 SessionState 를 보관하고 전이를 적용하는 단일 소유자"""

    def __init__(self, state: Optional[SessionState] = None) -> None:
        self.state = state or SessionState()

    def apply(self, transition: Callable[..., SessionState], *args) -> SessionState:
        self.state = transition(self.state, *args)
        return self.state
