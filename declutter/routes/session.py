import mimetypes

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from ..config import settings
from ..errors import RecordNotFoundError
from ..models.schemas import ChatRequest, SessionSnapshot
from ..services.controller import SessionController, get_controller
from ..utils.logger import logger

router = APIRouter(prefix="/api", tags=["declutter"])


async def _read_upload(file: UploadFile) -> bytes:
    """업로드 파일 읽기 (청크로 읽으면서 크기 검증)"""
    max_size = settings.max_upload_size_mb * 1024 * 1024
    content = bytearray()
    chunk_size = 1024 * 1024  # 1MB chunks

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        content.extend(chunk)
        if len(content) > max_size:
            logger.warning(f"File too large: {len(content)} bytes")
            raise HTTPException(
                status_code=413,
                detail=f"File is too large. Maximum size is {settings.max_upload_size_mb}MB."
            )

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    return bytes(content)


def _upload_mime_type(file: UploadFile) -> str:
    # 형식 검증은 Gemini 에 맡김, 파라미터(;name=...)는 제거
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type and content_type != "application/octet-stream":
        return content_type
    guessed, _ = mimetypes.guess_type(file.filename or "")
    return guessed or "application/octet-stream"


@router.get("/session", response_model=SessionSnapshot)
async def get_session(controller: SessionController = Depends(get_controller)):
    """현재 세션 상태"""
    return controller.snapshot()


@router.post("/analyze", response_model=SessionSnapshot)
async def analyze_room(
    file: UploadFile = File(...),
    controller: SessionController = Depends(get_controller)
):
    """방 사진 업로드 및 분석

    분석 실패는 HTTP 오류가 아니라 snapshot.last_error 로 전달된다.
    """
    logger.info(f"Analysis requested: {file.filename}")
    content = await _read_upload(file)
    await controller.analyze(content, _upload_mime_type(file))
    return controller.snapshot()


@router.post("/chat", response_model=SessionSnapshot)
async def chat(request: ChatRequest, controller: SessionController = Depends(get_controller)):
    """후속 대화 메시지 전송 (빈 메시지는 무시)"""
    await controller.send_message(request.message)
    return controller.snapshot()


@router.post("/gallery/{record_id}/select", response_model=SessionSnapshot)
async def select_record(record_id: str, controller: SessionController = Depends(get_controller)):
    """갤러리 기록 선택 (대화 초기화)"""
    try:
        controller.select_record(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Analysis not found.")
    return controller.snapshot()


@router.delete("/gallery/{record_id}", response_model=SessionSnapshot)
async def delete_record(record_id: str, controller: SessionController = Depends(get_controller)):
    """갤러리 기록 삭제"""
    try:
        controller.delete_record(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Analysis not found.")
    return controller.snapshot()


@router.get("/images/{record_id}")
async def get_image(record_id: str, controller: SessionController = Depends(get_controller)):
    """분석 기록의 원본 이미지 반환"""
    try:
        mime_type, data = controller.image_for(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Image not found.")
    return Response(content=data, media_type=mime_type)
