"""업로드 이미지 인코딩 및 썸네일 유틸리티"""
import base64
import binascii
import re
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .logger import logger


_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def encode_image(image: bytes) -> str:
    """이미지 바이트를 base64 문자열로 변환"""
    if not image:
        raise ValueError("Image content is empty")
    return base64.b64encode(image).decode("ascii")


def to_data_url(encoded: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """data URL 을 (mime_type, bytes) 로 복원"""
    match = _DATA_URL_PATTERN.match(data_url)
    if not match:
        raise ValueError("Not a base64 data URL")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return match.group("mime"), data


def make_thumbnail(image: bytes, max_size: int = 160) -> Optional[str]:
    """갤러리용 PNG 썸네일 data URL 생성

    가로세로 비율을 유지하며 max_size 안에 맞춘다. 알파 채널은 흰 배경으로
    합성한다. Pillow 가 열 수 없는 이미지는 None 을 반환한다 (분석은 계속 진행).
    """
    try:
        with Image.open(BytesIO(image)) as img:
            img.thumbnail((max_size, max_size))
            if img.mode in ("RGBA", "LA", "P"):
                rgba = img.convert("RGBA")
                background = Image.new("RGB", rgba.size, (255, 255, 255))
                background.paste(rgba, mask=rgba.split()[-1])
                img = background
            elif img.mode != "RGB":
                img = img.convert("RGB")

            buffer = BytesIO()
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning(f"Thumbnail generation skipped: {e}")
        return None

    return to_data_url(encode_image(buffer.getvalue()), "image/png")
