"""
Chunked 업로드용 오디오 청크 생성기 (pull 방식)
"""
import inspect
import logging
from typing import Any, AsyncIterator

logger = logging.getLogger(__name__)

# 업로드 청크 크기 (bytes)
BUFFER_SIZE = 1024


async def iter_audio_chunks(audio_stream: Any, chunk_size: int = BUFFER_SIZE) -> AsyncIterator[bytes]:
    """
    오디오 스트림을 순차적으로 읽어 고정 크기 청크로 반환

    스트림은 현재 위치부터 정확히 한 번만 읽고 되감지 않으므로,
    큰 파일도 메모리에 모두 올리지 않고 업로드할 수 있습니다.
    일반 바이너리 파일 객체와 비동기 ``read``를 가진 객체
    (예: aiofiles 핸들, aiohttp StreamReader) 모두 지원합니다.

    Args:
        audio_stream: ``read(n)``을 가진 바이너리 파일 객체
        chunk_size: 청크당 최대 바이트 수

    Yields:
        bytes: 최대 ``chunk_size`` 바이트의 청크
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    total = 0
    while True:
        chunk = audio_stream.read(chunk_size)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        if not chunk:
            break
        total += len(chunk)
        yield bytes(chunk)

    logger.debug(f"Audio stream exhausted: {total} bytes")
