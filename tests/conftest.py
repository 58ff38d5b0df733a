"""
공용 fixture: Azure Speech REST 엔드포인트의 in-process fake 서버
"""
import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from azure_speech_client.core.endpoints import SpeechEndpoints

AUTH_PATH = "/sts/v1.0/issueToken"
TTS_PATH = "/cognitiveservices/v1"
STT_PATH = "/speech/recognition/conversation/cognitiveservices/v1"

RIFF_AUDIO = bytes([0x52, 0x49, 0x46, 0x46]) + bytes(range(256)) * 20


class FakeClock:
    """수동으로 진행시키는 monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSpeechBackend:
    """요청을 기록하고 설정 가능한 토큰 / TTS / STT 응답을 반환"""

    def __init__(self):
        self.auth_calls = 0
        self.auth_keys: List[str] = []
        self.auth_status = 200
        self.auth_body: Optional[str] = None
        self.auth_delay = 0.0
        self.auth_gate: Optional[asyncio.Event] = None
        self.auth_entered = asyncio.Event()

        self.tts_requests: List[Dict[str, Any]] = []
        self.tts_status = 200
        self.tts_body = RIFF_AUDIO
        self.tts_truncate = False

        self.stt_requests: List[Dict[str, Any]] = []
        self.stt_status = 200
        self.stt_body: Any = {"RecognitionStatus": "Success", "DisplayText": "hello world"}

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(AUTH_PATH, self.issue_token)
        app.router.add_post(TTS_PATH, self.text_to_speech)
        app.router.add_post(STT_PATH, self.speech_to_text)
        return app

    async def issue_token(self, request: web.Request) -> web.Response:
        self.auth_calls += 1
        self.auth_keys.append(request.headers.get("Ocp-Apim-Subscription-Key", ""))
        self.auth_entered.set()
        if self.auth_gate is not None:
            await self.auth_gate.wait()
        if self.auth_delay:
            await asyncio.sleep(self.auth_delay)

        if self.auth_status != 200:
            return web.Response(status=self.auth_status, text=self.auth_body or "", content_type="application/json")
        return web.Response(text=self.auth_body or f"token-{self.auth_calls}")

    async def text_to_speech(self, request: web.Request) -> web.Response:
        self.tts_requests.append({
            "headers": dict(request.headers),
            "body": await request.text(),
        })
        if self.tts_status != 200:
            return web.Response(status=self.tts_status)
        if self.tts_truncate:
            return await self._truncated_audio(request)
        return web.Response(body=self.tts_body, content_type="audio/x-wav")

    async def _truncated_audio(self, request: web.Request) -> web.StreamResponse:
        # Content-Length보다 적게 보낸 뒤 연결 종료
        response = web.StreamResponse()
        response.content_type = "audio/x-wav"
        response.content_length = len(self.tts_body)
        await response.prepare(request)
        await response.write(self.tts_body[: len(self.tts_body) // 2])
        request.transport.close()
        return response

    async def speech_to_text(self, request: web.Request) -> web.Response:
        received = 0
        async for chunk in request.content.iter_any():
            received += len(chunk)
        self.stt_requests.append({
            "headers": dict(request.headers),
            "query": dict(request.query),
            "received": received,
        })
        body = self.stt_body if isinstance(self.stt_body, str) else json.dumps(self.stt_body)
        return web.Response(status=self.stt_status, text=body, content_type="application/json")


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def backend():
    fake = FakeSpeechBackend()
    server = TestServer(fake.build_app())
    await server.start_server()
    fake.server = server
    fake.endpoints = SpeechEndpoints(
        auth_uri=str(server.make_url(AUTH_PATH)),
        text_to_speech_uri=str(server.make_url(TTS_PATH)),
        speech_to_text_uri=str(server.make_url(STT_PATH)),
    )
    yield fake
    await server.close()
