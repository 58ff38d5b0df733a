"""
Azure Speech Service (REST)

Azure Speech REST 엔드포인트를 사용한 TTS(텍스트→음성) / STT(음성→텍스트) 서비스입니다.
모든 호출은 먼저 SpeechTokenManager에서 토큰을 받고 (8분 캐싱),
공유 aiohttp 세션으로 HTTP 요청을 수행합니다.
"""
import asyncio
import io
import json
import logging
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from azure_speech_client.config import Settings
from azure_speech_client.core.audio_stream import BUFFER_SIZE, iter_audio_chunks
from azure_speech_client.core.endpoints import SpeechEndpoints
from azure_speech_client.core.exceptions import (
    ConfigurationError,
    ServiceError,
    TransportError,
    ValidationError,
)
from azure_speech_client.core.ssml import build_ssml
from azure_speech_client.core.token_manager import SpeechTokenManager
from azure_speech_client.schemas.speech import (
    Gender,
    ProfanityMode,
    RecognitionResultFormat,
    SpeechRecognitionResponse,
    TextToSpeechParameters,
)

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
JSON_MEDIA_TYPE = "application/json"
WAV_AUDIO_MEDIA_TYPE = "audio/wav"

MAX_TEXT_LENGTH_FOR_SPEECH = 800

_TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


class SpeechService:
    """
    Azure Speech REST 서비스

    Features:
    - synthesize(): SSML → 오디오 (메모리 스트림으로 수신)
    - recognize(): WAV 스트림 → 텍스트 (chunked 업로드, 1024바이트 단위)
    - SpeechTokenManager로 Bearer 토큰 캐싱/갱신
    - 인스턴스당 aiohttp 세션 1개 (close() 또는 async with로 정리)

    Example:
        >>> async with SpeechService(region="westus", subscription_key="<key>") as service:
        ...     with open("SpeechSample.wav", "rb") as audio:
        ...         result = await service.recognize(audio, "en-US")
        ...     print(result.display_text)
    """

    def __init__(
        self,
        region: Optional[str] = None,
        subscription_key: Optional[str] = None,
        *,
        auth_uri: Optional[str] = None,
        endpoints: Optional[SpeechEndpoints] = None,
        timeout: float = 30.0,
        token_timeout: float = 10.0,
        user_agent: str = "TextToSpeechClient"
    ):
        """
        Initialize Speech Service.

        Args:
            region: Speech 리소스의 Azure 리전 (모든 엔드포인트 URI가 여기서 파생됨)
            subscription_key: Speech 리소스 구독 키 (같은 리전)
            auth_uri: 토큰 서비스 URI 재정의 (비표준 배포용)
            endpoints: 리전 대신 직접 지정하는 엔드포인트 세트
            timeout: 연결/응답 읽기 타임아웃 (초)
            token_timeout: 토큰 요청 전체 타임아웃 (초)
            user_agent: TTS 요청에 보내는 클라이언트 식별자
        """
        if region and endpoints is not None:
            raise ConfigurationError("Pass either region or endpoints, not both")

        self._timeout = timeout
        self._token_timeout = token_timeout
        self.user_agent = user_agent

        self._session: Optional[aiohttp.ClientSession] = None
        self._closed = False

        self._region = region
        self._auth_uri_override = auth_uri
        if endpoints is None:
            endpoints = SpeechEndpoints.from_region(region, auth_uri=auth_uri)
        self._endpoints = endpoints
        self._token_manager = self._create_token_manager(subscription_key)
        logger.info(f"Azure Speech service configured (region={region or '-'})")

    @classmethod
    def from_settings(cls, settings: Settings) -> 'SpeechService':
        """
        환경 설정으로 서비스 생성

        Args:
            settings: 로드된 Settings

        Returns:
            SpeechService
        """
        return cls(
            region=settings.AZURE_SPEECH_REGION or None,
            subscription_key=settings.AZURE_SPEECH_KEY or None,
            auth_uri=settings.AZURE_SPEECH_AUTH_URI,
            timeout=settings.SPEECH_HTTP_TIMEOUT,
            token_timeout=settings.SPEECH_TOKEN_TIMEOUT,
            user_agent=settings.SPEECH_USER_AGENT,
        )

    def _create_token_manager(self, subscription_key: Optional[str]) -> SpeechTokenManager:
        return SpeechTokenManager(
            subscription_key,
            self._endpoints.auth_uri,
            session_factory=self.get_session,
            timeout=self._token_timeout,
        )

    # ========== properties ==========

    @property
    def region(self) -> Optional[str]:
        return self._region

    @property
    def endpoints(self) -> SpeechEndpoints:
        return self._endpoints

    @property
    def authentication_uri(self) -> Optional[str]:
        return self._endpoints.auth_uri

    @property
    def text_to_speech_uri(self) -> Optional[str]:
        return self._endpoints.text_to_speech_uri

    @property
    def speech_to_text_uri(self) -> Optional[str]:
        return self._endpoints.speech_to_text_uri

    @property
    def token_manager(self) -> SpeechTokenManager:
        return self._token_manager

    @property
    def subscription_key(self) -> Optional[str]:
        return self._token_manager.subscription_key

    @subscription_key.setter
    def subscription_key(self, value: Optional[str]) -> None:
        self._token_manager.subscription_key = value

    # ========== session lifecycle ==========

    async def get_session(self) -> aiohttp.ClientSession:
        """aiohttp 세션 재사용 (TCP 연결 풀링)"""
        if self._closed:
            raise ConfigurationError("SpeechService is closed")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
        return self._session

    async def close(self) -> None:
        """세션 종료 (여러 번 호출해도 안전)"""
        if self._closed:
            return
        self._closed = True
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Azure Speech service session closed")
        self._session = None

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> 'SpeechService':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def initialize(self, region: Optional[str] = None, subscription_key: Optional[str] = None) -> None:
        """
        첫 요청 전에 토큰 사전 발급

        region이 주어지면 세 엔드포인트를 모두 새 리전에서 다시 파생합니다
        (auth_uri 재정의는 유지). 생략된 인자는 현재 값을 그대로 사용합니다.

        Args:
            region: 새 Azure 리전
            subscription_key: 새 구독 키

        Raises:
            ConfigurationError: 구독 키가 없음
            ServiceError: 토큰 서비스가 실패 응답을 반환
            TransportError: 토큰 서비스에 연결 불가
        """
        if region is not None:
            key = subscription_key if subscription_key is not None else self.subscription_key
            self._region = region
            self._endpoints = SpeechEndpoints.from_region(region, auth_uri=self._auth_uri_override)
            self._token_manager = self._create_token_manager(key)
            logger.info(f"Azure Speech service reconfigured (region={region})")
        elif subscription_key is not None:
            self.subscription_key = subscription_key

        await self._token_manager.get_token()

    # ========== TTS ==========

    async def synthesize(self, parameters: TextToSpeechParameters) -> io.BytesIO:
        """
        텍스트를 음성으로 변환

        Args:
            parameters: 언어, 음성, 텍스트, 출력 포맷

        Returns:
            io.BytesIO: 오프셋 0에 위치한 오디오 데이터

        Raises:
            ConfigurationError: 인증 또는 TTS 엔드포인트 미설정
            ValidationError: 파라미터 누락 또는 800자 초과 텍스트
            TransportError: 엔드포인트 연결 불가
            ServiceError: 실패 응답 또는 오디오 수신 중 오류
        """
        if not self.authentication_uri:
            raise ConfigurationError("Authentication URI is not set")
        if not self.text_to_speech_uri:
            raise ConfigurationError("Text-to-speech URI is not set")
        if parameters is None:
            raise ValidationError("Text-to-speech parameters are required")
        if parameters.text is None or len(parameters.text) > MAX_TEXT_LENGTH_FOR_SPEECH:
            raise ValidationError(
                f"Input text cannot be null or longer than {MAX_TEXT_LENGTH_FOR_SPEECH} characters"
            )

        gender = "Male" if parameters.voice_type == Gender.MALE else "Female"
        ssml = build_ssml(parameters.language, gender, parameters.voice_name, parameters.text)
        headers = dict(parameters.build_headers(self.user_agent))

        # 토큰 발급 후 인증된 요청 전송
        headers[AUTHORIZATION_HEADER] = await self._token_manager.get_token()

        logger.info(
            f"Starting TTS: voice={parameters.voice_name}, format={headers['X-Microsoft-OutputFormat']}, "
            f"length={len(parameters.text)}"
        )
        session = await self.get_session()

        try:
            async with session.post(
                self.text_to_speech_uri,
                data=ssml.encode("utf-8"),
                headers=headers
            ) as response:
                if not 200 <= response.status < 300:
                    logger.error(f"TTS request failed: {response.status} {response.reason}")
                    raise ServiceError(response.reason or "Text-to-speech request failed", response.status)

                try:
                    result = io.BytesIO()
                    async for chunk in response.content.iter_chunked(BUFFER_SIZE):
                        result.write(chunk)
                    result.seek(0)
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    logger.error(f"Failed to read TTS audio: {e!r}", exc_info=True)
                    raise ServiceError(str(e) or type(e).__name__, 500) from e

        except _TRANSPORT_ERRORS as e:
            logger.error(f"TTS endpoint unreachable: {e!r}")
            raise TransportError(f"Failed to reach {self.text_to_speech_uri}: {e!r}", cause=e) from e

        logger.info(f"TTS success: received {result.getbuffer().nbytes} bytes")
        return result

    # ========== STT ==========

    async def recognize(
        self,
        audio_stream: Any,
        language: str,
        result_format: RecognitionResultFormat = RecognitionResultFormat.SIMPLE,
        profanity: ProfanityMode = ProfanityMode.MASKED
    ) -> SpeechRecognitionResponse:
        """
        음성을 텍스트로 변환

        오디오 스트림은 chunked 전송으로 1024바이트씩 한 번만 읽어 업로드하며,
        전체를 메모리에 올리지 않습니다. 업로드 시간에는 전체 타임아웃이
        적용되지 않고, 연결/응답 읽기 타임아웃만 적용됩니다.

        Args:
            audio_stream: WAV 바이너리 스트림 (동기/비동기 read 모두 지원)
            language: BCP-47 언어 코드 (예: en-US, ko-KR)
            result_format: simple 또는 detailed
            profanity: masked, removed, raw

        Returns:
            SpeechRecognitionResponse

        Raises:
            ConfigurationError: 인증 또는 STT 엔드포인트 미설정
            ValidationError: 오디오 스트림 누락 또는 빈 언어 코드
            TransportError: 엔드포인트 연결 불가
            ServiceError: 실패 응답 또는 잘못된 결과 형식
        """
        if not self.authentication_uri:
            raise ConfigurationError("Authentication URI is not set")
        if not self.speech_to_text_uri:
            raise ConfigurationError("Speech-to-text URI is not set")
        if audio_stream is None:
            raise ValidationError("audio_stream is required")
        if not language or not language.strip():
            raise ValidationError("language is required")

        authorization = await self._token_manager.get_token()

        params = {
            "language": language,
            "format": RecognitionResultFormat(result_format).value,
            "profanity": ProfanityMode(profanity).value,
        }
        headers = {
            "Accept": JSON_MEDIA_TYPE,
            "Content-Type": WAV_AUDIO_MEDIA_TYPE,
            AUTHORIZATION_HEADER: authorization,
        }
        # 대용량 업로드: total 대신 연결/읽기 타임아웃만 사용
        upload_timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=self._timeout,
            sock_read=self._timeout
        )

        logger.info(f"Starting STT: language={language}, format={params['format']}, profanity={params['profanity']}")
        session = await self.get_session()

        try:
            async with session.post(
                self.speech_to_text_uri,
                params=params,
                headers=headers,
                data=iter_audio_chunks(audio_stream, BUFFER_SIZE),
                chunked=True,
                expect100=True,
                timeout=upload_timeout
            ) as response:
                status = response.status
                content = await response.text()

        except _TRANSPORT_ERRORS as e:
            logger.error(f"STT endpoint unreachable: {e!r}")
            raise TransportError(f"Failed to reach {self.speech_to_text_uri}: {e!r}", cause=e) from e

        if 200 <= status < 300 or status == 100:
            try:
                result = SpeechRecognitionResponse.model_validate_json(content)
            except PydanticValidationError as e:
                logger.error(f"Malformed STT response: {content[:200]!r}")
                raise ServiceError(f"Malformed recognition response: {e.error_count()} error(s)", status) from e

            logger.info(f"STT success: status={result.recognition_status}, text='{(result.display_text or '')[:50]}'")
            return result

        message = _parse_service_error(content, response.reason)
        logger.error(f"STT request failed: {status} {message}")
        raise ServiceError(message, status)


def _parse_service_error(content: str, reason: Optional[str]) -> str:
    """STT 에러 응답 본문에서 메시지 추출"""
    try:
        error = json.loads(content)
    except ValueError:
        return content.strip() or reason or "Speech request failed"

    if isinstance(error, dict):
        message = error.get("Message") or error.get("message")
        if isinstance(error.get("error"), dict):
            message = message or error["error"].get("message")
        if message:
            return str(message)
    return content.strip() or reason or "Speech request failed"
