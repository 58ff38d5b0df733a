"""
Azure Speech Token Manager

Speech REST 엔드포인트에서 사용하는 Bearer 토큰을 발급하고 캐싱합니다.
aiohttp를 사용하여 토큰 발급이 이벤트 루프를 블로킹하지 않습니다.
"""
import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp

from azure_speech_client.core.endpoints import DEFAULT_AUTH_URI
from azure_speech_client.core.exceptions import ConfigurationError, ServiceError, TransportError

logger = logging.getLogger(__name__)

OCP_APIM_SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"

MISSING_KEY_MESSAGE = (
    "A subscription key is required. Create a Speech resource in the Azure Portal to obtain one."
)

# 토큰 유효기간 10분, 8분 캐싱
TOKEN_CACHE_DURATION = timedelta(minutes=8)

SessionFactory = Callable[[], Awaitable[aiohttp.ClientSession]]


@dataclass(frozen=True)
class CachedToken:
    """토큰 값과 발급 시점의 clock 값"""

    value: str
    issued_at: float


class SpeechTokenManager:
    """
    Azure Speech 토큰 관리자

    구독 키를 짧은 수명의 Bearer 토큰으로 교환하고 캐싱합니다.

    Features:
    - aiohttp 기반 비동기 발급 (non-blocking)
    - 8분 캐싱 (유효기간 10분, 2분 여유)
    - 단일 갱신: 동시 호출자는 진행 중인 요청 하나를 공유
    - 구독 키 변경 시 캐시된 토큰 즉시 폐기

    Example:
        >>> manager = SpeechTokenManager("<key>", "https://westus.api.cognitive.microsoft.com/sts/v1.0/issueToken")
        >>> header_value = await manager.get_token()
        >>> print(header_value[:7])
        Bearer
    """

    def __init__(
        self,
        subscription_key: Optional[str],
        auth_uri: Optional[str] = None,
        *,
        session_factory: Optional[SessionFactory] = None,
        cache_duration: timedelta = TOKEN_CACHE_DURATION,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize token manager.

        Args:
            subscription_key: Speech 리소스 구독 키
            auth_uri: 토큰 서비스 URI (생략 시 글로벌 issueToken 엔드포인트)
            session_factory: 공유 aiohttp 세션을 반환하는 코루틴.
                생략 시 갱신할 때마다 임시 세션을 엽니다.
            cache_duration: 발급된 토큰 재사용 시간
            timeout: 토큰 요청 전체 타임아웃 (초)
            clock: 초 단위 monotonic clock
        """
        self._subscription_key = subscription_key
        self.auth_uri = auth_uri.strip() if auth_uri and auth_uri.strip() else DEFAULT_AUTH_URI
        self._session_factory = session_factory
        self._cache_duration = cache_duration.total_seconds()
        self._timeout = timeout
        self._clock = clock

        self._cached: Optional[CachedToken] = None
        self._key_generation = 0
        self._lock = asyncio.Lock()

    @property
    def subscription_key(self) -> Optional[str]:
        return self._subscription_key

    @subscription_key.setter
    def subscription_key(self, value: Optional[str]) -> None:
        if value != self._subscription_key:
            # 이전 키로 발급된 토큰은 더 이상 유효하지 않음
            self._subscription_key = value
            self._key_generation += 1
            self._cached = None
            logger.info("Subscription key changed, cached speech token dropped")

    def _is_token_valid(self) -> bool:
        """
        캐시된 토큰 유효성 확인

        Returns:
            bool: 캐시 유효 시간 안이면 True
        """
        cached = self._cached
        if cached is None:
            return False
        return (self._clock() - cached.issued_at) < self._cache_duration

    async def get_token(self) -> str:
        """
        현재 토큰의 Authorization 헤더 값 반환

        캐시된 토큰이 유효하면 재사용하고, 아니면 새로 발급합니다.
        캐시가 만료된 것을 동시에 발견한 호출자들은 같은 갱신을 기다립니다.

        Returns:
            str: "Bearer <token>"

        Raises:
            ConfigurationError: 구독 키가 설정되지 않음
            ServiceError: 토큰 서비스가 실패 응답을 반환
            TransportError: 토큰 서비스에 연결 불가
        """
        if not self._subscription_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        cached = self._cached
        if cached is not None and self._is_token_valid():
            logger.debug("Using cached Azure Speech token")
            return f"Bearer {cached.value}"

        async with self._lock:
            # 대기하는 동안 다른 코루틴이 갱신했을 수 있음
            cached = self._cached
            if cached is not None and self._is_token_valid():
                logger.debug("Using cached Azure Speech token (after lock)")
                return f"Bearer {cached.value}"

            # 대기하는 동안 키가 지워졌을 수 있음
            subscription_key = self._subscription_key
            if not subscription_key:
                raise ConfigurationError(MISSING_KEY_MESSAGE)

            generation = self._key_generation
            token = await self._fetch_token(subscription_key)

            if generation == self._key_generation:
                self._cached = CachedToken(value=token, issued_at=self._clock())
            else:
                logger.warning("Subscription key changed during token refresh, token not cached")

            return f"Bearer {token}"

    async def _fetch_token(self, subscription_key: str) -> str:
        """토큰 서비스에 POST 후 토큰 원문 반환"""
        logger.info(f"🔑 Requesting new Azure Speech token: {self.auth_uri}")
        start_time = time.monotonic()
        headers = {OCP_APIM_SUBSCRIPTION_KEY_HEADER: subscription_key}
        timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            if self._session_factory is not None:
                session = await self._session_factory()
                status, reason, content = await self._post(session, headers, timeout)
            else:
                async with aiohttp.ClientSession() as session:
                    status, reason, content = await self._post(session, headers, timeout)

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            elapsed = time.monotonic() - start_time
            logger.error(f"❌ Failed to reach Azure Speech token service after {elapsed:.2f}s: {e!r}")
            raise TransportError(f"Failed to reach token service {self.auth_uri}: {e!r}", cause=e) from e

        if not 200 <= status < 300:
            message, status_code = _parse_token_error(content, reason, status)
            logger.error(f"❌ Azure Speech token request rejected: {status_code} {message}")
            raise ServiceError(message, status_code)

        elapsed = time.monotonic() - start_time
        logger.info(f"✅ Azure Speech token issued successfully in {elapsed:.2f}s")
        return content.strip()

    async def _post(self, session: aiohttp.ClientSession, headers: Dict[str, str], timeout: aiohttp.ClientTimeout):
        async with session.post(self.auth_uri, headers=headers, timeout=timeout) as response:
            content = await response.text()
            return response.status, response.reason or "", content

    def invalidate(self) -> None:
        """캐시된 토큰 삭제 (다음 get_token()에서 재발급)"""
        self._cached = None
        logger.debug("Azure Speech token cache cleared")

    async def refresh_token(self) -> str:
        """
        토큰 강제 갱신 (캐시 무효화)

        Returns:
            str: "Bearer <token>"
        """
        logger.info("Forcing Azure Speech token refresh")
        self.invalidate()
        return await self.get_token()

    async def prefetch_token(self) -> bool:
        """
        첫 요청 전에 토큰 미리 발급

        Returns:
            bool: 토큰 캐싱 성공 여부
        """
        try:
            logger.info("🚀 Pre-fetching Azure Speech token...")
            await self.get_token()
            logger.info("✅ Azure Speech token pre-fetched successfully")
            return True
        except (ConfigurationError, ServiceError, TransportError) as e:
            logger.warning(f"⚠️ Failed to pre-fetch Azure Speech token: {e}")
            return False

    def get_cache_status(self) -> Dict[str, Any]:
        """
        캐시 상태 조회 (디버깅용). 토큰 값은 포함하지 않습니다.

        Returns:
            dict: 캐시 상태 정보
        """
        cached = self._cached
        return {
            "has_token": cached is not None,
            "is_valid": self._is_token_valid(),
            "age_seconds": (self._clock() - cached.issued_at) if cached else None,
            "auth_uri": self.auth_uri,
        }


def _parse_token_error(content: str, reason: str, status: int):
    """토큰 서비스 에러 본문에서 (message, statusCode) 추출"""
    try:
        error = json.loads(content)
    except ValueError:
        return (content.strip() or reason or "Token request failed"), status

    if not isinstance(error, dict):
        return (content.strip() or reason or "Token request failed"), status

    # APIM 게이트웨이 에러는 중첩 구조: {"error": {"code": "401", "message": "..."}}
    if isinstance(error.get("error"), dict):
        nested = error["error"]
        error = {"message": nested.get("message"), "statusCode": nested.get("code", status)}

    message = error.get("message") or error.get("Message") or reason or "Token request failed"
    try:
        status_code = int(error.get("statusCode", status))
    except (TypeError, ValueError):
        status_code = status
    return str(message), status_code
