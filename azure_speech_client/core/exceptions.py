"""
Azure Speech 클라이언트 예외 계층

- ConfigurationError: 엔드포인트 또는 자격 증명 누락 (네트워크 접근 전에 발생)
- ValidationError: 호출자 입력이 전제 조건 위반 (네트워크 접근 전에 발생)
- TransportError: 엔드포인트 연결 불가 (DNS, 연결, 타임아웃)
- ServiceError: 서비스가 실패 상태 코드로 응답
"""
from typing import Optional


class SpeechClientError(Exception):
    """클라이언트가 발생시키는 모든 예외의 기본 클래스"""


class ConfigurationError(SpeechClientError):
    """필수 엔드포인트 또는 구독 키 미설정"""


class ValidationError(SpeechClientError, ValueError):
    """잘못된 호출자 입력"""


class TransportError(SpeechClientError):
    """
    인증/음성 엔드포인트 네트워크 오류

    원인 예외는 ``cause``에 보관되며 체이닝도 됩니다
    (``raise TransportError(...) from exc``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ServiceError(SpeechClientError):
    """
    원격 서비스 실패 응답

    Attributes:
        message: 서비스가 보고한 메시지 (또는 HTTP reason)
        status_code: 숫자 상태 코드
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(f"{message} (status={status_code})")
        self.message = message
        self.status_code = status_code
