"""
Azure Speech REST 엔드포인트

세 URI 모두 하나의 리전 이름에서 함께 파생됩니다.
"""
from dataclasses import dataclass
from typing import Optional

AUTH_URI_TEMPLATE = "https://{region}.api.cognitive.microsoft.com/sts/v1.0/issueToken"
TEXT_TO_SPEECH_URI_TEMPLATE = "https://{region}.tts.speech.microsoft.com/cognitiveservices/v1"
SPEECH_TO_TEXT_URI_TEMPLATE = (
    "https://{region}.stt.speech.microsoft.com/speech/recognition/conversation/cognitiveservices/v1"
)

# 글로벌 (리전 없는) 토큰 서비스
DEFAULT_AUTH_URI = "https://api.cognitive.microsoft.com/sts/v1.0/issueToken"


@dataclass(frozen=True)
class SpeechEndpoints:
    """SpeechService가 사용하는 엔드포인트 URI 세트 (불변)"""

    auth_uri: Optional[str] = None
    text_to_speech_uri: Optional[str] = None
    speech_to_text_uri: Optional[str] = None

    @classmethod
    def from_region(
        cls,
        region: Optional[str],
        auth_uri: Optional[str] = None
    ) -> 'SpeechEndpoints':
        """
        리전 이름에서 엔드포인트 세트 파생

        Args:
            region: Azure 리전 (예: westus, koreacentral). 비어 있으면 음성 엔드포인트 없음.
            auth_uri: 비표준 배포용 토큰 서비스 URI 재정의

        Returns:
            SpeechEndpoints

        Example:
            >>> SpeechEndpoints.from_region("westus").text_to_speech_uri
            'https://westus.tts.speech.microsoft.com/cognitiveservices/v1'
        """
        region = region.strip() if region else ""
        override = auth_uri.strip() if auth_uri else ""

        if not region:
            return cls(auth_uri=override or DEFAULT_AUTH_URI)

        return cls(
            auth_uri=override or AUTH_URI_TEMPLATE.format(region=region),
            text_to_speech_uri=TEXT_TO_SPEECH_URI_TEMPLATE.format(region=region),
            speech_to_text_uri=SPEECH_TO_TEXT_URI_TEMPLATE.format(region=region),
        )
