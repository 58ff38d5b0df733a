"""
Azure Speech 스키마 (요청 파라미터 / 인식 결과)

Speech REST API용 Pydantic 스키마와 enum → 전송 문자열 매핑
"""
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field


# ========== Enums ==========

class Gender(str, Enum):
    """합성 음성 성별"""

    FEMALE = "Female"
    MALE = "Male"


class RecognitionResultFormat(str, Enum):
    """인식 결과 형식 (쿼리 파라미터 ``format``)"""

    SIMPLE = "simple"
    DETAILED = "detailed"


class ProfanityMode(str, Enum):
    """비속어 처리 방식 (쿼리 파라미터 ``profanity``)"""

    MASKED = "masked"    # 별표로 치환 (서비스 기본값)
    REMOVED = "removed"
    RAW = "raw"


class AudioOutputFormat(str, Enum):
    """합성 출력 포맷 (X-Microsoft-OutputFormat 헤더)"""

    RAW_16KHZ_16BIT_MONO_PCM = "raw-16khz-16bit-mono-pcm"
    RAW_8KHZ_8BIT_MONO_MULAW = "raw-8khz-8bit-mono-mulaw"
    RIFF_16KHZ_16BIT_MONO_PCM = "riff-16khz-16bit-mono-pcm"
    RIFF_8KHZ_8BIT_MONO_MULAW = "riff-8khz-8bit-mono-mulaw"
    SSML_16KHZ_16BIT_MONO_SILK = "ssml-16khz-16bit-mono-silk"
    RAW_16KHZ_16BIT_MONO_TRUESILK = "raw-16khz-16bit-mono-truesilk"
    SSML_16KHZ_16BIT_MONO_TTS = "ssml-16khz-16bit-mono-tts"
    AUDIO_16KHZ_128KBITRATE_MONO_MP3 = "audio-16khz-128kbitrate-mono-mp3"
    AUDIO_16KHZ_64KBITRATE_MONO_MP3 = "audio-16khz-64kbitrate-mono-mp3"
    AUDIO_16KHZ_32KBITRATE_MONO_MP3 = "audio-16khz-32kbitrate-mono-mp3"
    AUDIO_16KHZ_16KBPS_MONO_SIREN = "audio-16khz-16kbps-mono-siren"
    RIFF_16KHZ_16KBPS_MONO_SIREN = "riff-16khz-16kbps-mono-siren"
    RAW_24KHZ_16BIT_MONO_PCM = "raw-24khz-16bit-mono-pcm"
    RIFF_24KHZ_16BIT_MONO_PCM = "riff-24khz-16bit-mono-pcm"
    AUDIO_24KHZ_48KBITRATE_MONO_MP3 = "audio-24khz-48kbitrate-mono-mp3"
    AUDIO_24KHZ_96KBITRATE_MONO_MP3 = "audio-24khz-96kbitrate-mono-mp3"
    AUDIO_24KHZ_160KBITRATE_MONO_MP3 = "audio-24khz-160kbitrate-mono-mp3"


DEFAULT_OUTPUT_FORMAT = AudioOutputFormat.RIFF_16KHZ_16BIT_MONO_PCM

SSML_MEDIA_TYPE = "application/ssml+xml"
DEFAULT_VOICE_NAME = "Microsoft Server Speech Text to Speech Voice (en-US, ZiraRUS)"


def output_format_wire_name(output_format: Union[AudioOutputFormat, str, None]) -> str:
    """
    출력 포맷을 X-Microsoft-OutputFormat 값으로 변환

    알 수 없거나 없는 값은 riff-16khz-16bit-mono-pcm으로 매핑됩니다.
    """
    if isinstance(output_format, AudioOutputFormat):
        return output_format.value
    try:
        return AudioOutputFormat(output_format).value
    except ValueError:
        return DEFAULT_OUTPUT_FORMAT.value


# ========== TTS ==========

class TextToSpeechParameters(BaseModel):
    """TTS 요청 파라미터"""

    language: str = Field(default="en-us", description="텍스트 언어 (BCP-47)")
    voice_type: Gender = Field(default=Gender.FEMALE, description="음성 성별")
    voice_name: str = Field(default=DEFAULT_VOICE_NAME, description="전체 음성 이름")
    text: Optional[str] = Field(None, description="읽을 텍스트 (최대 800자)")
    output_format: Optional[AudioOutputFormat] = Field(
        default=DEFAULT_OUTPUT_FORMAT,
        description="오디오 출력 포맷"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "language": "en-US",
                "voice_type": "Female",
                "voice_name": DEFAULT_VOICE_NAME,
                "text": "Hello everyone! Today is really a beautiful day.",
                "output_format": "riff-16khz-16bit-mono-pcm"
            }
        }

    def build_headers(self, user_agent: str = "TextToSpeechClient") -> List[Tuple[str, str]]:
        """
        TTS 요청 헤더 (순서 유지)

        Args:
            user_agent: 요청을 보내는 클라이언트 식별자

        Returns:
            List[Tuple[str, str]]: (이름, 값) 쌍
        """
        return [
            ("Content-Type", SSML_MEDIA_TYPE),
            ("X-Microsoft-OutputFormat", output_format_wire_name(self.output_format)),
            ("User-Agent", user_agent),
        ]


# ========== STT ==========

class RecognitionAlternative(BaseModel):
    """detailed 인식 결과의 NBest 항목"""

    confidence: float = Field(0.0, alias="Confidence", description="신뢰도 (0.0 ~ 1.0)")
    lexical_form: Optional[str] = Field(None, alias="Lexical", description="실제 인식된 단어")
    canonical_form: Optional[str] = Field(
        None,
        alias="ITN",
        description="역정규화 형태 (숫자, 약어 등)"
    )
    masked_canonical_form: Optional[str] = Field(
        None,
        alias="MaskedITN",
        description="비속어 마스킹이 적용된 ITN"
    )
    display: Optional[str] = Field(None, alias="Display", description="문장부호가 포함된 표시 형태")

    class Config:
        populate_by_name = True


class SpeechRecognitionResponse(BaseModel):
    """STT 응답 스키마"""

    recognition_status: str = Field(..., alias="RecognitionStatus", description="Success, NoMatch, ...")
    display_text: Optional[str] = Field(None, alias="DisplayText", description="인식된 텍스트 (simple 형식)")
    offset: Optional[int] = Field(None, alias="Offset", description="시작 오프셋 (100ns 단위)")
    duration: Optional[int] = Field(None, alias="Duration", description="길이 (100ns 단위)")
    n_best: Optional[List[RecognitionAlternative]] = Field(
        None,
        alias="NBest",
        description="후보 목록 (detailed 형식)"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "RecognitionStatus": "Success",
                "DisplayText": "Hello world.",
                "Offset": 1800000,
                "Duration": 12300000
            }
        }

    @property
    def is_success(self) -> bool:
        return self.recognition_status == "Success"
