"""
스키마, 엔드포인트, SSML 테스트
"""
import xml.etree.ElementTree as ET

import pytest

from azure_speech_client.core.endpoints import DEFAULT_AUTH_URI, SpeechEndpoints
from azure_speech_client.core.ssml import build_ssml
from azure_speech_client.schemas.speech import (
    AudioOutputFormat,
    SpeechRecognitionResponse,
    TextToSpeechParameters,
    output_format_wire_name,
)

XML_NS = "{http://www.w3.org/XML/1998/namespace}"


class TestSpeechEndpoints:
    """SpeechEndpoints 테스트 클래스"""

    def test_from_region(self):
        """리전에서 엔드포인트 파생 테스트"""
        endpoints = SpeechEndpoints.from_region("westus")

        assert endpoints.auth_uri == "https://westus.api.cognitive.microsoft.com/sts/v1.0/issueToken"
        assert endpoints.text_to_speech_uri == "https://westus.tts.speech.microsoft.com/cognitiveservices/v1"
        assert endpoints.speech_to_text_uri == (
            "https://westus.stt.speech.microsoft.com/speech/recognition/conversation/cognitiveservices/v1"
        )

    def test_auth_override(self):
        """auth_uri 재정의 테스트"""
        endpoints = SpeechEndpoints.from_region("westus", auth_uri="https://sts.example.com/issueToken")

        assert endpoints.auth_uri == "https://sts.example.com/issueToken"
        assert endpoints.text_to_speech_uri.startswith("https://westus.tts.")

    def test_no_region(self):
        """리전 없음 테스트"""
        endpoints = SpeechEndpoints.from_region(None)

        assert endpoints.auth_uri == DEFAULT_AUTH_URI
        assert endpoints.text_to_speech_uri is None
        assert endpoints.speech_to_text_uri is None

    def test_immutable(self):
        """불변 객체 테스트"""
        endpoints = SpeechEndpoints.from_region("westus")

        with pytest.raises(AttributeError):
            endpoints.text_to_speech_uri = "https://elsewhere"


class TestOutputFormat:
    """출력 포맷 및 TTS 헤더 테스트 클래스"""

    def test_table_has_all_formats(self):
        """17개 출력 포맷 테이블 테스트"""
        assert len(AudioOutputFormat) == 17
        assert output_format_wire_name(AudioOutputFormat.AUDIO_24KHZ_160KBITRATE_MONO_MP3) == (
            "audio-24khz-160kbitrate-mono-mp3"
        )

    @pytest.mark.parametrize("value", [None, "", "flac-96khz", 42])
    def test_unknown_maps_to_default(self, value):
        """알 수 없는 포맷 → 기본값 테스트"""
        assert output_format_wire_name(value) == "riff-16khz-16bit-mono-pcm"

    def test_build_headers_is_ordered_and_pure(self):
        """헤더 순서 및 순수 함수 테스트"""
        parameters = TextToSpeechParameters(text="Hi", output_format=AudioOutputFormat.RAW_8KHZ_8BIT_MONO_MULAW)

        first = parameters.build_headers("my-client")
        second = parameters.build_headers("my-client")

        assert first == second == [
            ("Content-Type", "application/ssml+xml"),
            ("X-Microsoft-OutputFormat", "raw-8khz-8bit-mono-mulaw"),
            ("User-Agent", "my-client"),
        ]

    def test_default_parameters(self):
        """기본 파라미터 테스트"""
        parameters = TextToSpeechParameters()

        assert parameters.language == "en-us"
        assert parameters.voice_name.endswith("ZiraRUS)")
        assert dict(parameters.build_headers())["X-Microsoft-OutputFormat"] == "riff-16khz-16bit-mono-pcm"
        assert dict(parameters.build_headers())["User-Agent"] == "TextToSpeechClient"


class TestRecognitionResponse:
    """STT 응답 스키마 테스트 클래스"""

    def test_detailed_result(self):
        """detailed 결과 파싱 테스트"""
        payload = """{
            "RecognitionStatus": "Success",
            "Offset": 1800000,
            "Duration": 12300000,
            "NBest": [{
                "Confidence": 0.93,
                "Lexical": "hello world",
                "ITN": "hello world",
                "MaskedITN": "hello world",
                "Display": "Hello world."
            }]
        }"""

        result = SpeechRecognitionResponse.model_validate_json(payload)

        assert result.is_success
        assert result.display_text is None
        assert result.n_best[0].confidence == pytest.approx(0.93)
        assert result.n_best[0].lexical_form == "hello world"
        assert result.n_best[0].display == "Hello world."

    def test_snake_case_names_accepted(self):
        """snake_case 필드명 허용 테스트"""
        result = SpeechRecognitionResponse(recognition_status="NoMatch")

        assert not result.is_success


class TestBuildSsml:
    """SSML 생성 테스트 클래스"""

    def test_document_structure(self):
        """SSML 문서 구조 테스트"""
        ssml = build_ssml("en-US", "Female", "Microsoft Server Speech Text to Speech Voice (en-US, ZiraRUS)", "Hello")

        root = ET.fromstring(ssml)
        voice = root.find("voice")

        assert root.tag == "speak"
        assert root.get("version") == "1.0"
        assert voice.get(f"{XML_NS}lang") == "en-US"
        assert voice.get(f"{XML_NS}gender") == "Female"
        assert voice.get("name").endswith("ZiraRUS)")
        assert voice.text == "Hello"

    def test_text_and_attributes_escaped(self):
        """텍스트/속성 이스케이프 테스트"""
        ssml = build_ssml("en-US", "Male", "Voice 'quoted'", "Tom & Jerry <3")

        voice = ET.fromstring(ssml).find("voice")

        assert voice.text == "Tom & Jerry <3"
        assert voice.get("name") == "Voice 'quoted'"
