"""
Pydantic schemas for Speech REST requests and results.
"""
from .speech import (
    AudioOutputFormat,
    Gender,
    ProfanityMode,
    RecognitionAlternative,
    RecognitionResultFormat,
    SpeechRecognitionResponse,
    TextToSpeechParameters,
    output_format_wire_name,
)

__all__ = [
    "AudioOutputFormat",
    "Gender",
    "ProfanityMode",
    "RecognitionAlternative",
    "RecognitionResultFormat",
    "SpeechRecognitionResponse",
    "TextToSpeechParameters",
    "output_format_wire_name",
]
