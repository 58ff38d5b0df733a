"""
Azure Speech REST client.
Async text-to-speech and speech-to-text with cached bearer-token authentication.
"""
from .core import (
    ConfigurationError,
    ServiceError,
    SpeechClientError,
    SpeechEndpoints,
    SpeechTokenManager,
    TransportError,
    ValidationError,
)
from .schemas import (
    AudioOutputFormat,
    Gender,
    ProfanityMode,
    RecognitionAlternative,
    RecognitionResultFormat,
    SpeechRecognitionResponse,
    TextToSpeechParameters,
)
from .services import SpeechService

__version__ = "1.0.0"

__all__ = [
    # Service
    "SpeechService",
    "SpeechTokenManager",
    "SpeechEndpoints",
    # Schemas
    "AudioOutputFormat",
    "Gender",
    "ProfanityMode",
    "RecognitionAlternative",
    "RecognitionResultFormat",
    "SpeechRecognitionResponse",
    "TextToSpeechParameters",
    # Errors
    "SpeechClientError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "ServiceError",
]
