"""
Core utilities for the Azure Speech client.
Provides the token manager, endpoint derivation, audio chunking, SSML and errors.
"""
from .audio_stream import BUFFER_SIZE, iter_audio_chunks
from .endpoints import DEFAULT_AUTH_URI, SpeechEndpoints
from .exceptions import (
    ConfigurationError,
    ServiceError,
    SpeechClientError,
    TransportError,
    ValidationError,
)
from .ssml import build_ssml
from .token_manager import CachedToken, SpeechTokenManager

__all__ = [
    # Auth
    "SpeechTokenManager",
    "CachedToken",
    # Endpoints
    "SpeechEndpoints",
    "DEFAULT_AUTH_URI",
    # Audio
    "BUFFER_SIZE",
    "iter_audio_chunks",
    # SSML
    "build_ssml",
    # Errors
    "SpeechClientError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "ServiceError",
]
