"""
Services package.

SpeechService orchestrates token acquisition and the Speech REST calls.
"""
from .speech_service import SpeechService

__all__ = ["SpeechService"]
