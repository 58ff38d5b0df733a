#!/usr/bin/env python3
"""
Azure Speech REST demo

1. WAV 파일 음성 인식 (STT, detailed 형식)
2. 문장 음성 합성 (TTS) 후 파일로 저장

자격 증명은 AZURE_SPEECH_KEY / AZURE_SPEECH_REGION 환경 변수 (또는 .env)에서 읽습니다.

Usage:
    python scripts/speech_demo.py --audio SpeechSample.wav --output hello.wav
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from azure_speech_client import (
    Gender,
    RecognitionResultFormat,
    SpeechClientError,
    SpeechService,
    TextToSpeechParameters,
)
from azure_speech_client.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_TEXT = "Hello everyone! Today is really a beautiful day."


async def run_demo(audio_path: str, output_path: str, language: str, text: str) -> None:
    async with SpeechService.from_settings(settings) as service:
        logger.info("Calling Speech Service for speech-to-text (using a sample file)...")
        with open(audio_path, "rb") as audio:
            response = await service.recognize(audio, language, RecognitionResultFormat.DETAILED)

        print(f"Recognition Result: {response.recognition_status}")
        print(response.display_text or "")
        for alternative in response.n_best or []:
            print(f"  {alternative.confidence:.2f}  {alternative.display}")

        logger.info("Calling Speech Service for text-to-speech...")
        audio_stream = await service.synthesize(TextToSpeechParameters(
            language=language,
            voice_type=Gender.FEMALE,
            voice_name="Microsoft Server Speech Text to Speech Voice (en-US, ZiraRUS)",
            text=text,
        ))

        Path(output_path).write_bytes(audio_stream.getvalue())
        logger.info(f"Synthesized audio written to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Azure Speech REST demo (STT + TTS)")
    parser.add_argument(
        "--audio",
        type=str,
        default="SpeechSample.wav",
        help="인식할 WAV 파일"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="synthesized.wav",
        help="합성 오디오 저장 경로"
    )
    parser.add_argument(
        "--language",
        type=str,
        default="en-US",
        help="BCP-47 언어 코드"
    )
    parser.add_argument(
        "--text",
        type=str,
        default=DEFAULT_TEXT,
        help="합성할 텍스트"
    )

    args = parser.parse_args()

    if not settings.is_configured:
        logger.error("AZURE_SPEECH_KEY and AZURE_SPEECH_REGION must be set")
        sys.exit(1)

    if not Path(args.audio).exists():
        logger.error(f"File not found: {args.audio}")
        sys.exit(1)

    try:
        asyncio.run(run_demo(args.audio, args.output, args.language, args.text))
    except SpeechClientError as e:
        logger.error(f"Speech demo failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
