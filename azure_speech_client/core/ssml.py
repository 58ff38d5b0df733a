"""
SSML (Speech Synthesis Markup Language) 생성
"""
from xml.sax.saxutils import escape, quoteattr


def build_ssml(locale: str, gender: str, voice_name: str, text: str) -> str:
    """
    TTS 엔드포인트로 보낼 SSML 문서 생성

    Args:
        locale: 음성 언어 (예: en-US)
        gender: "Male" 또는 "Female"
        voice_name: 전체 음성 이름
        text: 읽을 텍스트 (여기서 이스케이프됨)

    Returns:
        str: SSML 문서
    """
    return (
        "<speak version='1.0' xml:lang='en-US'>"
        f"<voice xml:lang={quoteattr(locale)} xml:gender={quoteattr(gender)} name={quoteattr(voice_name)}>"
        f"{escape(text)}"
        "</voice>"
        "</speak>"
    )
