"""Language detection for sessions that have not chosen a language."""

import structlog
from langdetect import DetectorFactory, LangDetectException, detect

logger = structlog.get_logger(__name__)

# langdetect is probabilistic; a fixed seed keeps results stable across calls
DetectorFactory.seed = 0

DEFAULT_LANGUAGE = "en"


def detect_language(text: str, default: str = DEFAULT_LANGUAGE) -> str:
    """Return the ISO 639-1 code of ``text``, or ``default`` when undetectable."""
    if not text or not text.strip():
        return default
    try:
        lang = detect(text)
    except LangDetectException as e:
        logger.debug("language_detection_failed", error=str(e))
        return default
    # zh-cn / zh-tw collapse to their base language
    return lang.split("-")[0].lower()
