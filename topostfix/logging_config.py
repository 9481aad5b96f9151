"""
로깅 설정.

모든 모듈은 logging.getLogger(__name__) 을 쓰고, 핸들러는 여기서 한 번만
"topostfix" 로거에 붙인다. 로그는 항상 stderr 로 (변환 결과는 stdout).
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "topostfix"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    topostfix 로거에 stderr 핸들러를 붙이고 레벨을 설정.
    여러 번 호출해도 핸들러는 하나만 남는다 (이전 핸들러는 교체).

    Args:
        level: DEBUG, INFO, WARNING, ERROR 중 하나 (대소문자 무관)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for old in [h for h in logger.handlers if getattr(h, "_topostfix", False)]:
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._topostfix = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger
