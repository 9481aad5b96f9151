"""
설정 불러오기.

설정 값은 하나뿐: max_depth (연산자 스택 최대 깊이, 기본 64).
우선순위 (뒤로 갈수록 우선):
  기본값 → JSON 파일 {"max_depth": N} → 환경 변수 TOPOSTFIX_MAX_DEPTH → 인자 max_depth
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from topostfix.core import DEFAULT_MAX_DEPTH

CONFIG_ENV = "TOPOSTFIX_CONFIG"
MAX_DEPTH_ENV = "TOPOSTFIX_MAX_DEPTH"
STRICT_ENV = "TOPOSTFIX_STRICT_CONFIG"


class ConfigError(ValueError):
    """strict 모드에서 설정 파일이나 값이 잘못되었을 때 발생."""
    pass


@dataclass
class ConverterConfig:
    max_depth: int = DEFAULT_MAX_DEPTH


def _resolve_strict(strict: Optional[bool]) -> bool:
    if strict is not None:
        return strict
    env = os.getenv(STRICT_ENV, "")
    return env.lower() in {"1", "true", "yes", "on"}


def _warn_or_raise(msg: str, *, strict: bool) -> None:
    if strict:
        raise ConfigError(msg)
    print(f"Warning: {msg}", file=sys.stderr)


def _load_json(path: Path, *, strict: bool) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        _warn_or_raise(f"설정 파일이 없습니다: {path}", strict=strict)
        return {}
    except json.JSONDecodeError as exc:
        _warn_or_raise(f"설정 파일 형식이 잘못되었습니다: {path} ({exc})", strict=strict)
        return {}
    if not isinstance(payload, dict):
        _warn_or_raise(f"설정 파일 최상위는 객체여야 합니다: {path}", strict=strict)
        return {}
    return payload


def _coerce_depth(value: Any, *, source: str, strict: bool) -> Optional[int]:
    """양의 정수로 바꿀 수 있으면 int, 아니면 경고(또는 ConfigError) 후 None."""
    if isinstance(value, bool):
        depth = None
    elif isinstance(value, int):
        depth = value
    elif isinstance(value, str) and value.strip().isdigit():
        depth = int(value.strip())
    else:
        depth = None

    if depth is None or depth < 1:
        _warn_or_raise(f"{source}: max_depth 는 양의 정수여야 합니다 ({value!r})", strict=strict)
        return None
    return depth


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    *,
    max_depth: Optional[int] = None,
    strict: Optional[bool] = None,
) -> ConverterConfig:
    """
    설정을 모아 ConverterConfig 를 만든다.

    Args:
        config_path: JSON 설정 파일 경로. 없으면 TOPOSTFIX_CONFIG 환경 변수를 봄.
        max_depth: 명령줄 등에서 직접 준 값. 가장 우선.
        strict: True 면 잘못된 설정에 ConfigError. None 이면 TOPOSTFIX_STRICT_CONFIG.
    """
    strict_mode = _resolve_strict(strict)
    config = ConverterConfig()

    path = config_path or os.getenv(CONFIG_ENV)
    if path:
        payload = _load_json(Path(path), strict=strict_mode)
        if "max_depth" in payload:
            depth = _coerce_depth(payload["max_depth"], source=str(path), strict=strict_mode)
            if depth is not None:
                config.max_depth = depth

    env_depth = os.getenv(MAX_DEPTH_ENV)
    if env_depth:
        depth = _coerce_depth(env_depth, source=MAX_DEPTH_ENV, strict=strict_mode)
        if depth is not None:
            config.max_depth = depth

    if max_depth is not None:
        depth = _coerce_depth(max_depth, source="max_depth", strict=strict_mode)
        if depth is not None:
            config.max_depth = depth

    return config
