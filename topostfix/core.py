"""
╔══════════════════════════════════════════════════════════════════╗
║        topostfix - 중위 표기 수식 → 후위 표기(RPN) 변환기         ║
║                  스택 오토마톤 (한 번의 선형 스캔)                 ║
╚══════════════════════════════════════════════════════════════════╝

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
★ 이 파일의 전체 흐름

  [입력] "a+b*c"  ← 사람이 쓰는 중위(infix) 수식
      │
      ▼
  ① CLASSIFIER (문자 분류기)
      문자 하나를 보고 "종류(CharKind)"를 결정
      → 'a' OPERAND, '+' ADDITIVE, '*' MULTIPLICATIVE ...
      │
      ▼
  ② CONVERTER (변환 엔진)
      종류에 따라 스택을 조작하고 출력을 내보냄
        - 피연산자는 바로 출력
        - 연산자는 OPERATOR STACK 에 잠시 보관
        - 우선순위가 같거나 높은 연산자는 먼저 꺼내서(flush) 출력
      │
      ▼
  ③ EMITTER (출력기)
      문자를 출력 스트림에 한 글자씩 씀
      │
      ▼
  [출력] "abc*+"  ← 후위(postfix) 표기

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
★ 지원하는 문자

  a ~ z   : 피연산자 (한 글자 변수)
  +  -    : 덧셈/뺄셈 (우선순위 낮음)
  *  /    : 곱셈/나눗셈 (우선순위 높음)
  (  )    : 괄호
  그 외   : 오류 (InvalidCharacterError)

  예) a+(b+c*d)*e+f/g+h   →   abcd*+e*+fg/+h+
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64          # 연산자 스택 최대 깊이 (괄호 표식 포함)
SCOPE_MARKER = "("              # 괄호 범위의 시작을 표시하는 스택 항목
MULTIPLICATIVE_OPS = frozenset("*/")
ALLOWED_CHARS_HINT = "허용 문자: a-z, +, -, *, /, (, )"


# ══════════════════════════════════════════════════════════════════
# PART 1. 오류 클래스
#
# ★ 모든 변환 오류는 ConversionError 를 상속.
#   호출하는 쪽에서는 ConversionError 하나만 잡아도 모든 경우를 처리 가능.
#
#   expression : 변환하던 원본 수식
#   position   : 문제가 된 문자의 위치 (0부터 시작).
#                입력 끝에서 발견되면 len(expression)
#   output     : 중단되기 전까지 이미 출력된 후위 표기 문자들
# ══════════════════════════════════════════════════════════════════

class ConversionError(Exception):
    """변환 중 발생하는 모든 오류의 부모 클래스."""

    def __init__(self, message: str, *, expression: str = "",
                 position: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.message    = message
        self.expression = expression
        self.position   = position
        self.output     = output

    def attach(self, expression: str, position: int, output: str) -> None:
        """오류가 난 시점의 문맥(수식, 위치, 부분 출력)을 채워 넣음."""
        self.expression = expression
        self.position   = position
        self.output     = output

    def __str__(self):
        if self.position is None:
            return self.message
        return f"{self.message} (위치 {self.position})"


class InvalidCharacterError(ConversionError):
    """
    지원하지 않는 문자를 만났을 때 발생.
    예) "a$b" 의 '$', 대문자, 숫자, 공백
    """
    pass


class StackOverflowError(ConversionError):
    """연산자/괄호가 스택 최대 깊이(max_depth)를 넘었을 때 발생."""
    pass


class UnbalancedBracketsError(ConversionError):
    """
    괄호 짝이 맞지 않을 때 발생.
      - "a+b)" : 여는 괄호 없이 닫는 괄호 → 그 문자에서 바로 발견
      - "(a+b" : 닫히지 않은 여는 괄호   → 입력 끝에서 발견
    """
    pass


# ══════════════════════════════════════════════════════════════════
# PART 2. CLASSIFIER  (문자 하나 → 종류)
#
# ★ 모든 문자는 정확히 하나의 종류에만 속함.
#   어느 표에도 없는 문자는 INVALID (기본값).
# ══════════════════════════════════════════════════════════════════

class CharKind(Enum):
    """
    ★ 입력 문자의 "종류"를 나타내는 열거형.
    Converter 는 이 값만 보고 어떤 동작을 할지 결정함.
    """
    END            = auto()   # 입력의 끝 (None 또는 '\0')
    OPERAND        = auto()   # 피연산자  'a' ~ 'z'
    ADDITIVE       = auto()   # 덧셈/뺄셈 '+', '-'
    MULTIPLICATIVE = auto()   # 곱셈/나눗셈 '*', '/'
    OPEN_BRACKET   = auto()   # 여는 괄호 '('
    CLOSE_BRACKET  = auto()   # 닫는 괄호 ')'
    INVALID        = auto()   # 그 외 모든 문자


_CHAR_MAP: dict[str, CharKind] = {
    "\0": CharKind.END,
    "+": CharKind.ADDITIVE,
    "-": CharKind.ADDITIVE,
    "*": CharKind.MULTIPLICATIVE,
    "/": CharKind.MULTIPLICATIVE,
    "(": CharKind.OPEN_BRACKET,
    ")": CharKind.CLOSE_BRACKET,
}


def classify(ch: Optional[str]) -> CharKind:
    """
    문자 하나의 종류를 반환. 부수 효과 없음.

    예)
      classify("q")  → CharKind.OPERAND
      classify("/")  → CharKind.MULTIPLICATIVE
      classify(None) → CharKind.END
      classify("A")  → CharKind.INVALID
    """
    if ch is None:
        return CharKind.END
    if len(ch) != 1:
        return CharKind.INVALID
    if "a" <= ch <= "z":
        return CharKind.OPERAND
    return _CHAR_MAP.get(ch, CharKind.INVALID)


# ══════════════════════════════════════════════════════════════════
# PART 3. OPERATOR STACK  (아직 출력하지 않은 연산자 보관소)
#
# ★ 스택 모양 예시: "a+(b+c*d" 를 읽은 직후
#
#     top →  '*'
#            '+'
#            '('   ← SCOPE_MARKER: 괄호 범위의 바닥
#     bot →  '+'
#
# ★ 불변 조건:
#   한 괄호 범위 안에는 연산자가 최대 2개 (아래 덧셈 1개, 위에 곱셈 1개).
#   그래서 flush 는 "최대 두 번 꺼내기"로 충분함.
#
# ★ SCOPE_MARKER 와 스택 바닥은 "바닥(floor)" 역할:
#   pop_any() 가 바닥을 만나면 아무것도 꺼내지 않고 None 을 반환.
#   덕분에 flush 를 필요 이상 호출해도 안전함.
# ══════════════════════════════════════════════════════════════════

class OperatorStack:
    """
    괄호 표식으로 구획된, 크기가 제한된 연산자 스택.
    변환 한 번마다 새로 만들어 쓰고 버림 (전역 상태 없음).
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth 는 1 이상이어야 합니다: {max_depth}")
        self.max_depth = max_depth
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"OperatorStack({''.join(self._entries)!r}, max_depth={self.max_depth})"

    @property
    def depth(self) -> int:
        return len(self._entries)

    def _top(self) -> Optional[str]:
        return self._entries[-1] if self._entries else None

    def at_floor(self) -> bool:
        """맨 위가 스택 바닥이거나 괄호 표식이면 True."""
        top = self._top()
        return top is None or top == SCOPE_MARKER

    def has_open_scope(self) -> bool:
        return SCOPE_MARKER in self._entries

    def snapshot(self) -> str:
        """디버그 로그용: 바닥부터 위까지 항목을 이어 붙인 문자열."""
        return "".join(self._entries)

    def push(self, entry: str) -> None:
        if len(self._entries) >= self.max_depth:
            raise StackOverflowError(
                f"연산자 스택이 최대 깊이 {self.max_depth} 를 넘었습니다"
            )
        self._entries.append(entry)

    def pop_any(self) -> Optional[str]:
        """
        맨 위 연산자를 꺼내 반환.
        바닥(빈 스택 또는 SCOPE_MARKER)이면 꺼내지 않고 None.
        """
        if self.at_floor():
            return None
        return self._entries.pop()

    def pop_if_multiplicative(self) -> Optional[str]:
        """맨 위가 '*' 또는 '/' 일 때만 꺼냄. 아니면 그대로 두고 None."""
        if self._top() in MULTIPLICATIVE_OPS:
            return self._entries.pop()
        return None

    def pop_sentinel(self) -> None:
        """
        괄호 범위를 닫으면서 SCOPE_MARKER 를 제거.
        맨 위에 표식이 없으면 짝 없는 닫는 괄호.
        """
        if self._top() != SCOPE_MARKER:
            raise UnbalancedBracketsError("여는 괄호 없이 닫는 괄호가 나왔습니다")
        self._entries.pop()


# ══════════════════════════════════════════════════════════════════
# PART 4. EMITTER  (출력기)
# ══════════════════════════════════════════════════════════════════

class Emitter:
    """
    ★ 후위 표기 문자를 한 글자씩 출력.

    stream 이 주어지면 나오는 즉시 스트림에 씀 (오류로 중단돼도
    그때까지의 출력은 이미 나가 있음). 동시에 text 로도 모아 둠.

    emit_entry() 는 스택에서 꺼낸 값 전용:
      None(바닥에서 꺼냄)이나 SCOPE_MARKER 는 조용히 무시.
      그래서 flush 코드는 "스택이 비었는지"를 따로 확인할 필요가 없음.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self._chars: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def emit(self, ch: str) -> None:
        self._chars.append(ch)
        if self.stream is not None:
            self.stream.write(ch)

    def emit_entry(self, entry: Optional[str]) -> None:
        if entry is None or entry == SCOPE_MARKER:
            return
        self.emit(entry)

    def finish(self) -> None:
        """성공적으로 끝났을 때 줄바꿈으로 마무리."""
        if self.stream is not None:
            self.stream.write("\n")
            self.stream.flush()


# ══════════════════════════════════════════════════════════════════
# PART 5. CONVERTER  (변환 엔진)
#
# ★ 문자 종류별 동작:
#
#   OPERAND        : 바로 출력
#   ADDITIVE       : 최대 2개 flush (곱셈 → 덧셈 순) 후 push
#                    → 같은 우선순위는 왼쪽부터 묶임 (a+b+c → ab+c+)
#   MULTIPLICATIVE : 맨 위가 곱셈/나눗셈일 때만 1개 flush 후 push
#                    → 아래 덧셈은 건드리지 않음 (a+b*c → abc*+)
#   OPEN_BRACKET   : SCOPE_MARKER push (새 범위 시작)
#   CLOSE_BRACKET  : 최대 2개 flush 후 SCOPE_MARKER 제거
#   END            : 최대 2개 flush, 남은 괄호가 있으면 오류
#   INVALID        : 즉시 중단
#
# ★ 입력을 왼쪽에서 오른쪽으로 한 번만 읽음 (되돌아가지 않음).
#   괄호 중첩은 재귀 호출이 아니라 스택의 SCOPE_MARKER 로만 표현.
# ══════════════════════════════════════════════════════════════════

class Converter:
    """
    ★ 중위 → 후위 변환 엔진.

    사용 예:
      Converter().run("a+b*c")            → "abc*+"
      Converter(max_depth=8).run("(a)")   → "a"
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    @staticmethod
    def _flush(stack: OperatorStack, emitter: Emitter) -> None:
        # 범위 안 연산자는 최대 2개: 곱셈(위) → 덧셈(아래)
        emitter.emit_entry(stack.pop_any())
        emitter.emit_entry(stack.pop_any())

    def run(self, expression: str, emitter: Optional[Emitter] = None) -> str:
        """
        수식 전체를 변환하고 후위 표기 문자열(줄바꿈 없음)을 반환.

        Raises:
          InvalidCharacterError:   지원하지 않는 문자
          StackOverflowError:      스택 깊이 초과
          UnbalancedBracketsError: 괄호 짝 불일치
        """
        if emitter is None:
            emitter = Emitter()
        stack = OperatorStack(self.max_depth)
        pos = 0

        try:
            while True:
                ch = expression[pos] if pos < len(expression) else None
                kind = classify(ch)
                logger.debug("pos=%d ch=%r kind=%s stack=%r",
                             pos, ch, kind.name, stack.snapshot())

                if kind is CharKind.END:
                    self._flush(stack, emitter)
                    if stack.has_open_scope():
                        raise UnbalancedBracketsError("닫히지 않은 여는 괄호가 있습니다")
                    break

                elif kind is CharKind.OPERAND:
                    emitter.emit(ch)

                elif kind is CharKind.ADDITIVE:
                    self._flush(stack, emitter)
                    stack.push(ch)

                elif kind is CharKind.MULTIPLICATIVE:
                    emitter.emit_entry(stack.pop_if_multiplicative())
                    stack.push(ch)

                elif kind is CharKind.OPEN_BRACKET:
                    stack.push(SCOPE_MARKER)

                elif kind is CharKind.CLOSE_BRACKET:
                    self._flush(stack, emitter)
                    stack.pop_sentinel()

                else:
                    raise InvalidCharacterError(f"지원하지 않는 문자: {ch!r}")

                pos += 1

        except ConversionError as exc:
            exc.attach(expression, pos, emitter.text)
            logger.warning("변환 실패: %s (입력 %r, 부분 출력 %r)",
                           exc, expression, exc.output)
            raise

        emitter.finish()
        return emitter.text


# ══════════════════════════════════════════════════════════════════
# PART 6. 편의 함수
# ══════════════════════════════════════════════════════════════════

def convert(expression: str, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    ★ 메인 변환 함수: 중위 수식 문자열 → 후위 표기 문자열

    사용 예:
      convert("a+b")       → "ab+"
      convert("(a+b)*c")   → "ab+c*"
      convert("")          → ""
    """
    return Converter(max_depth).run(expression)


def write_postfix(expression: str, stream: TextIO,
                  max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    변환 결과를 stream 에 바로 쓰고 (성공 시 줄바꿈 포함), 결과 문자열을 반환.
    오류가 나면 그때까지 쓴 문자는 스트림에 남아 있음.
    """
    return Converter(max_depth).run(expression, Emitter(stream))
