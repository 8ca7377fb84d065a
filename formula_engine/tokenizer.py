import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .errors import MalformedInputError


class TokenKind(Enum):
  NUMBER = auto()       # 42, 3.14, .5, 2.
  IDENTIFIER = auto()   # variable, constant or function name
  OPERATOR = auto()     # + - * / ^
  LEFT_PAREN = auto()
  RIGHT_PAREN = auto()


@dataclass(frozen=True)
class Token:
  kind: TokenKind
  text: str
  position: int = 0   # 0-based offset in the source formula

  def is_operand(self) -> bool:
    return self.kind in (TokenKind.NUMBER, TokenKind.IDENTIFIER)


_WHITESPACE = re.compile(r'\s+')
_RULES = [
  (re.compile(r'\d+(?:\.\d*)?|\.\d+'), TokenKind.NUMBER),
  (re.compile(r'[A-Za-z_][A-Za-z_0-9]*'), TokenKind.IDENTIFIER),
  (re.compile(r'[+\-*/^]'), TokenKind.OPERATOR),
  (re.compile(r'\('), TokenKind.LEFT_PAREN),
  (re.compile(r'\)'), TokenKind.RIGHT_PAREN),
]


def tokenize(formula: Optional[str]) -> List[Token]:
  """
  Split a formula into tokens in source order.

  Raises MalformedInputError for an empty/blank formula or an unrecognised
  character.
  """
  if formula is None or not formula.strip():
    raise MalformedInputError("A formula must be provided.", formula)

  tokens = []
  pos = 0
  while pos < len(formula):
    m = _WHITESPACE.match(formula, pos)
    if m:
      pos = m.end()
      continue
    for pattern, kind in _RULES:
      m = pattern.match(formula, pos)
      if m:
        tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
        break
    else:
      raise MalformedInputError(
        f"Unrecognised character {formula[pos]!r} at position {pos}.", formula, pos
      )
  return tokens


def render(tokens: List[Token]) -> str:
  """Join tokens back into formula text that re-tokenizes to the same sequence."""
  parts = []
  previous = None
  for token in tokens:
    if previous is not None and previous.is_operand() and token.is_operand():
      parts.append(' ')
    parts.append(token.text)
    previous = token
  return ''.join(parts)
