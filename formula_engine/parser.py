"""
Recursive-descent builder for expression trees.

Precedence, lowest first:
  + -    left-associative
  * /    left-associative
  ^      right-associative
Parentheses override precedence. A function call and its parenthesised
argument become a single operand leaf; the argument is parsed only when that
leaf is evaluated.
"""

from typing import FrozenSet, List, Sequence, Tuple

from .config import DEFAULT_MAX_TREE_DEPTH
from .errors import FormulaSyntaxError, NestingTooDeepError
from .expression_tree import Node, OperandNode, BinaryOpNode, PRECEDENCE, RIGHT_ASSOCIATIVE
from .logging_system import log_debug
from .tokenizer import Token, TokenKind, render

# Operator sets from loosest to tightest binding
OPERATOR_LEVELS: Tuple[FrozenSet[str], ...] = tuple(
    frozenset(op for op, p in PRECEDENCE.items() if p == level)
    for level in sorted(set(PRECEDENCE.values()))
)


class _TokenStream:
    """Cursor over one token sequence; one per parse call so parsers can be shared."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> Token:
        tok = self.peek()
        self.pos += 1
        return tok

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)


class ExpressionParser:

    def __init__(self, max_nesting_depth: int = 32, max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH):
        self.max_nesting_depth = max_nesting_depth
        self.max_tree_depth = max_tree_depth

    def parse(self, tokens: Sequence[Token]) -> Node:
        if not tokens:
            raise FormulaSyntaxError("Cannot parse an empty formula.")
        self._check_parentheses(tokens)

        stream = _TokenStream(tokens)
        root = self._parse_level(stream)
        if not stream.at_end():
            self._error("Unexpected token", stream.peek())
        log_debug(f"parsed {render(tokens)!r} -> {root.to_string()}")
        return root

    def _check_parentheses(self, tokens: Sequence[Token]):
        depth = 0
        for tok in tokens:
            if tok.kind == TokenKind.LEFT_PAREN:
                depth += 1
                if depth > self.max_nesting_depth:
                    raise NestingTooDeepError(
                        f"Parentheses nest deeper than {self.max_nesting_depth} levels"
                    )
            elif tok.kind == TokenKind.RIGHT_PAREN:
                depth -= 1
                if depth < 0:
                    self._error("Unmatched ')'", tok)
        if depth > 0:
            raise FormulaSyntaxError(f"{depth} unclosed '(' in formula")

    @staticmethod
    def _error(message: str, tok: Token):
        raise FormulaSyntaxError(f"{message} '{tok.text}' at position {tok.position}", tok.text)

    def _combine(self, operator: str, left: Node, right: Node) -> Node:
        node = BinaryOpNode(operator, left, right)
        if node.depth() > self.max_tree_depth:
            raise NestingTooDeepError(
                f"Expression tree is deeper than {self.max_tree_depth} levels"
            )
        return node

    def _parse_level(self, stream: _TokenStream, level: int = 0) -> Node:
        if level == len(OPERATOR_LEVELS):
            return self._parse_atom(stream)
        operators = OPERATOR_LEVELS[level]
        node = self._parse_level(stream, level + 1)
        while self._peek_operator(stream, operators):
            op = stream.next().text
            if op in RIGHT_ASSOCIATIVE:
                return self._combine(op, node, self._parse_level(stream, level))
            node = self._combine(op, node, self._parse_level(stream, level + 1))
        return node

    def _parse_atom(self, stream: _TokenStream) -> Node:
        tok = stream.next()
        if tok is None:
            raise FormulaSyntaxError("Formula ends with an operator or '('")

        if tok.kind == TokenKind.NUMBER:
            return OperandNode(tok.text)

        if tok.kind == TokenKind.IDENTIFIER:
            nxt = stream.peek()
            if nxt is not None and nxt.kind == TokenKind.LEFT_PAREN:
                return OperandNode(tok.text + self._capture_call_argument(stream))
            return OperandNode(tok.text)

        if tok.kind == TokenKind.LEFT_PAREN:
            node = self._parse_level(stream)
            closing = stream.next()
            if closing is None or closing.kind != TokenKind.RIGHT_PAREN:
                raise FormulaSyntaxError(f"Expected ')' to close '(' at position {tok.position}")
            return node

        self._error("Misplaced", tok)

    @staticmethod
    def _peek_operator(stream: _TokenStream, operators: FrozenSet[str]) -> bool:
        tok = stream.peek()
        return tok is not None and tok.kind == TokenKind.OPERATOR and tok.text in operators

    @staticmethod
    def _capture_call_argument(stream: _TokenStream) -> str:
        """Consume a balanced '(' ... ')' span and return its text, parentheses included."""
        span: List[Token] = []
        depth = 0
        while True:
            tok = stream.next()
            if tok is None:
                raise FormulaSyntaxError("Unclosed '(' in function call")
            span.append(tok)
            if tok.kind == TokenKind.LEFT_PAREN:
                depth += 1
            elif tok.kind == TokenKind.RIGHT_PAREN:
                depth -= 1
                if depth == 0:
                    return render(span)


def parse(tokens: Sequence[Token], max_nesting_depth: int = 32, max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH) -> Node:
    return ExpressionParser(max_nesting_depth, max_tree_depth).parse(tokens)
