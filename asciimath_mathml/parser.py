"""
Recursive-descent parser for ASCIIMath

ASCIIMath is parsed strictly left to right without operator precedence::

    expr         = (intermediate ('/' intermediate)?)*
    intermediate = simple ('_' simple ('^' simple)? | '^' simple)?
    simple       = number | text | identifier | symbol
                 | lparen expr rparen
                 | unary_op simple
                 | binary_op simple simple

Malformed input never raises: unknown characters become identifiers and
unterminated brackets are kept as they are. Only empty input yields ``None``.

Brackets and operators nested deeper than :data:`MAX_NESTING_DEPTH` are kept
as literal symbols instead of being descended into.
"""

import logging
from typing import Optional

import regex

from .matrix import convert_to_matrix
from .nodes import (
    EMPTY_IDENTIFIER,
    BinaryOp,
    Color,
    Group,
    Identifier,
    InfixOp,
    Node,
    Number,
    Paren,
    Sequence,
    SubSup,
    SymbolNode,
    Text,
    UnaryOp,
    flatten_text,
)
from .symbol_table import (
    DEFAULT_SYMBOL_TABLE,
    OperandConverter,
    Symbol,
    SymbolTable,
    TokenClass,
    color_by_name,
)
from .tokenizer import Token, Tokenizer


logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 64
_NESTING_CLASSES = (
    TokenClass.LEFT_PAREN,
    TokenClass.LEFT_RIGHT_PAREN,
    TokenClass.UNARY,
    TokenClass.BINARY,
)

_SHORT_HEX_COLOR = regex.compile(r'#([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])')
_LONG_HEX_COLOR = regex.compile(r'#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})')


def resolve_color(node: Node) -> Color:
    """Resolve the flattened text of ``node`` to a colour.

    Accepts ``#rgb``, ``#rrggbb`` and the standard colour names; anything
    else resolves to black.
    """
    text = flatten_text(node)

    match = _SHORT_HEX_COLOR.fullmatch(text)
    if match:
        r, g, b = (int(digit * 2, 16) for digit in match.groups())
        return Color(text, r, g, b)

    match = _LONG_HEX_COLOR.fullmatch(text)
    if match:
        r, g, b = (int(pair, 16) for pair in match.groups())
        return Color(text, r, g, b)

    r, g, b = color_by_name(text) or (0, 0, 0)
    return Color(text, r, g, b)


def concat_expressions(left: Optional[Node], right: Optional[Node]) -> Optional[Node]:
    """Join two expressions into one flat :class:`Sequence`."""
    if left is None:
        return right
    if right is None:
        return left
    left_children = left.children if isinstance(left, Sequence) else (left,)
    right_children = right.children if isinstance(right, Sequence) else (right,)
    return Sequence(left_children + right_children)


def unwrap_paren(node: Optional[Node]) -> Optional[Node]:
    """Turn a paren with ordinary (non-bar) brackets into a :class:`Group`."""
    if not isinstance(node, Paren):
        return node
    if node.left is not None and node.left.token_class is not TokenClass.LEFT_PAREN:
        return node
    if node.right is not None and node.right.token_class is not TokenClass.RIGHT_PAREN:
        return node
    return Group.from_paren(node)


class AsciiMathParser:
    """Build expression trees from ASCIIMath strings."""

    def __init__(self, symbol_table: Optional[SymbolTable] = None,
                 max_depth: int = MAX_NESTING_DEPTH):
        self.symbol_table = symbol_table or DEFAULT_SYMBOL_TABLE
        self.max_depth = max_depth

    def parse(self, text: str) -> Optional[Node]:
        """Parse ``text``; returns ``None`` when it holds no expression."""
        tokenizer = Tokenizer(text, self.symbol_table)
        return self._parse_expression(tokenizer, None, 0)

    def _parse_expression(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                          depth: int) -> Optional[Node]:
        expression = None

        while True:
            first = self._parse_intermediate(tokenizer, close_class, depth)
            if first is None:
                break

            token = tokenizer.next()
            if token.token_class is TokenClass.INFIX and token.symbol is Symbol.FRAC:
                second = self._parse_intermediate(tokenizer, close_class, depth)
                if second is None:
                    # trailing '/' is dropped
                    expression = concat_expressions(expression, first)
                else:
                    fraction = InfixOp(
                        SymbolNode.from_token(token),
                        unwrap_paren(first),
                        unwrap_paren(second),
                    )
                    expression = concat_expressions(expression, fraction)
            elif token.token_class is TokenClass.EOF:
                expression = concat_expressions(expression, first)
                break
            else:
                expression = concat_expressions(expression, first)
                tokenizer.pushback(token)
                if token.token_class is close_class:
                    break

        return expression

    def _parse_intermediate(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                            depth: int) -> Optional[Node]:
        base = self._parse_simple(tokenizer, close_class, depth)
        sub = None
        sup = None

        token = tokenizer.next()
        if token.token_class is TokenClass.INFIX and token.symbol is Symbol.SUB:
            sub = self._parse_simple(tokenizer, close_class, depth)
            if sub is not None:
                following = tokenizer.next()
                if following.token_class is TokenClass.INFIX and following.symbol is Symbol.SUP:
                    sup = self._parse_simple(tokenizer, close_class, depth)
                else:
                    tokenizer.pushback(following)
        elif token.token_class is TokenClass.INFIX and token.symbol is Symbol.SUP:
            sup = self._parse_simple(tokenizer, close_class, depth)
        else:
            tokenizer.pushback(token)

        if base is None or (sub is None and sup is None):
            return base
        return SubSup(base, unwrap_paren(sub), unwrap_paren(sup))

    def _parse_simple(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                      depth: int) -> Optional[Node]:
        token = tokenizer.next()
        token_class = token.token_class

        if token_class in _NESTING_CLASSES and depth >= self.max_depth:
            logger.debug(f"Nesting deeper than {self.max_depth} at {token.text!r}, kept literally")
            return SymbolNode.from_token(token)

        if token_class in (TokenClass.LEFT_PAREN, TokenClass.LEFT_RIGHT_PAREN):
            return self._parse_paren(tokenizer, token, depth + 1)
        if token_class is TokenClass.RIGHT_PAREN:
            if close_class is None:
                # stray closing bracket, kept literally
                return SymbolNode.from_token(token)
            tokenizer.pushback(token)
            return None
        if token_class is TokenClass.UNARY:
            return self._parse_unary(tokenizer, close_class, token, depth + 1)
        if token_class is TokenClass.BINARY:
            return self._parse_binary(tokenizer, close_class, token, depth + 1)
        if token_class is TokenClass.EOF:
            return None
        if token_class is TokenClass.NUMBER:
            return Number(token.text)
        if token_class is TokenClass.TEXT:
            return Text(token.text)
        if token_class is TokenClass.IDENTIFIER:
            return Identifier(token.text)
        return SymbolNode.from_token(token)

    def _parse_paren(self, tokenizer: Tokenizer, opening: Token, depth: int) -> Node:
        if opening.token_class is TokenClass.LEFT_PAREN:
            close_with = TokenClass.RIGHT_PAREN
        else:
            close_with = TokenClass.LEFT_RIGHT_PAREN

        closing = tokenizer.next()
        if closing.token_class is close_with:
            return Paren(SymbolNode.from_token(opening), None, SymbolNode.from_token(closing))
        tokenizer.pushback(closing)

        body = self._parse_expression(tokenizer, close_with, depth)

        closing = tokenizer.next()
        if closing.token_class is close_with:
            paren = Paren(SymbolNode.from_token(opening), body, SymbolNode.from_token(closing))
            return convert_to_matrix(paren)
        tokenizer.pushback(closing)

        if opening.token_class is TokenClass.LEFT_RIGHT_PAREN:
            # an unmatched '|' is just a symbol
            return concat_expressions(SymbolNode.from_token(opening), body)
        return Paren(SymbolNode.from_token(opening), body, None)

    def _parse_operand(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                       converter: OperandConverter, depth: int) -> Node:
        operand = unwrap_paren(self._parse_simple(tokenizer, close_class, depth))
        if operand is None:
            operand = EMPTY_IDENTIFIER
        return self._apply_converter(converter, operand)

    def _parse_unary(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                     token: Token, depth: int) -> Node:
        operand = self._parse_operand(tokenizer, close_class, token.converter_for(0), depth)
        return UnaryOp(SymbolNode.from_token(token), operand)

    def _parse_binary(self, tokenizer: Tokenizer, close_class: Optional[TokenClass],
                      token: Token, depth: int) -> Node:
        operand1 = self._parse_operand(tokenizer, close_class, token.converter_for(0), depth)
        operand2 = self._parse_operand(tokenizer, close_class, token.converter_for(1), depth)
        return BinaryOp(SymbolNode.from_token(token), operand1, operand2)

    @staticmethod
    def _apply_converter(converter: OperandConverter, operand: Node) -> Node:
        if converter is OperandConverter.RESOLVE_COLOR:
            return resolve_color(operand)
        return operand


def parse(text: str, symbol_table: Optional[SymbolTable] = None) -> Optional[Node]:
    """Parse ``text`` with a fresh parser."""
    return AsciiMathParser(symbol_table).parse(text)
