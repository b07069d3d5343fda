"""
Expression tree for parsed ASCIIMath

Nodes are immutable and compare structurally. The tree is owned top-down and
carries no parent references.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .symbol_table import Symbol, TokenClass
from .tokenizer import Token


@dataclass(frozen=True)
class Number:
    text: str


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Identifier:
    text: str


@dataclass(frozen=True)
class SymbolNode:
    """A table symbol together with the token class it was parsed as."""
    symbol: Optional[Symbol]
    text: str
    token_class: TokenClass

    @classmethod
    def from_token(cls, token: Token) -> 'SymbolNode':
        return cls(token.symbol, token.text, token.token_class)


@dataclass(frozen=True)
class Sequence:
    children: Tuple['Node', ...]

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator['Node']:
        return iter(self.children)


@dataclass(frozen=True)
class Paren:
    left: Optional[SymbolNode]
    body: Optional['Node']
    right: Optional[SymbolNode]


@dataclass(frozen=True)
class Group:
    """A paren whose brackets were redundant; renders as its body alone."""
    left: Optional[SymbolNode]
    body: Optional['Node']
    right: Optional[SymbolNode]

    @classmethod
    def from_paren(cls, paren: Paren) -> 'Group':
        return cls(paren.left, paren.body, paren.right)


@dataclass(frozen=True)
class Row:
    cells: Tuple['Node', ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator['Node']:
        return iter(self.cells)


@dataclass(frozen=True)
class Matrix:
    left: Optional[SymbolNode]
    rows: Tuple[Row, ...]
    right: Optional[SymbolNode]


def _check_operator(operator: SymbolNode, expected: TokenClass, kind: str):
    if operator.token_class is not expected:
        raise ValueError(
            f"{kind} operator must have token class {expected.value}, "
            f"got {operator.token_class.value} for {operator.text!r}"
        )


@dataclass(frozen=True)
class UnaryOp:
    operator: SymbolNode
    operand: 'Node'

    def __post_init__(self):
        _check_operator(self.operator, TokenClass.UNARY, "Unary")


@dataclass(frozen=True)
class BinaryOp:
    operator: SymbolNode
    operand1: 'Node'
    operand2: 'Node'

    def __post_init__(self):
        _check_operator(self.operator, TokenClass.BINARY, "Binary")


@dataclass(frozen=True)
class InfixOp:
    operator: SymbolNode
    operand1: 'Node'
    operand2: 'Node'

    def __post_init__(self):
        _check_operator(self.operator, TokenClass.INFIX, "Infix")


@dataclass(frozen=True)
class SubSup:
    base: 'Node'
    sub: Optional['Node'] = None
    sup: Optional['Node'] = None

    def __post_init__(self):
        if self.sub is None and self.sup is None:
            raise ValueError("SubSup needs a subscript or a superscript")


@dataclass(frozen=True)
class Color:
    """Colour resolved from the first operand of ``color``."""
    text: str
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class Empty:
    pass


Node = Union[
    Number, Text, Identifier, SymbolNode, Sequence, Paren, Group, Matrix,
    UnaryOp, BinaryOp, InfixOp, SubSup, Color, Empty,
]

EMPTY = Empty()
EMPTY_IDENTIFIER = Identifier('')


def flatten_text(node: Optional[Node]) -> str:
    """Concatenate the source text of every leaf, depth first.

    The brackets of a :class:`Group` are left out.
    """
    if node is None:
        return ''
    if isinstance(node, (Number, Text, Identifier, SymbolNode)):
        return node.text
    if isinstance(node, Sequence):
        return ''.join(flatten_text(child) for child in node)
    if isinstance(node, Group):
        return flatten_text(node.body)
    if isinstance(node, Paren):
        return flatten_text(node.left) + flatten_text(node.body) + flatten_text(node.right)
    if isinstance(node, SubSup):
        return flatten_text(node.base) + flatten_text(node.sub) + flatten_text(node.sup)
    if isinstance(node, UnaryOp):
        return flatten_text(node.operator) + flatten_text(node.operand)
    if isinstance(node, BinaryOp):
        return (flatten_text(node.operator) + flatten_text(node.operand1)
                + flatten_text(node.operand2))
    if isinstance(node, InfixOp):
        return (flatten_text(node.operand1) + flatten_text(node.operator)
                + flatten_text(node.operand2))
    if isinstance(node, (Matrix, Color, Empty)):
        return ''
    raise ValueError(f"Unknown node type: {type(node).__name__}")
