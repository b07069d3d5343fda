"""
MathML rendering of ASCIIMath expression trees

The renderer walks a tree produced by :mod:`asciimath_mathml.parser`, builds an
lxml element tree of presentation MathML and serialises it. How each symbol is
displayed (its glyph and whether it is an operator, identifier, accent, font
switch, ...) comes from :data:`DISPLAY_TABLE`.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

import lxml.etree as ET
import regex

from .config import MathMLOptions
from .models import DisplayType
from .nodes import (
    BinaryOp,
    Color,
    Empty,
    Group,
    Identifier,
    InfixOp,
    Matrix,
    Node,
    Number,
    Paren,
    Sequence,
    SubSup,
    SymbolNode,
    Text,
    UnaryOp,
)
from .symbol_table import Symbol, TokenClass


logger = logging.getLogger(__name__)


class DisplayCategory(Enum):
    """How a symbol is presented in MathML."""
    OPERATOR = "operator"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"
    LEFT_RIGHT_PAREN = "left_right_paren"
    IDENTIFIER = "identifier"
    ACCENT = "accent"
    FONT = "font"
    WRAP = "wrap"
    CANCEL = "cancel"
    SQRT = "sqrt"
    OVER = "over"
    UNDER = "under"
    ROOT = "root"
    COLOR = "color"
    FRAC = "frac"
    TEXT = "text"


class Position(Enum):
    OVER = "over"
    UNDER = "under"


class RowMode(Enum):
    """When a sequence gets wrapped in ``<mrow>``."""
    OMIT = "omit"    # never, top level only
    AVOID = "avoid"  # only for non-empty sequences
    FORCE = "force"  # always


@dataclass(frozen=True)
class DisplayDetail:
    text: Optional[str]
    category: DisplayCategory
    is_under_over: bool = False
    position: Position = Position.OVER
    wrap_left: Optional[str] = None
    wrap_right: Optional[str] = None


OPERATOR_LIKE = {
    DisplayCategory.OPERATOR,
    DisplayCategory.ACCENT,
    DisplayCategory.LEFT_PAREN,
    DisplayCategory.RIGHT_PAREN,
    DisplayCategory.LEFT_RIGHT_PAREN,
}

# display categories the renderer handles for each operator token class
OPERATOR_CATEGORIES = {
    TokenClass.UNARY: {
        DisplayCategory.IDENTIFIER,
        DisplayCategory.OPERATOR,
        DisplayCategory.WRAP,
        DisplayCategory.ACCENT,
        DisplayCategory.FONT,
        DisplayCategory.CANCEL,
        DisplayCategory.SQRT,
    },
    TokenClass.BINARY: {
        DisplayCategory.OVER,
        DisplayCategory.UNDER,
        DisplayCategory.ROOT,
        DisplayCategory.COLOR,
        DisplayCategory.FRAC,
    },
    TokenClass.INFIX: {DisplayCategory.FRAC},
}


def _op(text: str, under_over: bool = False) -> DisplayDetail:
    return DisplayDetail(text, DisplayCategory.OPERATOR, is_under_over=under_over)


def _ident(text: str) -> DisplayDetail:
    return DisplayDetail(text, DisplayCategory.IDENTIFIER)


def _accent(text: str, position: Position, under_over: bool = False) -> DisplayDetail:
    return DisplayDetail(text, DisplayCategory.ACCENT, is_under_over=under_over,
                         position=position)


def _wrap(name: str, left: str, right: str) -> DisplayDetail:
    return DisplayDetail(name, DisplayCategory.WRAP, wrap_left=left, wrap_right=right)


def _font(variant: str) -> DisplayDetail:
    return DisplayDetail(variant, DisplayCategory.FONT)


def _tag(category: DisplayCategory) -> DisplayDetail:
    return DisplayDetail(None, category)


DISPLAY_TABLE: Dict[Symbol, DisplayDetail] = {
    # Operation symbols
    Symbol.PLUS: _op('+'),
    Symbol.MINUS: _op('−'),
    Symbol.CDOT: _op('⋅'),
    Symbol.AST: _op('*'),
    Symbol.STAR: _op('⋆'),
    Symbol.SLASH: _op('/'),
    Symbol.BACKSLASH: _op('\\'),
    Symbol.SETMINUS: _op('\\'),
    Symbol.TIMES: _op('×'),
    Symbol.LTIMES: _op('⋉'),
    Symbol.RTIMES: _op('⋊'),
    Symbol.BOWTIE: _op('⋈'),
    Symbol.DIV: _op('÷'),
    Symbol.CIRC: _op('⚬'),
    Symbol.OPLUS: _op('⊕'),
    Symbol.OTIMES: _op('⊗'),
    Symbol.ODOT: _op('⊙'),
    Symbol.SUM: _op('∑', under_over=True),
    Symbol.PROD: _op('∏', under_over=True),
    Symbol.WEDGE: _op('∧'),
    Symbol.BIGWEDGE: _op('⋀', under_over=True),
    Symbol.VEE: _op('∨'),
    Symbol.BIGVEE: _op('⋁', under_over=True),
    Symbol.CAP: _op('∩'),
    Symbol.BIGCAP: _op('⋂', under_over=True),
    Symbol.CUP: _op('∪'),
    Symbol.BIGCUP: _op('⋃', under_over=True),

    # Relation symbols
    Symbol.EQ: _op('='),
    Symbol.NE: _op('≠'),
    Symbol.ASSIGN: _op('≔'),
    Symbol.LT: _op('<'),
    Symbol.MLT: _op('≪'),
    Symbol.GT: _op('>'),
    Symbol.MGT: _op('≫'),
    Symbol.LE: _op('≤'),
    Symbol.GE: _op('≥'),
    Symbol.PREC: _op('≺'),
    Symbol.SUCC: _op('≻'),
    Symbol.PRECEQ: _op('⪯'),
    Symbol.SUCCEQ: _op('⪰'),
    Symbol.IN: _op('∈'),
    Symbol.NOTIN: _op('∉'),
    Symbol.SUBSET: _op('⊂'),
    Symbol.SUPSET: _op('⊃'),
    Symbol.SUBSETEQ: _op('⊆'),
    Symbol.SUPSETEQ: _op('⊇'),
    Symbol.EQUIV: _op('≡'),
    Symbol.SIM: _op('∼'),
    Symbol.CONG: _op('≅'),
    Symbol.APPROX: _op('≈'),
    Symbol.PROPTO: _op('∝'),

    # Logical symbols
    Symbol.AND: DisplayDetail('and', DisplayCategory.TEXT),
    Symbol.OR: DisplayDetail('or', DisplayCategory.TEXT),
    Symbol.NOT: _op('¬'),
    Symbol.IMPLIES: _op('⇒'),
    Symbol.IF: _op('if'),
    Symbol.IFF: _op('⇔'),
    Symbol.FORALL: _op('∀'),
    Symbol.EXISTS: _op('∃'),
    Symbol.BOT: _op('⊥'),
    Symbol.TOP: _op('⊤'),
    Symbol.VDASH: _op('⊢'),
    Symbol.MODELS: _op('⊨'),

    # Grouping brackets
    Symbol.LPAREN: DisplayDetail('(', DisplayCategory.LEFT_PAREN),
    Symbol.RPAREN: DisplayDetail(')', DisplayCategory.RIGHT_PAREN),
    Symbol.LBRACKET: DisplayDetail('[', DisplayCategory.LEFT_PAREN),
    Symbol.RBRACKET: DisplayDetail(']', DisplayCategory.RIGHT_PAREN),
    Symbol.LBRACE: DisplayDetail('{', DisplayCategory.LEFT_PAREN),
    Symbol.RBRACE: DisplayDetail('}', DisplayCategory.RIGHT_PAREN),
    Symbol.VBAR: DisplayDetail('|', DisplayCategory.LEFT_RIGHT_PAREN),
    Symbol.LANGLE: DisplayDetail('〈', DisplayCategory.LEFT_PAREN),
    Symbol.RANGLE: DisplayDetail('〉', DisplayCategory.RIGHT_PAREN),
    Symbol.PARALLEL: DisplayDetail('∥', DisplayCategory.LEFT_RIGHT_PAREN),

    # Miscellaneous symbols
    Symbol.INTEGRAL: _op('∫'),
    Symbol.DX: _ident('dx'),
    Symbol.DY: _ident('dy'),
    Symbol.DZ: _ident('dz'),
    Symbol.DT: _ident('dt'),
    Symbol.CONTOURINTEGRAL: _op('∮'),
    Symbol.PARTIAL: _op('∂'),
    Symbol.NABLA: _op('∇'),
    Symbol.PM: _op('±'),
    Symbol.MP: _op('∓'),
    Symbol.EMPTYSET: _op('∅'),
    Symbol.INFTY: _op('∞'),
    Symbol.ALEPH: _op('ℵ'),
    Symbol.ELLIPSIS: _op('…'),
    Symbol.THEREFORE: _op('∴'),
    Symbol.BECAUSE: _op('∵'),
    Symbol.ANGLE: _op('∠'),
    Symbol.TRIANGLE: _op('△'),
    Symbol.PRIME: _op('′'),
    Symbol.TILDE: _accent('~', Position.OVER),
    Symbol.NBSP: _op('\u00a0'),
    Symbol.FROWN: _op('⌢'),
    Symbol.QUAD: _op('\u00a0' * 2),
    Symbol.QQUAD: _op('\u00a0' * 4),
    Symbol.CDOTS: _op('⋯'),
    Symbol.VDOTS: _op('⋮'),
    Symbol.DDOTS: _op('⋱'),
    Symbol.DIAMOND: _op('⋄'),
    Symbol.SQUARE: _op('□'),
    Symbol.LFLOOR: _op('⌊'),
    Symbol.RFLOOR: _op('⌋'),
    Symbol.LCEILING: _op('⌈'),
    Symbol.RCEILING: _op('⌉'),
    Symbol.DSTRUCK_CAPITAL_C: _op('ℂ'),
    Symbol.DSTRUCK_CAPITAL_N: _op('ℕ'),
    Symbol.DSTRUCK_CAPITAL_Q: _op('ℚ'),
    Symbol.DSTRUCK_CAPITAL_R: _op('ℝ'),
    Symbol.DSTRUCK_CAPITAL_Z: _op('ℤ'),
    Symbol.F: _ident('f'),
    Symbol.G: _ident('g'),

    # Standard functions
    Symbol.LIM: _op('lim', under_over=True),
    Symbol.LIM_UPPER: _op('Lim', under_over=True),
    Symbol.MIN: _op('min', under_over=True),
    Symbol.MAX: _op('max', under_over=True),
    Symbol.SIN: _ident('sin'),
    Symbol.SIN_UPPER: _ident('Sin'),
    Symbol.COS: _ident('cos'),
    Symbol.COS_UPPER: _ident('Cos'),
    Symbol.TAN: _ident('tan'),
    Symbol.TAN_UPPER: _ident('Tan'),
    Symbol.SINH: _ident('sinh'),
    Symbol.SINH_UPPER: _ident('Sinh'),
    Symbol.COSH: _ident('cosh'),
    Symbol.COSH_UPPER: _ident('Cosh'),
    Symbol.TANH: _ident('tanh'),
    Symbol.TANH_UPPER: _ident('Tanh'),
    Symbol.COT: _ident('cot'),
    Symbol.COT_UPPER: _ident('Cot'),
    Symbol.SEC: _ident('sec'),
    Symbol.SEC_UPPER: _ident('Sec'),
    Symbol.CSC: _ident('csc'),
    Symbol.CSC_UPPER: _ident('Csc'),
    Symbol.ARCSIN: _ident('arcsin'),
    Symbol.ARCCOS: _ident('arccos'),
    Symbol.ARCTAN: _ident('arctan'),
    Symbol.COTH: _ident('coth'),
    Symbol.SECH: _ident('sech'),
    Symbol.CSCH: _ident('csch'),
    Symbol.EXP: _ident('exp'),
    Symbol.ABS: _wrap('abs', '|', '|'),
    Symbol.NORM: _wrap('norm', '∥', '∥'),
    Symbol.FLOOR: _wrap('floor', '⌊', '⌋'),
    Symbol.CEIL: _wrap('ceil', '⌈', '⌉'),
    Symbol.LOG: _ident('log'),
    Symbol.LOG_UPPER: _ident('Log'),
    Symbol.LN: _ident('ln'),
    Symbol.LN_UPPER: _ident('Ln'),
    Symbol.DET: _ident('det'),
    Symbol.DIM: _ident('dim'),
    Symbol.KER: _ident('ker'),
    Symbol.MOD: _ident('mod'),
    Symbol.GCD: _ident('gcd'),
    Symbol.LCM: _ident('lcm'),
    Symbol.LUB: _ident('lub'),
    Symbol.GLB: _ident('glb'),

    # Arrows
    Symbol.UPARROW: _op('↑'),
    Symbol.DOWNARROW: _op('↓'),
    Symbol.RIGHTARROW: _op('→'),
    Symbol.TO: _op('→'),
    Symbol.RIGHTARROWTAIL: _op('↣'),
    Symbol.TWOHEADRIGHTARROW: _op('↠'),
    Symbol.TWOHEADRIGHTARROWTAIL: _op('⤖'),
    Symbol.MAPSTO: _op('↦'),
    Symbol.LEFTARROW: _op('←'),
    Symbol.LEFTRIGHTARROW: _op('↔'),
    Symbol.RIGHTARROW_UPPER: _op('⇒'),
    Symbol.LEFTARROW_UPPER: _op('⇐'),
    Symbol.LEFTRIGHTARROW_UPPER: _op('⇔'),

    # Unary and binary tags
    Symbol.SQRT: _tag(DisplayCategory.SQRT),
    Symbol.CANCEL: _tag(DisplayCategory.CANCEL),
    Symbol.ROOT: _tag(DisplayCategory.ROOT),
    Symbol.FRAC: _tag(DisplayCategory.FRAC),
    Symbol.STACKREL: _tag(DisplayCategory.OVER),
    Symbol.OVERSET: _tag(DisplayCategory.OVER),
    Symbol.UNDERSET: _tag(DisplayCategory.UNDER),
    Symbol.COLOR: _tag(DisplayCategory.COLOR),
    Symbol.SUB: _op('_'),
    Symbol.SUP: _op('^'),

    # Accents
    Symbol.HAT: _accent('^', Position.OVER),
    Symbol.OVERLINE: _accent('¯', Position.OVER),
    Symbol.VEC: _accent('→', Position.OVER),
    Symbol.DOT: _accent('.', Position.OVER),
    Symbol.DDOT: _accent('..', Position.OVER),
    Symbol.OVERARC: _accent('⏜', Position.OVER),
    Symbol.UNDERLINE: _accent('_', Position.UNDER),
    Symbol.UNDERBRACE: _accent('⏟', Position.UNDER, under_over=True),
    Symbol.OVERBRACE: _accent('⏞', Position.OVER, under_over=True),

    # Font commands
    Symbol.BOLD: _font('bold'),
    Symbol.DOUBLE_STRUCK: _font('double-struck'),
    Symbol.ITALIC: _font('italic'),
    Symbol.BOLD_ITALIC: _font('bold-italic'),
    Symbol.SCRIPT: _font('script'),
    Symbol.BOLD_SCRIPT: _font('bold-script'),
    Symbol.MONOSPACE: _font('monospace'),
    Symbol.FRAKTUR: _font('fraktur'),
    Symbol.BOLD_FRAKTUR: _font('bold-fraktur'),
    Symbol.SANS_SERIF: _font('sans-serif'),
    Symbol.BOLD_SANS_SERIF: _font('bold-sans-serif'),
    Symbol.SANS_SERIF_ITALIC: _font('sans-serif-italic'),
    Symbol.SANS_SERIF_BOLD_ITALIC: _font('sans-serif-bold-italic'),
    Symbol.ROMAN: _font('normal'),

    # Greek letters
    Symbol.ALPHA: _ident('α'),
    Symbol.ALPHA_UPPER: _ident('Α'),
    Symbol.BETA: _ident('β'),
    Symbol.BETA_UPPER: _ident('Β'),
    Symbol.GAMMA: _ident('γ'),
    Symbol.GAMMA_UPPER: _op('Γ'),
    Symbol.DELTA: _ident('δ'),
    Symbol.DELTA_UPPER: _op('Δ'),
    Symbol.EPSILON: _ident('ε'),
    Symbol.EPSILON_UPPER: _ident('Ε'),
    Symbol.VAREPSILON: _ident('ɛ'),
    Symbol.ZETA: _ident('ζ'),
    Symbol.ZETA_UPPER: _ident('Ζ'),
    Symbol.ETA: _ident('η'),
    Symbol.ETA_UPPER: _ident('Η'),
    Symbol.THETA: _ident('θ'),
    Symbol.THETA_UPPER: _op('Θ'),
    Symbol.VARTHETA: _ident('ϑ'),
    Symbol.IOTA: _ident('ι'),
    Symbol.IOTA_UPPER: _ident('Ι'),
    Symbol.KAPPA: _ident('κ'),
    Symbol.KAPPA_UPPER: _ident('Κ'),
    Symbol.LAMBDA: _ident('λ'),
    Symbol.LAMBDA_UPPER: _op('Λ'),
    Symbol.MU: _ident('μ'),
    Symbol.MU_UPPER: _ident('Μ'),
    Symbol.NU: _ident('ν'),
    Symbol.NU_UPPER: _ident('Ν'),
    Symbol.XI: _ident('ξ'),
    Symbol.XI_UPPER: _op('Ξ'),
    Symbol.OMICRON: _ident('ο'),
    Symbol.OMICRON_UPPER: _ident('Ο'),
    Symbol.PI: _ident('π'),
    Symbol.PI_UPPER: _op('Π'),
    Symbol.RHO: _ident('ρ'),
    Symbol.RHO_UPPER: _ident('Ρ'),
    Symbol.SIGMA: _ident('σ'),
    Symbol.SIGMA_UPPER: _op('Σ'),
    Symbol.TAU: _ident('τ'),
    Symbol.TAU_UPPER: _ident('Τ'),
    Symbol.UPSILON: _ident('υ'),
    Symbol.UPSILON_UPPER: _ident('Υ'),
    Symbol.PHI: _ident('ϕ'),
    Symbol.PHI_UPPER: _ident('Φ'),
    Symbol.VARPHI: _ident('φ'),
    Symbol.CHI: _ident('χ'),
    Symbol.CHI_UPPER: _ident('Χ'),
    Symbol.PSI: _ident('ψ'),
    Symbol.PSI_UPPER: _ident('Ψ'),
    Symbol.OMEGA: _ident('ω'),
    Symbol.OMEGA_UPPER: _op('Ω'),
}

# https://github.com/asciidoctor/asciimath/issues/52
_UNFIXED_PHI = {
    Symbol.PHI: _ident('φ'),
    Symbol.VARPHI: _ident('ϕ'),
}


def get_display_detail(symbol: Optional[Symbol], fix_phi: bool = True) -> Optional[DisplayDetail]:
    """Display detail for ``symbol``, or ``None`` when it has none."""
    if symbol is None:
        return None
    if not fix_phi and symbol in _UNFIXED_PHI:
        return _UNFIXED_PHI[symbol]
    return DISPLAY_TABLE.get(symbol)


_NON_ASCII = regex.compile(r'[^\x00-\x7F]')
# characters that XML 1.0 documents cannot carry at all
_XML_INVALID = regex.compile(r'[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]')


def _char_reference(match) -> str:
    return f"&#x{ord(match.group()):X};"


def reference_non_ascii(markup: str) -> str:
    """Replace every non-ASCII character with a hexadecimal character reference."""
    return _NON_ASCII.sub(_char_reference, markup)


def xml_safe(text: str) -> str:
    """Replace characters that are not allowed in XML with U+FFFD."""
    return _XML_INVALID.sub('\ufffd', text)


def to_markup(root: ET.Element, escape_non_ascii: bool = True) -> str:
    """Serialise a MathML element tree.

    Empty elements keep an explicit closing tag (``<mi></mi>``, not ``<mi/>``).
    """
    for element in root.iter():
        if element.text is None and len(element) == 0:
            element.text = ''

    markup = ET.tostring(root, encoding='unicode')
    if escape_non_ascii:
        markup = reference_non_ascii(markup)
    return markup


class _MarkupWriter:
    """Builds the element tree for one :meth:`MathMLRenderer.render` call."""

    def __init__(self, renderer: 'MathMLRenderer', options: MathMLOptions, root: ET.Element):
        self._parent = root
        self._renderer = renderer
        self._default_row_mode = renderer.row_mode
        self._fix_phi = options.fix_phi

    @contextmanager
    def element(self, tag: str, attributes: Optional[Dict[str, str]] = None):
        parent = self._parent
        self._parent = ET.SubElement(parent, tag, attributes or {})
        try:
            yield self._parent
        finally:
            self._parent = parent

    def detail(self, symbol: Optional[Symbol]) -> Optional[DisplayDetail]:
        return self._renderer.get_display_detail(symbol, self._fix_phi)

    def resolve(self, node: Optional[Node]) -> Optional[DisplayDetail]:
        if isinstance(node, SymbolNode):
            return self.detail(node.symbol)
        return None

    # Leaves

    def token(self, tag: str, text: str):
        ET.SubElement(self._parent, tag).text = xml_safe(text)

    def identifier_or_operator(self, text: str):
        # https://github.com/asciidoctor/asciimath/issues/58
        if not text or text[0].isalnum():
            self.token('mi', text)
        else:
            self.token('mo', text)

    def symbol(self, node: SymbolNode):
        detail = self.detail(node.symbol)
        if detail is None:
            self.identifier_or_operator(node.text)
            return

        text = detail.text if detail.text is not None else node.text
        if detail.category in OPERATOR_LIKE:
            self.token('mo', text)
        elif detail.category is DisplayCategory.TEXT:
            self.token('mtext', text)
        else:
            self.token('mi', text)

    # Structure

    def node(self, node: Optional[Node], row_mode: RowMode = RowMode.AVOID):
        if row_mode is RowMode.FORCE:
            self.row(node)
            return
        if node is None:
            return

        if isinstance(node, Sequence):
            if (len(node) <= 0 and row_mode is RowMode.AVOID) or row_mode is RowMode.OMIT:
                for child in node:
                    self.node(child)
            else:
                self.row(node)
        elif isinstance(node, Group):
            self.node(node.body)
        elif isinstance(node, Text):
            self.token('mtext', node.text)
        elif isinstance(node, Number):
            self.token('mn', node.text)
        elif isinstance(node, Identifier):
            self.identifier_or_operator(node.text)
        elif isinstance(node, SymbolNode):
            self.symbol(node)
        elif isinstance(node, Paren):
            self.fenced(self.paren_text(node.left), node.body, self.paren_text(node.right))
        elif isinstance(node, Matrix):
            self.matrix(node)
        elif isinstance(node, SubSup):
            self.sub_sup(node)
        elif isinstance(node, UnaryOp):
            self.unary(node)
        elif isinstance(node, BinaryOp):
            self.binary(node)
        elif isinstance(node, InfixOp):
            self.infix(node)
        elif isinstance(node, (Color, Empty)):
            pass
        else:
            raise ValueError(f"Unknown node type: {type(node).__name__}")

    def row(self, node: Optional[Node]):
        with self.element('mrow'):
            if isinstance(node, Sequence):
                for child in node:
                    self.node(child)
            else:
                self.node(node)

    def paren_text(self, paren: Optional[SymbolNode]) -> str:
        if paren is None or paren.symbol is None:
            return ''
        detail = self.detail(paren.symbol)
        if detail is not None and detail.text is not None:
            return detail.text
        return paren.text

    def fenced(self, left: str, body: Optional[Node], right: str):
        if not left and not right:
            self.node(body)
            return

        with self.element('mrow'):
            if left:
                self.token('mo', left)
            self.node(body)
            if right:
                self.token('mo', right)

    def matrix(self, matrix: Matrix):
        left = self.paren_text(matrix.left)
        right = self.paren_text(matrix.right)

        if not left and not right:
            self.table(matrix)
            return

        with self.element('mrow'):
            if left:
                self.token('mo', left)
            self.table(matrix)
            if right:
                self.token('mo', right)

    def table(self, matrix: Matrix):
        with self.element('mtable'):
            for row in matrix.rows:
                with self.element('mtr'):
                    for cell in row:
                        with self.element('mtd'):
                            self.node(cell)

    # Scripts

    def _operator_detail(self, node: Optional[Node]) -> Optional[DisplayDetail]:
        if isinstance(node, UnaryOp):
            node = node.operator
        return self.resolve(node)

    def is_under_over(self, node: Optional[Node]) -> bool:
        detail = self._operator_detail(node)
        return detail is not None and detail.is_under_over

    def is_accent(self, node: Optional[Node]) -> bool:
        detail = self._operator_detail(node)
        return detail is not None and detail.category is DisplayCategory.ACCENT

    def sub_sup(self, node: SubSup):
        if self.is_under_over(node.base):
            self.under_over(node.base, node.sub, node.sup)
        else:
            self.scripts(node.base, node.sub, node.sup)

    def under_over(self, base: Node, under: Optional[Node], over: Optional[Node]):
        default = self._default_row_mode
        accent_under = self.is_accent(under)
        accent = self.is_accent(over)
        under_mode = RowMode.AVOID if accent_under else default
        over_mode = RowMode.AVOID if accent else default

        if under is not None and over is not None:
            tag = 'munderover'
        elif under is not None:
            tag = 'munder'
        elif over is not None:
            tag = 'mover'
        else:
            self.node(base)
            return

        attributes = {}
        if accent and over is not None:
            attributes['accent'] = 'true'
        if accent_under and under is not None:
            attributes['accentunder'] = 'true'

        with self.element(tag, attributes):
            self.node(base, default)
            if under is not None:
                self.node(under, under_mode)
            if over is not None:
                self.node(over, over_mode)

    def scripts(self, base: Node, sub: Optional[Node], sup: Optional[Node]):
        default = self._default_row_mode
        if sub is not None and sup is not None:
            tag = 'msubsup'
        elif sub is not None:
            tag = 'msub'
        elif sup is not None:
            tag = 'msup'
        else:
            self.node(base)
            return

        with self.element(tag):
            self.node(base, default)
            if sub is not None:
                self.node(sub, default)
            if sup is not None:
                self.node(sup, default)

    # Operators

    def unary(self, node: UnaryOp):
        detail = self.detail(node.operator.symbol)
        if detail is None:
            return

        category = detail.category
        if category is DisplayCategory.IDENTIFIER:
            self.prefixed('mi', detail.text, node.operand)
        elif category is DisplayCategory.OPERATOR:
            self.prefixed('mo', detail.text, node.operand)
        elif category is DisplayCategory.WRAP:
            self.fenced(detail.wrap_left or '', node.operand, detail.wrap_right or '')
        elif category is DisplayCategory.ACCENT:
            if detail.position is Position.OVER:
                self.under_over(node.operand, None, node.operator)
            else:
                self.under_over(node.operand, node.operator, None)
        elif category is DisplayCategory.FONT:
            with self.element('mstyle', {'mathvariant': xml_safe(detail.text)}):
                self.node(node.operand)
        elif category is DisplayCategory.CANCEL:
            with self.element('menclose', {'notation': 'updiagonalstrike'}):
                self.node(node.operand, RowMode.OMIT)
        elif category is DisplayCategory.SQRT:
            with self.element('msqrt'):
                self.node(node.operand, self._default_row_mode)
        else:
            raise ValueError(
                f"Unexpected display category {category.value} for unary {node.operator.text!r}"
            )

    def prefixed(self, tag: str, text: Optional[str], operand: Node):
        with self.element('mrow'):
            self.token(tag, text or '')
            self.node(operand, self._default_row_mode)

    def binary(self, node: BinaryOp):
        detail = self.detail(node.operator.symbol)
        if detail is None:
            return

        category = detail.category
        if category is DisplayCategory.OVER:
            self.under_over(node.operand2, None, node.operand1)
        elif category is DisplayCategory.UNDER:
            self.under_over(node.operand2, node.operand1, None)
        elif category is DisplayCategory.ROOT:
            with self.element('mroot'):
                self.node(node.operand2, self._default_row_mode)
                self.node(node.operand1, self._default_row_mode)
        elif category is DisplayCategory.COLOR and isinstance(node.operand1, Color):
            with self.element('mstyle', {'mathcolor': node.operand1.to_hex()}):
                self.node(node.operand2)
        elif category is DisplayCategory.FRAC:
            self.fraction(node.operand1, node.operand2)
        else:
            raise ValueError(
                f"Unexpected display category {category.value} for binary {node.operator.text!r}"
            )

    def infix(self, node: InfixOp):
        detail = self.detail(node.operator.symbol)
        if detail is None:
            return
        if detail.category is not DisplayCategory.FRAC:
            raise ValueError(
                f"Unexpected display category {detail.category.value} "
                f"for infix {node.operator.text!r}"
            )
        self.fraction(node.operand1, node.operand2)

    def fraction(self, numerator: Node, denominator: Node):
        with self.element('mfrac'):
            self.node(numerator, self._default_row_mode)
            self.node(denominator, self._default_row_mode)


class MathMLRenderer:
    """Render expression trees as MathML strings.

    ``display_overrides`` replaces the display text of individual symbols,
    e.g. ``{Symbol.LANGLE: '⟨'}``. The renderer holds no per-call state
    and can be shared between threads.
    """

    def __init__(self, display_overrides: Optional[Dict[Symbol, str]] = None,
                 row_mode: RowMode = RowMode.AVOID):
        self.row_mode = row_mode
        self._overrides: Dict[Symbol, str] = dict(display_overrides or {})

    def get_display_detail(self, symbol: Optional[Symbol],
                           fix_phi: bool = True) -> Optional[DisplayDetail]:
        detail = get_display_detail(symbol, fix_phi)
        if detail is not None and symbol in self._overrides:
            detail = replace(detail, text=self._overrides[symbol])
        return detail

    def to_element(self, node: Optional[Node],
                   options: Optional[MathMLOptions] = None, source: str = '') -> ET.Element:
        """Build the ``<math>`` element for ``node``."""
        options = options or MathMLOptions()

        root = ET.Element('math')
        if options.display is not DisplayType.NONE:
            root.set('display', options.display.value)
        if options.include_title:
            title = options.title if options.title is not None else source
            root.set('title', xml_safe(title))

        _MarkupWriter(self, options, root).node(node, RowMode.OMIT)
        return root

    def render(self, node: Optional[Node], options: Optional[MathMLOptions] = None,
               source: str = '') -> str:
        """Render ``node`` inside a ``<math>`` element.

        Returns an empty string when ``node`` is ``None``.
        """
        if node is None:
            return ''

        options = options or MathMLOptions()
        return to_markup(self.to_element(node, options, source), options.escape_non_ascii)
