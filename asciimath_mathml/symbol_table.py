"""
Symbol table for ASCIIMath input

Maps every recognised input lexeme to its semantic symbol, token class and
optional operand converter, and resolves the colour names accepted by
``color``.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

import yaml


logger = logging.getLogger(__name__)


class TokenClass(Enum):
    """Parse role of a token."""
    SYMBOL = "symbol"
    TEXT = "text"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    UNARY = "unary"
    BINARY = "binary"
    INFIX = "infix"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"
    LEFT_RIGHT_PAREN = "left_right_paren"
    EOF = "eof"


class OperandConverter(Enum):
    """Named transform applied to an operator's operand at parse time."""
    NONE = "none"
    RESOLVE_COLOR = "resolve_color"


class Symbol(Enum):
    """Semantic identity of a recognised symbol or keyword."""
    # Operation symbols
    PLUS = "plus"
    MINUS = "minus"
    CDOT = "cdot"
    AST = "ast"
    STAR = "star"
    SLASH = "slash"
    BACKSLASH = "backslash"
    SETMINUS = "setminus"
    TIMES = "times"
    LTIMES = "ltimes"
    RTIMES = "rtimes"
    BOWTIE = "bowtie"
    DIV = "div"
    CIRC = "circ"
    OPLUS = "oplus"
    OTIMES = "otimes"
    ODOT = "odot"
    SUM = "sum"
    PROD = "prod"
    WEDGE = "wedge"
    BIGWEDGE = "bigwedge"
    VEE = "vee"
    BIGVEE = "bigvee"
    CAP = "cap"
    BIGCAP = "bigcap"
    CUP = "cup"
    BIGCUP = "bigcup"

    # Relation symbols
    EQ = "eq"
    NE = "ne"
    ASSIGN = "assign"
    LT = "lt"
    MLT = "mlt"
    GT = "gt"
    MGT = "mgt"
    LE = "le"
    GE = "ge"
    PREC = "prec"
    SUCC = "succ"
    PRECEQ = "preceq"
    SUCCEQ = "succeq"
    IN = "in"
    NOTIN = "notin"
    SUBSET = "subset"
    SUPSET = "supset"
    SUBSETEQ = "subseteq"
    SUPSETEQ = "supseteq"
    EQUIV = "equiv"
    SIM = "sim"
    CONG = "cong"
    APPROX = "approx"
    PROPTO = "propto"

    # Logical symbols
    AND = "and"
    OR = "or"
    NOT = "not"
    IMPLIES = "implies"
    IF = "if"
    IFF = "iff"
    FORALL = "forall"
    EXISTS = "exists"
    BOT = "bot"
    TOP = "top"
    VDASH = "vdash"
    MODELS = "models"

    # Grouping brackets
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    VBAR = "vbar"
    LANGLE = "langle"
    RANGLE = "rangle"
    PARALLEL = "parallel"

    # Miscellaneous symbols
    INTEGRAL = "integral"
    DX = "dx"
    DY = "dy"
    DZ = "dz"
    DT = "dt"
    CONTOURINTEGRAL = "contourintegral"
    PARTIAL = "partial"
    NABLA = "nabla"
    PM = "pm"
    MP = "mp"
    EMPTYSET = "emptyset"
    INFTY = "infty"
    ALEPH = "aleph"
    ELLIPSIS = "ellipsis"
    THEREFORE = "therefore"
    BECAUSE = "because"
    ANGLE = "angle"
    TRIANGLE = "triangle"
    PRIME = "prime"
    TILDE = "tilde"
    NBSP = "nbsp"
    FROWN = "frown"
    QUAD = "quad"
    QQUAD = "qquad"
    CDOTS = "cdots"
    VDOTS = "vdots"
    DDOTS = "ddots"
    DIAMOND = "diamond"
    SQUARE = "square"
    LFLOOR = "lfloor"
    RFLOOR = "rfloor"
    LCEILING = "lceiling"
    RCEILING = "rceiling"
    DSTRUCK_CAPITAL_C = "dstruck_capital_c"
    DSTRUCK_CAPITAL_N = "dstruck_capital_n"
    DSTRUCK_CAPITAL_Q = "dstruck_capital_q"
    DSTRUCK_CAPITAL_R = "dstruck_capital_r"
    DSTRUCK_CAPITAL_Z = "dstruck_capital_z"
    F = "f"
    G = "g"

    # Standard functions
    LIM = "lim"
    LIM_UPPER = "Lim"
    MIN = "min"
    MAX = "max"
    SIN = "sin"
    SIN_UPPER = "Sin"
    COS = "cos"
    COS_UPPER = "Cos"
    TAN = "tan"
    TAN_UPPER = "Tan"
    SINH = "sinh"
    SINH_UPPER = "Sinh"
    COSH = "cosh"
    COSH_UPPER = "Cosh"
    TANH = "tanh"
    TANH_UPPER = "Tanh"
    COT = "cot"
    COT_UPPER = "Cot"
    SEC = "sec"
    SEC_UPPER = "Sec"
    CSC = "csc"
    CSC_UPPER = "Csc"
    ARCSIN = "arcsin"
    ARCCOS = "arccos"
    ARCTAN = "arctan"
    COTH = "coth"
    SECH = "sech"
    CSCH = "csch"
    EXP = "exp"
    ABS = "abs"
    NORM = "norm"
    FLOOR = "floor"
    CEIL = "ceil"
    LOG = "log"
    LOG_UPPER = "Log"
    LN = "ln"
    LN_UPPER = "Ln"
    DET = "det"
    DIM = "dim"
    KER = "ker"
    MOD = "mod"
    GCD = "gcd"
    LCM = "lcm"
    LUB = "lub"
    GLB = "glb"

    # Arrows
    UPARROW = "uparrow"
    DOWNARROW = "downarrow"
    RIGHTARROW = "rightarrow"
    TO = "to"
    RIGHTARROWTAIL = "rightarrowtail"
    TWOHEADRIGHTARROW = "twoheadrightarrow"
    TWOHEADRIGHTARROWTAIL = "twoheadrightarrowtail"
    MAPSTO = "mapsto"
    LEFTARROW = "leftarrow"
    LEFTRIGHTARROW = "leftrightarrow"
    RIGHTARROW_UPPER = "Rightarrow"
    LEFTARROW_UPPER = "Leftarrow"
    LEFTRIGHTARROW_UPPER = "Leftrightarrow"

    # Unary and binary tags
    SQRT = "sqrt"
    ROOT = "root"
    FRAC = "frac"
    STACKREL = "stackrel"
    OVERSET = "overset"
    UNDERSET = "underset"
    COLOR = "color"
    SUB = "sub"
    SUP = "sup"

    # Accents
    HAT = "hat"
    OVERLINE = "overline"
    VEC = "vec"
    DOT = "dot"
    DDOT = "ddot"
    OVERARC = "overarc"
    UNDERLINE = "underline"
    UNDERBRACE = "underbrace"
    OVERBRACE = "overbrace"
    CANCEL = "cancel"

    # Font commands
    BOLD = "bold"
    DOUBLE_STRUCK = "double_struck"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"
    SCRIPT = "script"
    BOLD_SCRIPT = "bold_script"
    MONOSPACE = "monospace"
    FRAKTUR = "fraktur"
    BOLD_FRAKTUR = "bold_fraktur"
    SANS_SERIF = "sans_serif"
    BOLD_SANS_SERIF = "bold_sans_serif"
    SANS_SERIF_ITALIC = "sans_serif_italic"
    SANS_SERIF_BOLD_ITALIC = "sans_serif_bold_italic"
    ROMAN = "roman"

    # Greek letters
    ALPHA = "alpha"
    ALPHA_UPPER = "Alpha"
    BETA = "beta"
    BETA_UPPER = "Beta"
    GAMMA = "gamma"
    GAMMA_UPPER = "Gamma"
    DELTA = "delta"
    DELTA_UPPER = "Delta"
    EPSILON = "epsilon"
    EPSILON_UPPER = "Epsilon"
    VAREPSILON = "varepsilon"
    ZETA = "zeta"
    ZETA_UPPER = "Zeta"
    ETA = "eta"
    ETA_UPPER = "Eta"
    THETA = "theta"
    THETA_UPPER = "Theta"
    VARTHETA = "vartheta"
    IOTA = "iota"
    IOTA_UPPER = "Iota"
    KAPPA = "kappa"
    KAPPA_UPPER = "Kappa"
    LAMBDA = "lambda"
    LAMBDA_UPPER = "Lambda"
    MU = "mu"
    MU_UPPER = "Mu"
    NU = "nu"
    NU_UPPER = "Nu"
    XI = "xi"
    XI_UPPER = "Xi"
    OMICRON = "omicron"
    OMICRON_UPPER = "Omicron"
    PI = "pi"
    PI_UPPER = "Pi"
    RHO = "rho"
    RHO_UPPER = "Rho"
    SIGMA = "sigma"
    SIGMA_UPPER = "Sigma"
    TAU = "tau"
    TAU_UPPER = "Tau"
    UPSILON = "upsilon"
    UPSILON_UPPER = "Upsilon"
    PHI = "phi"
    PHI_UPPER = "Phi"
    VARPHI = "varphi"
    CHI = "chi"
    CHI_UPPER = "Chi"
    PSI = "psi"
    PSI_UPPER = "Psi"
    OMEGA = "omega"
    OMEGA_UPPER = "Omega"


@dataclass(frozen=True)
class SymbolEntry:
    """Table entry for one lexeme.

    ``converters`` holds one transform per operand slot: the single operand
    of a unary operator, or the first and second operand of a binary one.
    """
    symbol: Optional[Symbol]
    token_class: TokenClass
    converters: Tuple[OperandConverter, ...] = ()

    def converter_for(self, index: int) -> OperandConverter:
        if index < len(self.converters):
            return self.converters[index]
        return OperandConverter.NONE


# Plain symbols, no special parse role
_SYMBOLS = {
    # Operation symbols
    '+': Symbol.PLUS,
    '-': Symbol.MINUS,
    '*': Symbol.CDOT, 'cdot': Symbol.CDOT,
    '**': Symbol.AST, 'ast': Symbol.AST,
    '***': Symbol.STAR, 'star': Symbol.STAR,
    '//': Symbol.SLASH,
    '\\\\': Symbol.BACKSLASH, 'backslash': Symbol.BACKSLASH,
    'setminus': Symbol.SETMINUS,
    'xx': Symbol.TIMES, 'times': Symbol.TIMES,
    '|><': Symbol.LTIMES, 'ltimes': Symbol.LTIMES,
    '><|': Symbol.RTIMES, 'rtimes': Symbol.RTIMES,
    '|><|': Symbol.BOWTIE, 'bowtie': Symbol.BOWTIE,
    '-:': Symbol.DIV, 'div': Symbol.DIV, 'divide': Symbol.DIV,
    '@': Symbol.CIRC, 'circ': Symbol.CIRC,
    'o+': Symbol.OPLUS, 'oplus': Symbol.OPLUS,
    'ox': Symbol.OTIMES, 'otimes': Symbol.OTIMES,
    'o.': Symbol.ODOT, 'odot': Symbol.ODOT,
    'sum': Symbol.SUM,
    'prod': Symbol.PROD,
    '^^': Symbol.WEDGE, 'wedge': Symbol.WEDGE,
    '^^^': Symbol.BIGWEDGE, 'bigwedge': Symbol.BIGWEDGE,
    'vv': Symbol.VEE, 'vee': Symbol.VEE,
    'vvv': Symbol.BIGVEE, 'bigvee': Symbol.BIGVEE,
    'nn': Symbol.CAP, 'cap': Symbol.CAP,
    'nnn': Symbol.BIGCAP, 'bigcap': Symbol.BIGCAP,
    'uu': Symbol.CUP, 'cup': Symbol.CUP,
    'uuu': Symbol.BIGCUP, 'bigcup': Symbol.BIGCUP,

    # Relation symbols
    '=': Symbol.EQ,
    '!=': Symbol.NE, 'ne': Symbol.NE,
    ':=': Symbol.ASSIGN,
    '<': Symbol.LT, 'lt': Symbol.LT,
    'mlt': Symbol.MLT, 'll': Symbol.MLT,
    '>': Symbol.GT, 'gt': Symbol.GT,
    'mgt': Symbol.MGT, 'gg': Symbol.MGT,
    '<=': Symbol.LE, 'le': Symbol.LE,
    '>=': Symbol.GE, 'ge': Symbol.GE,
    '-<': Symbol.PREC, '-lt': Symbol.PREC, 'prec': Symbol.PREC,
    '>-': Symbol.SUCC, 'succ': Symbol.SUCC,
    '-<=': Symbol.PRECEQ, 'preceq': Symbol.PRECEQ,
    '>-=': Symbol.SUCCEQ, 'succeq': Symbol.SUCCEQ,
    'in': Symbol.IN,
    '!in': Symbol.NOTIN, 'notin': Symbol.NOTIN,
    'sub': Symbol.SUBSET, 'subset': Symbol.SUBSET,
    'sup': Symbol.SUPSET, 'supset': Symbol.SUPSET,
    'sube': Symbol.SUBSETEQ, 'subseteq': Symbol.SUBSETEQ,
    'supe': Symbol.SUPSETEQ, 'supseteq': Symbol.SUPSETEQ,
    '-=': Symbol.EQUIV, 'equiv': Symbol.EQUIV,
    '~': Symbol.SIM, 'sim': Symbol.SIM,
    '~=': Symbol.CONG, 'cong': Symbol.CONG,
    '~~': Symbol.APPROX, 'approx': Symbol.APPROX,
    'prop': Symbol.PROPTO, 'propto': Symbol.PROPTO,

    # Logical symbols
    'and': Symbol.AND,
    'or': Symbol.OR,
    'not': Symbol.NOT, 'neg': Symbol.NOT,
    '=>': Symbol.IMPLIES, 'implies': Symbol.IMPLIES,
    'if': Symbol.IF,
    '<=>': Symbol.IFF, 'iff': Symbol.IFF,
    'AA': Symbol.FORALL, 'forall': Symbol.FORALL,
    'EE': Symbol.EXISTS, 'exists': Symbol.EXISTS,
    '_|_': Symbol.BOT, 'bot': Symbol.BOT,
    'TT': Symbol.TOP, 'top': Symbol.TOP,
    '|--': Symbol.VDASH, 'vdash': Symbol.VDASH,
    '|==': Symbol.MODELS, 'models': Symbol.MODELS,

    # Vertical bar used as a plain symbol
    ':|:': Symbol.VBAR,

    # Miscellaneous symbols
    'int': Symbol.INTEGRAL,
    'dx': Symbol.DX,
    'dy': Symbol.DY,
    'dz': Symbol.DZ,
    'dt': Symbol.DT,
    'oint': Symbol.CONTOURINTEGRAL,
    'del': Symbol.PARTIAL, 'partial': Symbol.PARTIAL,
    'grad': Symbol.NABLA, 'nabla': Symbol.NABLA,
    '+-': Symbol.PM, 'pm': Symbol.PM,
    '-+': Symbol.MP, 'mp': Symbol.MP,
    'O/': Symbol.EMPTYSET, 'emptyset': Symbol.EMPTYSET,
    'oo': Symbol.INFTY, 'infty': Symbol.INFTY,
    'aleph': Symbol.ALEPH,
    '...': Symbol.ELLIPSIS, 'ldots': Symbol.ELLIPSIS,
    ':.': Symbol.THEREFORE, 'therefore': Symbol.THEREFORE,
    ":'": Symbol.BECAUSE, 'because': Symbol.BECAUSE,
    '/_': Symbol.ANGLE, 'angle': Symbol.ANGLE,
    '/_\\': Symbol.TRIANGLE, 'triangle': Symbol.TRIANGLE,
    "'": Symbol.PRIME, 'prime': Symbol.PRIME,
    '\\ ': Symbol.NBSP,
    'frown': Symbol.FROWN,
    'quad': Symbol.QUAD,
    'qquad': Symbol.QQUAD,
    'cdots': Symbol.CDOTS,
    'vdots': Symbol.VDOTS,
    'ddots': Symbol.DDOTS,
    'diamond': Symbol.DIAMOND,
    'square': Symbol.SQUARE,
    '|__': Symbol.LFLOOR, 'lfloor': Symbol.LFLOOR,
    '__|': Symbol.RFLOOR, 'rfloor': Symbol.RFLOOR,
    '|~': Symbol.LCEILING, 'lceiling': Symbol.LCEILING,
    '~|': Symbol.RCEILING, 'rceiling': Symbol.RCEILING,
    'CC': Symbol.DSTRUCK_CAPITAL_C,
    'NN': Symbol.DSTRUCK_CAPITAL_N,
    'QQ': Symbol.DSTRUCK_CAPITAL_Q,
    'RR': Symbol.DSTRUCK_CAPITAL_R,
    'ZZ': Symbol.DSTRUCK_CAPITAL_Z,
    'f': Symbol.F,
    'g': Symbol.G,

    # Standard functions
    'lim': Symbol.LIM,
    'Lim': Symbol.LIM_UPPER,
    'min': Symbol.MIN,
    'max': Symbol.MAX,
    'sin': Symbol.SIN, 'Sin': Symbol.SIN_UPPER,
    'cos': Symbol.COS, 'Cos': Symbol.COS_UPPER,
    'tan': Symbol.TAN, 'Tan': Symbol.TAN_UPPER,
    'sinh': Symbol.SINH, 'Sinh': Symbol.SINH_UPPER,
    'cosh': Symbol.COSH, 'Cosh': Symbol.COSH_UPPER,
    'tanh': Symbol.TANH, 'Tanh': Symbol.TANH_UPPER,
    'cot': Symbol.COT, 'Cot': Symbol.COT_UPPER,
    'sec': Symbol.SEC, 'Sec': Symbol.SEC_UPPER,
    'csc': Symbol.CSC, 'Csc': Symbol.CSC_UPPER,
    'arcsin': Symbol.ARCSIN,
    'arccos': Symbol.ARCCOS,
    'arctan': Symbol.ARCTAN,
    'coth': Symbol.COTH,
    'sech': Symbol.SECH,
    'csch': Symbol.CSCH,
    'exp': Symbol.EXP,
    'log': Symbol.LOG, 'Log': Symbol.LOG_UPPER,
    'ln': Symbol.LN, 'Ln': Symbol.LN_UPPER,
    'det': Symbol.DET,
    'dim': Symbol.DIM,
    'ker': Symbol.KER,
    'mod': Symbol.MOD,
    'gcd': Symbol.GCD,
    'lcm': Symbol.LCM,
    'lub': Symbol.LUB,
    'glb': Symbol.GLB,

    # Arrows
    'uarr': Symbol.UPARROW, 'uparrow': Symbol.UPARROW,
    'darr': Symbol.DOWNARROW, 'downarrow': Symbol.DOWNARROW,
    'rarr': Symbol.RIGHTARROW, 'rightarrow': Symbol.RIGHTARROW,
    '->': Symbol.TO, 'to': Symbol.TO,
    '>->': Symbol.RIGHTARROWTAIL, 'rightarrowtail': Symbol.RIGHTARROWTAIL,
    '->>': Symbol.TWOHEADRIGHTARROW, 'twoheadrightarrow': Symbol.TWOHEADRIGHTARROW,
    '>->>': Symbol.TWOHEADRIGHTARROWTAIL,
    'twoheadrightarrowtail': Symbol.TWOHEADRIGHTARROWTAIL,
    '|->': Symbol.MAPSTO, 'mapsto': Symbol.MAPSTO,
    'larr': Symbol.LEFTARROW, 'leftarrow': Symbol.LEFTARROW,
    'harr': Symbol.LEFTRIGHTARROW, 'leftrightarrow': Symbol.LEFTRIGHTARROW,
    'rArr': Symbol.RIGHTARROW_UPPER, 'Rightarrow': Symbol.RIGHTARROW_UPPER,
    'lArr': Symbol.LEFTARROW_UPPER, 'Leftarrow': Symbol.LEFTARROW_UPPER,
    'hArr': Symbol.LEFTRIGHTARROW_UPPER, 'Leftrightarrow': Symbol.LEFTRIGHTARROW_UPPER,

    # Greek letters
    'alpha': Symbol.ALPHA, 'Alpha': Symbol.ALPHA_UPPER,
    'beta': Symbol.BETA, 'Beta': Symbol.BETA_UPPER,
    'gamma': Symbol.GAMMA, 'Gamma': Symbol.GAMMA_UPPER,
    'delta': Symbol.DELTA, 'Delta': Symbol.DELTA_UPPER,
    'epsi': Symbol.EPSILON, 'epsilon': Symbol.EPSILON, 'Epsilon': Symbol.EPSILON_UPPER,
    'varepsilon': Symbol.VAREPSILON,
    'zeta': Symbol.ZETA, 'Zeta': Symbol.ZETA_UPPER,
    'eta': Symbol.ETA, 'Eta': Symbol.ETA_UPPER,
    'theta': Symbol.THETA, 'Theta': Symbol.THETA_UPPER,
    'vartheta': Symbol.VARTHETA,
    'iota': Symbol.IOTA, 'Iota': Symbol.IOTA_UPPER,
    'kappa': Symbol.KAPPA, 'Kappa': Symbol.KAPPA_UPPER,
    'lambda': Symbol.LAMBDA, 'Lambda': Symbol.LAMBDA_UPPER,
    'mu': Symbol.MU, 'Mu': Symbol.MU_UPPER,
    'nu': Symbol.NU, 'Nu': Symbol.NU_UPPER,
    'xi': Symbol.XI, 'Xi': Symbol.XI_UPPER,
    'omicron': Symbol.OMICRON, 'Omicron': Symbol.OMICRON_UPPER,
    'pi': Symbol.PI, 'Pi': Symbol.PI_UPPER,
    'rho': Symbol.RHO, 'Rho': Symbol.RHO_UPPER,
    'sigma': Symbol.SIGMA, 'Sigma': Symbol.SIGMA_UPPER,
    'tau': Symbol.TAU, 'Tau': Symbol.TAU_UPPER,
    'upsilon': Symbol.UPSILON, 'Upsilon': Symbol.UPSILON_UPPER,
    'phi': Symbol.PHI, 'Phi': Symbol.PHI_UPPER,
    'varphi': Symbol.VARPHI,
    'chi': Symbol.CHI, 'Chi': Symbol.CHI_UPPER,
    'psi': Symbol.PSI, 'Psi': Symbol.PSI_UPPER,
    'omega': Symbol.OMEGA, 'Omega': Symbol.OMEGA_UPPER,
}

# Brackets
_PARENS = {
    '(': (Symbol.LPAREN, TokenClass.LEFT_PAREN),
    'left(': (Symbol.LPAREN, TokenClass.LEFT_PAREN),
    ')': (Symbol.RPAREN, TokenClass.RIGHT_PAREN),
    'right)': (Symbol.RPAREN, TokenClass.RIGHT_PAREN),
    '[': (Symbol.LBRACKET, TokenClass.LEFT_PAREN),
    'left[': (Symbol.LBRACKET, TokenClass.LEFT_PAREN),
    ']': (Symbol.RBRACKET, TokenClass.RIGHT_PAREN),
    'right]': (Symbol.RBRACKET, TokenClass.RIGHT_PAREN),
    '{': (Symbol.LBRACE, TokenClass.LEFT_PAREN),
    '}': (Symbol.RBRACE, TokenClass.RIGHT_PAREN),
    '|': (Symbol.VBAR, TokenClass.LEFT_RIGHT_PAREN),
    '|:': (Symbol.VBAR, TokenClass.LEFT_PAREN),
    ':|': (Symbol.VBAR, TokenClass.RIGHT_PAREN),
    '(:': (Symbol.LANGLE, TokenClass.LEFT_PAREN),
    '<<': (Symbol.LANGLE, TokenClass.LEFT_PAREN),
    'langle': (Symbol.LANGLE, TokenClass.LEFT_PAREN),
    ':)': (Symbol.RANGLE, TokenClass.RIGHT_PAREN),
    '>>': (Symbol.RANGLE, TokenClass.RIGHT_PAREN),
    'rangle': (Symbol.RANGLE, TokenClass.RIGHT_PAREN),
    # invisible brackets, grouping only
    '{:': (None, TokenClass.LEFT_PAREN),
    ':}': (None, TokenClass.RIGHT_PAREN),
}

# Unary operators
_UNARY = {
    'sqrt': Symbol.SQRT,
    'tilde': Symbol.TILDE,
    'abs': Symbol.ABS, 'Abs': Symbol.ABS,
    'norm': Symbol.NORM,
    'floor': Symbol.FLOOR,
    'ceil': Symbol.CEIL,
    'hat': Symbol.HAT,
    'bar': Symbol.OVERLINE,
    'vec': Symbol.VEC,
    'dot': Symbol.DOT,
    'ddot': Symbol.DDOT,
    'overarc': Symbol.OVERARC, 'overparen': Symbol.OVERARC,
    'ul': Symbol.UNDERLINE, 'underline': Symbol.UNDERLINE,
    'ubrace': Symbol.UNDERBRACE, 'underbrace': Symbol.UNDERBRACE,
    'obrace': Symbol.OVERBRACE, 'overbrace': Symbol.OVERBRACE,
    'cancel': Symbol.CANCEL,

    # Fonts
    'bb': Symbol.BOLD, 'mathbf': Symbol.BOLD,
    'bbb': Symbol.DOUBLE_STRUCK, 'mathbb': Symbol.DOUBLE_STRUCK,
    'ii': Symbol.ITALIC,
    'bii': Symbol.BOLD_ITALIC,
    'cc': Symbol.SCRIPT, 'mathcal': Symbol.SCRIPT,
    'bcc': Symbol.BOLD_SCRIPT,
    'tt': Symbol.MONOSPACE, 'mathtt': Symbol.MONOSPACE,
    'fr': Symbol.FRAKTUR, 'mathfrak': Symbol.FRAKTUR,
    'bfr': Symbol.BOLD_FRAKTUR,
    'sf': Symbol.SANS_SERIF, 'mathsf': Symbol.SANS_SERIF,
    'bsf': Symbol.BOLD_SANS_SERIF,
    'sfi': Symbol.SANS_SERIF_ITALIC,
    'sfbi': Symbol.SANS_SERIF_BOLD_ITALIC,
    'rm': Symbol.ROMAN,
}

# Binary operators
_BINARY = {
    'root': Symbol.ROOT,
    'frac': Symbol.FRAC,
    'stackrel': Symbol.STACKREL,
    'overset': Symbol.OVERSET,
    'underset': Symbol.UNDERSET,
}

# Infix operators
_INFIX = {
    '/': Symbol.FRAC,
    '_': Symbol.SUB,
    '^': Symbol.SUP,
}


def _build_table() -> Dict[str, SymbolEntry]:
    table = {}
    for lexeme, symbol in _SYMBOLS.items():
        table[lexeme] = SymbolEntry(symbol, TokenClass.SYMBOL)
    for lexeme, (symbol, token_class) in _PARENS.items():
        table[lexeme] = SymbolEntry(symbol, token_class)
    for lexeme, symbol in _UNARY.items():
        table[lexeme] = SymbolEntry(symbol, TokenClass.UNARY)
    for lexeme, symbol in _BINARY.items():
        table[lexeme] = SymbolEntry(symbol, TokenClass.BINARY)
    for lexeme, symbol in _INFIX.items():
        table[lexeme] = SymbolEntry(symbol, TokenClass.INFIX)

    # the first operand of color is a colour name or hex code, not math
    table['color'] = SymbolEntry(
        Symbol.COLOR, TokenClass.BINARY, (OperandConverter.RESOLVE_COLOR,)
    )
    return table


SYMBOL_TABLE: Dict[str, SymbolEntry] = _build_table()

MAX_KEY_LENGTH = max(len(lexeme) for lexeme in SYMBOL_TABLE)

COLORS: Dict[str, Tuple[int, int, int]] = {
    'aqua': (0, 255, 255),
    'black': (0, 0, 0),
    'blue': (0, 0, 255),
    'fuchsia': (255, 0, 255),
    'gray': (128, 128, 128),
    'green': (0, 128, 0),
    'lime': (0, 255, 0),
    'maroon': (128, 0, 0),
    'navy': (0, 0, 128),
    'olive': (128, 128, 0),
    'purple': (128, 0, 128),
    'red': (255, 0, 0),
    'silver': (192, 192, 192),
    'teal': (0, 128, 128),
    'white': (255, 255, 255),
    'yellow': (255, 255, 0),
}


def lookup(text: str) -> Optional[SymbolEntry]:
    """Exact-match lookup in the built-in table."""
    return SYMBOL_TABLE.get(text)


def color_by_name(name: str) -> Optional[Tuple[int, int, int]]:
    """Resolve one of the 16 standard colour names, ignoring case."""
    return COLORS.get(name.lower())


def load_symbol_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a symbol configuration from a YAML or JSON file.

    Returns an empty configuration when the file is missing or unreadable.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Symbol configuration {path} does not exist")
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load symbol configuration from {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Symbol configuration {path} must contain a mapping")
        return {}

    logger.info(f"Loaded symbol configuration from {path}")
    return data


# token classes the tokenizer produces itself, never from a table lookup
_SCANNED_CLASSES = (TokenClass.EOF, TokenClass.NUMBER, TokenClass.TEXT, TokenClass.IDENTIFIER)


def _is_single_symbol(lexeme: str) -> bool:
    """Whether the tokenizer's symbol scan can read all of ``lexeme`` at once."""
    if lexeme.startswith('"') or lexeme.startswith('text('):
        return False

    index = 0
    while index < len(lexeme):
        char = lexeme[index]
        escaped = index + 1 < len(lexeme) and (lexeme[index + 1].isspace() or lexeme[index + 1].isdigit())
        if char == '\\' and escaped:
            index += 2
        elif char.isspace() or char.isdigit():
            return False
        else:
            index += 1
    return True


class SymbolTable:
    """The built-in lexeme table extended with user-defined aliases.

    Aliases add new spellings for existing symbols; they never replace a
    built-in lexeme.
    """

    def __init__(self, aliases: Optional[Dict[str, Any]] = None):
        self._aliases: Dict[str, SymbolEntry] = {}
        self.max_key_length = MAX_KEY_LENGTH
        if aliases:
            self._load_aliases(aliases)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SymbolTable':
        return cls(config.get('aliases') or {})

    def _load_aliases(self, aliases: Any):
        if not isinstance(aliases, dict):
            logger.warning(f"Ignoring symbol aliases: expected a mapping, got {type(aliases).__name__}")
            return

        for lexeme, value in aliases.items():
            lexeme = str(lexeme)
            if not lexeme or lexeme in SYMBOL_TABLE:
                logger.warning(f"Ignoring alias {lexeme!r}: shadows a built-in lexeme")
                continue
            if not _is_single_symbol(lexeme):
                logger.warning(f"Ignoring alias {lexeme!r}: whitespace and digits end a symbol")
                continue

            entry = self._alias_entry(lexeme, value)
            if entry is None:
                continue

            self._aliases[lexeme] = entry
            self.max_key_length = max(self.max_key_length, len(lexeme))

        logger.info(f"Registered {len(self._aliases)} symbol aliases")

    def _alias_entry(self, lexeme: str, value: Any) -> Optional[SymbolEntry]:
        if isinstance(value, dict):
            name = value.get('symbol')
            type_name = value.get('type')
        else:
            name = value
            type_name = None

        try:
            symbol = Symbol(name)
        except ValueError:
            logger.warning(f"Ignoring alias {lexeme!r}: unknown symbol {name!r}")
            return None

        builtin = self.entry_for_symbol(symbol)
        if type_name is None:
            if builtin is None:
                return SymbolEntry(symbol, TokenClass.SYMBOL)
            return builtin

        try:
            token_class = TokenClass(type_name)
        except ValueError:
            logger.warning(f"Ignoring alias {lexeme!r}: unknown token type {type_name!r}")
            return None

        if builtin is not None and builtin.token_class is token_class:
            return builtin
        if not self._can_display(symbol, token_class):
            logger.warning(
                f"Ignoring alias {lexeme!r}: {symbol.value!r} cannot be used as a {token_class.value} token"
            )
            return None
        return SymbolEntry(symbol, token_class)

    @staticmethod
    def _can_display(symbol: Symbol, token_class: TokenClass) -> bool:
        if token_class in _SCANNED_CLASSES:
            return False
        if token_class not in (TokenClass.UNARY, TokenClass.BINARY, TokenClass.INFIX):
            return True

        # imported here as the renderer depends on this module
        from .mathml_renderer import OPERATOR_CATEGORIES, get_display_detail

        detail = get_display_detail(symbol)
        return detail is not None and detail.category in OPERATOR_CATEGORIES[token_class]

    @staticmethod
    def entry_for_symbol(symbol: Symbol) -> Optional[SymbolEntry]:
        """First built-in entry carrying ``symbol``."""
        for entry in SYMBOL_TABLE.values():
            if entry.symbol is symbol:
                return entry
        return None

    def lookup(self, text: str) -> Optional[SymbolEntry]:
        entry = SYMBOL_TABLE.get(text)
        if entry is None:
            entry = self._aliases.get(text)
        return entry

    def aliases(self) -> Iterator[Tuple[str, SymbolEntry]]:
        return iter(self._aliases.items())

    def __len__(self) -> int:
        return len(SYMBOL_TABLE) + len(self._aliases)

    def __contains__(self, text: str) -> bool:
        return self.lookup(text) is not None


DEFAULT_SYMBOL_TABLE = SymbolTable()
