"""
ASCIIMath to MathML

A library for parsing ASCIIMath notation into expression trees and
rendering them as presentation MathML.
"""

__version__ = "0.1.0"
__author__ = "ASCIIMath MathML Team"

# Models and configuration
from .models import DisplayType, ConversionResult
from .config import MathMLOptions, ConverterConfig

# Symbols and tokens
from .symbol_table import (
    Symbol,
    SymbolEntry,
    SymbolTable,
    TokenClass,
    OperandConverter,
)
from .tokenizer import Token, Tokenizer, tokenize

# Expression tree
from .nodes import (
    Node,
    Number,
    Text,
    Identifier,
    SymbolNode,
    Sequence,
    Paren,
    Group,
    Row,
    Matrix,
    UnaryOp,
    BinaryOp,
    InfixOp,
    SubSup,
    Color,
    Empty,
)

# Core components
from .parser import AsciiMathParser, parse
from .mathml_renderer import MathMLRenderer, RowMode
from .converter import AsciiMathConverter, asciimath_to_mathml, validate_mathml

__all__ = [
    # Version
    "__version__",

    # Models
    "DisplayType",
    "ConversionResult",

    # Configurations
    "MathMLOptions",
    "ConverterConfig",

    # Symbols and tokens
    "Symbol",
    "SymbolEntry",
    "SymbolTable",
    "TokenClass",
    "OperandConverter",
    "Token",
    "Tokenizer",
    "tokenize",

    # Expression tree
    "Node",
    "Number",
    "Text",
    "Identifier",
    "SymbolNode",
    "Sequence",
    "Paren",
    "Group",
    "Row",
    "Matrix",
    "UnaryOp",
    "BinaryOp",
    "InfixOp",
    "SubSup",
    "Color",
    "Empty",

    # Core components
    "AsciiMathParser",
    "parse",
    "MathMLRenderer",
    "RowMode",
    "AsciiMathConverter",
    "asciimath_to_mathml",
    "validate_mathml",
]


# Convenience function
def create_converter(**kwargs):
    """Create a configured ASCIIMath converter instance."""
    config = ConverterConfig(**kwargs)
    return AsciiMathConverter(config)
