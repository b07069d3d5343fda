"""
ASCIIMath to MathML conversion front end
"""

import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import lxml.etree as ET

from .config import ConverterConfig, MathMLOptions
from .mathml_renderer import MathMLRenderer
from .models import ConversionResult
from .nodes import Node
from .parser import AsciiMathParser
from .symbol_table import Symbol, SymbolTable, load_symbol_config


logger = logging.getLogger(__name__)


VALID_TAGS = {
    'math', 'mrow', 'mi', 'mn', 'mo', 'mtext', 'mspace',
    'msub', 'msup', 'msubsup', 'munder', 'mover', 'munderover',
    'mtable', 'mtr', 'mtd', 'mfrac', 'msqrt', 'mroot', 'mstyle',
    'menclose',
}

CONTENT_ELEMENTS = {'mi', 'mn', 'mo', 'mtext'}

REQUIRED_CHILDREN = {
    'mfrac': 2, 'msub': 2, 'msup': 2, 'msubsup': 3,
    'munder': 2, 'mover': 2, 'munderover': 3, 'mroot': 2,
}


@lru_cache(maxsize=256)
def validate_mathml(mathml: str) -> Tuple[bool, Tuple[str, ...]]:
    """Check that ``mathml`` is well-formed and structurally sound.

    Returns ``(is_valid, errors)``; never raises. Results are cached, so
    ``errors`` is a tuple.
    """
    errors = []

    try:
        parser = ET.XMLParser(recover=False)
        root = ET.fromstring(mathml.encode('utf-8'), parser)
    except ET.XMLSyntaxError as e:
        return False, (f"XML syntax error: {e}",)

    if ET.QName(root).localname != 'math':
        errors.append("Root element must be <math>")

    _validate_element(root, errors)
    return len(errors) == 0, tuple(errors)


def _validate_element(element, errors: List[str]):
    tag = ET.QName(element).localname

    if tag not in VALID_TAGS:
        errors.append(f"Invalid MathML element: <{tag}>")

    if tag in CONTENT_ELEMENTS and len(element) > 0:
        errors.append(f"Element <{tag}> should not have child elements")

    if tag in REQUIRED_CHILDREN:
        expected = REQUIRED_CHILDREN[tag]
        actual = len(element)
        if actual != expected:
            errors.append(f"Element <{tag}> requires {expected} children, found {actual}")

    for child in element:
        _validate_element(child, errors)


def _display_overrides(entries: Any) -> Dict[Symbol, str]:
    overrides = {}
    if not isinstance(entries, dict):
        logger.warning(f"Ignoring display overrides: expected a mapping, got {type(entries).__name__}")
        return overrides

    for name, text in entries.items():
        try:
            symbol = Symbol(name)
        except ValueError:
            logger.warning(f"Ignoring display override: unknown symbol {name!r}")
            continue
        overrides[symbol] = str(text)
    return overrides


class AsciiMathConverter:
    """Convert ASCIIMath to MathML."""

    def __init__(self, config: Optional[ConverterConfig] = None):
        """Initialize converter with configuration."""
        self.config = config or ConverterConfig()

        # Setup logging
        if self.config.verbose:
            logging.basicConfig(level=logging.INFO)
        if self.config.debug:
            logging.basicConfig(level=logging.DEBUG)

        symbol_config = {}
        if self.config.symbol_config_path:
            symbol_config = load_symbol_config(self.config.symbol_config_path)

        self.symbol_table = SymbolTable.from_config(symbol_config)
        overrides = _display_overrides(symbol_config.get('display') or {})
        if overrides:
            logger.info(f"Registered {len(overrides)} display overrides")

        # Initialize components
        self.parser = AsciiMathParser(self.symbol_table)
        self.renderer = MathMLRenderer(overrides)

    def parse(self, text: str) -> Optional[Node]:
        """Parse ``text`` into an expression tree."""
        return self.parser.parse(text)

    def render(self, node: Optional[Node], options: Optional[MathMLOptions] = None,
               source: str = '') -> str:
        """Render an expression tree; ``source`` feeds the title attribute."""
        return self.renderer.render(node, options or self.config.default_options, source)

    def convert(self, text: str, options: Optional[MathMLOptions] = None) -> str:
        """Convert ASCIIMath to a MathML string.

        Empty input yields an empty string.
        """
        self._check_length(text)
        start_time = time.time()

        mathml = self.render(self.parse(text), options, source=text)

        logger.debug(
            f"Converted {len(text)} characters in {time.time() - start_time:.4f}s"
        )

        if self.config.validate_output and mathml:
            is_valid, errors = validate_mathml(mathml)
            if not is_valid:
                logger.warning(f"Generated invalid MathML: {errors}")

        return mathml

    def process(self, text: str, options: Optional[MathMLOptions] = None) -> ConversionResult:
        """Convert ``text`` and report validation results alongside the markup."""
        start_time = time.time()
        mathml = self.convert(text, options)

        warnings = []
        if not mathml:
            warnings.append("Input contains no expression")
            is_valid, errors = True, ()
        else:
            is_valid, errors = validate_mathml(mathml)
            if not is_valid:
                logger.warning(f"Generated invalid MathML: {errors}")

        return ConversionResult(
            asciimath=text,
            mathml=mathml,
            is_valid=is_valid,
            errors=list(errors),
            warnings=warnings,
            processing_time=time.time() - start_time,
            metadata={'input_length': len(text)}
        )

    def _check_length(self, text: str):
        limit = self.config.max_input_length
        if limit is not None and len(text) > limit:
            raise ValueError(f"Input ASCIIMath too long: {len(text)} > {limit}")


def asciimath_to_mathml(text: str, display: Union[str, None] = None, title: bool = False,
                        escape_non_ascii: bool = True, fix_phi: bool = True,
                        config_path: Optional[Path] = None) -> str:
    """Convenience function to convert ASCIIMath to MathML."""
    converter = AsciiMathConverter(ConverterConfig(symbol_config_path=config_path))
    options = MathMLOptions(
        display=display,
        include_title=title,
        escape_non_ascii=escape_non_ascii,
        fix_phi=fix_phi
    )
    return converter.convert(text, options)


__all__ = ['AsciiMathConverter', 'asciimath_to_mathml', 'validate_mathml']
