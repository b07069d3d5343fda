"""
Configuration classes for the ASCIIMath to MathML converter
"""

from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from .models import DisplayType


@dataclass
class MathMLOptions:
    """Options for rendering the top-level <math> element and its content."""
    # <math> attributes
    display: DisplayType = DisplayType.NONE
    include_title: bool = False
    title: Optional[str] = None  # defaults to the ASCIIMath source

    # Text output
    escape_non_ascii: bool = True

    # https://github.com/asciidoctor/asciimath/issues/52
    fix_phi: bool = True

    def __post_init__(self):
        """Accept display names as well as enum members."""
        if self.display is None:
            self.display = DisplayType.NONE
        elif not isinstance(self.display, DisplayType):
            self.display = DisplayType(str(self.display).lower())


@dataclass
class ConverterConfig:
    """Converter configuration."""
    # General settings
    verbose: bool = False
    debug: bool = False

    # Output checks
    validate_output: bool = False
    max_input_length: Optional[int] = None

    # Symbols
    symbol_config_path: Optional[Path] = None

    # Rendering
    default_options: MathMLOptions = field(default_factory=MathMLOptions)

    def __post_init__(self):
        """Initialize paths."""
        if self.symbol_config_path:
            self.symbol_config_path = Path(self.symbol_config_path)
