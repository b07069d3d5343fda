"""
Data models for the ASCIIMath to MathML converter
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any
from enum import Enum


class DisplayType(Enum):
    """Value of the ``display`` attribute on the top-level <math> element."""
    NONE = "none"
    BLOCK = "block"
    INLINE = "inline"


@dataclass
class ConversionResult:
    """Outcome of converting one ASCIIMath expression."""
    asciimath: str
    mathml: str
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.mathml

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'asciimath': self.asciimath,
            'mathml': self.mathml,
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'processing_time': self.processing_time,
            'metadata': self.metadata
        }
