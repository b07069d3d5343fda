"""
Tokenizer for ASCIIMath input

Splits the input into classified tokens using longest-match lookup in the
symbol table. Unknown characters come back as one-character identifiers, so
scanning always advances.
"""

import regex
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .symbol_table import (
    DEFAULT_SYMBOL_TABLE,
    OperandConverter,
    Symbol,
    SymbolTable,
    TokenClass,
)


@dataclass(frozen=True)
class Token:
    token_class: TokenClass
    text: str
    symbol: Optional[Symbol] = None
    converters: Tuple[OperandConverter, ...] = ()

    def converter_for(self, index: int) -> OperandConverter:
        if index < len(self.converters):
            return self.converters[index]
        return OperandConverter.NONE


EOF_TOKEN = Token(TokenClass.EOF, '')


class Tokenizer:
    """Pull-based tokenizer with a single pushback slot."""

    _WHITESPACE = regex.compile(r'\s*')
    _NUMBER = regex.compile(r'[0-9]+(?:\.[0-9]+)?')

    def __init__(self, text: str, symbol_table: Optional[SymbolTable] = None):
        self._text = text
        self._position = 0
        self._pushed_back: Optional[Token] = None
        self._table = symbol_table or DEFAULT_SYMBOL_TABLE

    @property
    def position(self) -> int:
        """Offset of the first character not yet consumed."""
        return self._position

    def next(self) -> Token:
        if self._pushed_back is not None:
            token = self._pushed_back
            self._pushed_back = None
            return token

        self._position = self._WHITESPACE.match(self._text, self._position).end()
        if self._position >= len(self._text):
            return EOF_TOKEN

        char = self._text[self._position]
        if char == '"':
            return self._read_until(1, '"')
        if self._text.startswith('text(', self._position):
            return self._read_until(5, ')')
        if char in '0123456789':
            return self._read_number()
        return self._read_symbol()

    def pushback(self, token: Token):
        """Return ``token`` to the stream; pushing back EOF is a no-op."""
        if token.token_class is TokenClass.EOF:
            return
        if self._pushed_back is not None:
            raise ValueError("Only one token can be pushed back")
        self._pushed_back = token

    def _read_until(self, prefix_length: int, terminator: str) -> Token:
        """Read text after a prefix up to ``terminator``, or to the end of input."""
        start = self._position + prefix_length
        end = self._text.find(terminator, start)
        if end < 0:
            self._position = len(self._text)
            return Token(TokenClass.TEXT, self._text[start:])

        self._position = end + 1
        return Token(TokenClass.TEXT, self._text[start:end])

    def _read_number(self) -> Token:
        match = self._NUMBER.match(self._text, self._position)
        self._position = match.end()
        return Token(TokenClass.NUMBER, match.group())

    def _read_symbol(self) -> Token:
        text = self._text
        start = self._position
        limit = min(len(text), start + self._table.max_key_length)

        end = start
        while end < limit:
            char = text[end]
            if char == '\\' and end + 1 < len(text) and (text[end + 1].isspace() or text[end + 1].isdigit()):
                # escaped space or digit
                end += 2
            elif char.isspace() or char.isdigit():
                break
            else:
                end += 1

        while end > start:
            candidate = text[start:end]
            entry = self._table.lookup(candidate)
            if entry is not None:
                self._position = end
                return Token(entry.token_class, candidate, entry.symbol, entry.converters)
            end -= 1

        # not in the table: a single character identifier
        self._position = start + 1
        return Token(TokenClass.IDENTIFIER, text[start])

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token.token_class is TokenClass.EOF:
                return
            yield token


def tokenize(text: str, symbol_table: Optional[SymbolTable] = None) -> List[Token]:
    """Tokenize ``text`` completely, excluding the final EOF token."""
    return list(Tokenizer(text, symbol_table))
