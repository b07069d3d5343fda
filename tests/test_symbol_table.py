import json
import logging
import pytest
from asciimath_mathml.symbol_table import (
    COLORS,
    MAX_KEY_LENGTH,
    SYMBOL_TABLE,
    OperandConverter,
    Symbol,
    SymbolEntry,
    SymbolTable,
    TokenClass,
    color_by_name,
    load_symbol_config,
    lookup,
)
from asciimath_mathml.tokenizer import tokenize


class TestSymbolTable:

    def test_max_key_length(self):
        """Test that the longest lexeme bounds the lookup window."""
        assert MAX_KEY_LENGTH == 21
        assert MAX_KEY_LENGTH == len('twoheadrightarrowtail')

    def test_lookup(self):
        """Test exact lexeme lookup."""
        entry = lookup('sqrt')

        assert entry.symbol is Symbol.SQRT
        assert entry.token_class is TokenClass.UNARY
        assert lookup('sqr') is None

    @pytest.mark.parametrize('lexeme,symbol,token_class', [
        ('+', Symbol.PLUS, TokenClass.SYMBOL),
        ('xx', Symbol.TIMES, TokenClass.SYMBOL),
        ('(', Symbol.LPAREN, TokenClass.LEFT_PAREN),
        ('right]', Symbol.RBRACKET, TokenClass.RIGHT_PAREN),
        ('|', Symbol.VBAR, TokenClass.LEFT_RIGHT_PAREN),
        (':|:', Symbol.VBAR, TokenClass.SYMBOL),
        ('frac', Symbol.FRAC, TokenClass.BINARY),
        ('/', Symbol.FRAC, TokenClass.INFIX),
        ('_', Symbol.SUB, TokenClass.INFIX),
        ('bb', Symbol.BOLD, TokenClass.UNARY),
        ('\\ ', Symbol.NBSP, TokenClass.SYMBOL),
    ])
    def test_entries(self, lexeme, symbol, token_class):
        """Test representative table entries."""
        entry = SYMBOL_TABLE[lexeme]

        assert entry.symbol is symbol
        assert entry.token_class is token_class

    def test_pass_through_brackets(self):
        """Test that invisible brackets carry no symbol."""
        assert SYMBOL_TABLE['{:'] == SymbolEntry(None, TokenClass.LEFT_PAREN)
        assert SYMBOL_TABLE[':}'] == SymbolEntry(None, TokenClass.RIGHT_PAREN)

    def test_color_converter(self):
        """Test that only the first operand of color is converted."""
        entry = SYMBOL_TABLE['color']

        assert entry.converter_for(0) is OperandConverter.RESOLVE_COLOR
        assert entry.converter_for(1) is OperandConverter.NONE
        assert SYMBOL_TABLE['frac'].converter_for(0) is OperandConverter.NONE

    def test_aliases_tokenize_identically(self):
        """Test that every spelling of a symbol yields the same token kind."""
        by_symbol = {}
        for lexeme, entry in SYMBOL_TABLE.items():
            by_symbol.setdefault((entry.symbol, entry.token_class), []).append(lexeme)

        for (symbol, token_class), lexemes in by_symbol.items():
            for lexeme in lexemes:
                tokens = tokenize(lexeme)
                assert len(tokens) == 1, lexeme
                assert tokens[0].symbol is symbol
                assert tokens[0].token_class is token_class


class TestColors:

    def test_palette(self):
        """Test the standard colour names."""
        assert len(COLORS) == 16
        assert COLORS['red'] == (255, 0, 0)
        assert COLORS['silver'] == (192, 192, 192)

    def test_case_insensitive(self):
        """Test that colour names ignore case."""
        assert color_by_name('Blue') == (0, 0, 255)
        assert color_by_name('TEAL') == (0, 128, 128)

    def test_unknown(self):
        """Test that unknown names resolve to nothing."""
        assert color_by_name('orange') is None


class TestSymbolConfig:

    def test_load_yaml(self, symbol_config_file):
        """Test loading a YAML symbol configuration."""
        config = load_symbol_config(symbol_config_file)

        assert config['aliases']['RRR'] == 'dstruck_capital_r'
        assert config['display']['langle'] == '⟨'

    def test_load_json(self, tmp_path):
        """Test loading a JSON symbol configuration."""
        path = tmp_path / 'symbols.json'
        path.write_text(json.dumps({'aliases': {'isin': 'in'}}), encoding='utf-8')

        assert load_symbol_config(path) == {'aliases': {'isin': 'in'}}

    def test_missing_file(self, tmp_path):
        """Test that a missing file yields an empty configuration."""
        assert load_symbol_config(tmp_path / 'missing.yaml') == {}

    def test_invalid_file(self, tmp_path):
        """Test that syntax errors are logged, not raised."""
        path = tmp_path / 'broken.json'
        path.write_text('{"aliases": ', encoding='utf-8')

        assert load_symbol_config(path) == {}

    def test_wrong_shape(self, tmp_path):
        """Test that a non-mapping document is rejected."""
        path = tmp_path / 'list.yaml'
        path.write_text('- a\n- b\n', encoding='utf-8')

        assert load_symbol_config(path) == {}

    def test_wrong_shape_sections(self, tmp_path, caplog):
        """Test that list-valued sections fall back to the built-in table."""
        path = tmp_path / 'lists.yaml'
        path.write_text('aliases:\n  - RRR\ndisplay:\n  - langle\n', encoding='utf-8')

        with caplog.at_level(logging.WARNING):
            table = SymbolTable.from_config(load_symbol_config(path))

        assert list(table.aliases()) == []
        assert table.max_key_length == MAX_KEY_LENGTH
        assert 'expected a mapping, got list' in caplog.text


class TestAliases:

    def test_default_table(self):
        """Test the table without aliases."""
        table = SymbolTable()

        assert len(table) == len(SYMBOL_TABLE)
        assert 'sqrt' in table
        assert table.max_key_length == MAX_KEY_LENGTH

    def test_from_config(self, symbol_config_file):
        """Test aliases loaded from a configuration file."""
        table = SymbolTable.from_config(load_symbol_config(symbol_config_file))
        aliases = dict(table.aliases())

        assert aliases['RRR'] == SymbolEntry(Symbol.DSTRUCK_CAPITAL_R, TokenClass.SYMBOL)
        assert aliases['isin'] == SymbolEntry(Symbol.IN, TokenClass.SYMBOL)
        assert aliases['<|'] == SymbolEntry(Symbol.LANGLE, TokenClass.LEFT_PAREN)
        assert aliases['|>'] == SymbolEntry(Symbol.RANGLE, TokenClass.RIGHT_PAREN)

    def test_skipped_aliases(self, symbol_config_file):
        """Test that unknown symbols and built-in lexemes are not registered."""
        table = SymbolTable.from_config(load_symbol_config(symbol_config_file))
        aliases = dict(table.aliases())

        assert 'bogus' not in aliases
        assert 'sum' not in aliases
        assert table.lookup('sum').symbol is Symbol.SUM

    def test_alias_keeps_operand_converters(self):
        """Test that an alias without a type copies the built-in entry."""
        table = SymbolTable({'colour': 'color'})

        assert table.lookup('colour') == SYMBOL_TABLE['color']

    def test_unknown_token_type(self):
        """Test that an unknown token type skips the alias."""
        table = SymbolTable({'foo': {'symbol': 'plus', 'type': 'sideways'}})

        assert 'foo' not in table

    def test_long_alias_extends_window(self):
        """Test that long aliases grow the lookup window."""
        lexeme = 'averyveryverylongplussign'
        table = SymbolTable({lexeme: 'plus'})

        assert table.max_key_length == len(lexeme)
        tokens = tokenize(lexeme + 'x', table)
        assert [t.symbol for t in tokens] == [Symbol.PLUS, None]

    def test_operator_type_must_be_displayable(self, caplog):
        """Test that operator aliases need a matching display category."""
        with caplog.at_level(logging.WARNING):
            table = SymbolTable({
                'plu': {'symbol': 'plus', 'type': 'binary'},
                'pow': {'symbol': 'alpha', 'type': 'binary'},
                'over': {'symbol': 'sqrt', 'type': 'infix'},
            })

        assert list(table.aliases()) == []
        assert "'plus' cannot be used as a binary token" in caplog.text

    def test_operator_type_accepted(self):
        """Test operator aliases whose display category fits the token type."""
        table = SymbolTable({
            'fn': {'symbol': 'sin', 'type': 'unary'},
            'fracslash': {'symbol': 'frac', 'type': 'infix'},
            'lowered': {'symbol': 'sub', 'type': 'infix'},
            'colour': {'symbol': 'color', 'type': 'binary'},
        })

        assert table.lookup('fn') == SymbolEntry(Symbol.SIN, TokenClass.UNARY)
        assert table.lookup('fracslash') == SymbolEntry(Symbol.FRAC, TokenClass.INFIX)
        assert table.lookup('lowered') == SYMBOL_TABLE['_']
        assert table.lookup('colour') == SYMBOL_TABLE['color']

    @pytest.mark.parametrize('type_name', ['eof', 'number', 'text', 'identifier'])
    def test_scanned_token_types(self, type_name):
        """Test that token types produced by scanning cannot be aliased."""
        table = SymbolTable({'zz': {'symbol': 'plus', 'type': type_name}})

        assert 'zz' not in table

    def test_alias_must_scan_as_one_symbol(self, caplog):
        """Test that aliases with whitespace or digits are not registered."""
        with caplog.at_level(logging.WARNING):
            table = SymbolTable({'x2': 'plus', 'a b': 'plus', '2x': 'plus', '"q': 'plus', 'q\\ ': 'plus'})

        assert 'x2' not in table
        assert 'a b' not in table
        assert '2x' not in table
        assert '"q' not in table
        assert 'q\\ ' in table
        assert "Ignoring alias 'x2'" in caplog.text

    @pytest.mark.parametrize('aliases', [['RRR'], 'RRR', 42])
    def test_aliases_must_be_a_mapping(self, aliases, caplog):
        """Test that an aliases section of the wrong shape is skipped."""
        with caplog.at_level(logging.WARNING):
            table = SymbolTable(aliases)

        assert list(table.aliases()) == []
        assert 'expected a mapping' in caplog.text
