import pytest
from asciimath_mathml.parser import AsciiMathParser
from asciimath_mathml.mathml_renderer import MathMLRenderer
from asciimath_mathml.converter import AsciiMathConverter


@pytest.fixture
def parser():
    """ASCIIMath parser instance."""
    return AsciiMathParser()


@pytest.fixture
def renderer():
    """MathML renderer instance."""
    return MathMLRenderer()


@pytest.fixture
def converter():
    """ASCIIMath converter instance."""
    return AsciiMathConverter()


@pytest.fixture
def sample_expressions():
    """ASCIIMath expressions with their expected MathML body."""
    return {
        'pythagoras': (
            'a^2 + b^2 = c^2',
            '<msup><mi>a</mi><mn>2</mn></msup><mo>+</mo><msup><mi>b</mi><mn>2</mn></msup>'
            '<mo>=</mo><msup><mi>c</mi><mn>2</mn></msup>'
        ),
        'matrix': (
            '((1,2),(3,4))',
            '<mrow><mo>(</mo><mtable><mtr><mtd><mn>1</mn></mtd><mtd><mn>2</mn></mtd></mtr>'
            '<mtr><mtd><mn>3</mn></mtd><mtd><mn>4</mn></mtd></mtr></mtable><mo>)</mo></mrow>'
        ),
        'sum': (
            'sum_(n=0)^oo a_n',
            '<munderover><mo>&#x2211;</mo><mrow><mi>n</mi><mo>=</mo><mn>0</mn></mrow>'
            '<mo>&#x221E;</mo></munderover><msub><mi>a</mi><mi>n</mi></msub>'
        ),
        'sqrt': (
            'sqrt(x+1)',
            '<msqrt><mrow><mi>x</mi><mo>+</mo><mn>1</mn></mrow></msqrt>'
        ),
        'text': (
            'text("foo")',
            '<mtext>"foo"</mtext>'
        ),
        'quadratic': (
            'x = (-b+-sqrt(b^2-4ac))/(2a)',
            '<mi>x</mi><mo>=</mo><mfrac><mrow><mo>&#x2212;</mo><mi>b</mi><mo>&#xB1;</mo>'
            '<msqrt><mrow><msup><mi>b</mi><mn>2</mn></msup><mo>&#x2212;</mo><mn>4</mn>'
            '<mi>a</mi><mi>c</mi></mrow></msqrt></mrow><mrow><mn>2</mn><mi>a</mi></mrow></mfrac>'
        ),
    }


@pytest.fixture
def symbol_config_file(tmp_path):
    """YAML symbol configuration with aliases and display overrides."""
    path = tmp_path / 'symbols.yaml'
    path.write_text(
        'aliases:\n'
        '  RRR: dstruck_capital_r\n'
        '  isin: { symbol: in }\n'
        '  "<|": { symbol: langle, type: left_paren }\n'
        '  "|>": { symbol: rangle, type: right_paren }\n'
        '  bogus: not_a_symbol\n'
        '  sum: plus\n'
        'display:\n'
        '  langle: "⟨"\n'
        '  rangle: "⟩"\n'
        '  nonsense: "?"\n',
        encoding='utf-8'
    )
    return path
