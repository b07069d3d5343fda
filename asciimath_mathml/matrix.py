"""
Matrix detection for freshly closed parentheses

ASCIIMath has no matrix syntax; ``((1,2),(3,4))`` is recognised by shape. A
paren whose body alternates bracketed rows and ``,`` separators becomes a
:class:`Matrix`. Rows may have different cell counts.
"""

import logging
from typing import List, Tuple

from .nodes import EMPTY, Identifier, Matrix, Node, Paren, Row, Sequence
from .symbol_table import Symbol, TokenClass


logger = logging.getLogger(__name__)

MATRIX_SEPARATOR = ','

# (left text, left symbol, right text, right symbol)
ROW_DELIMITERS = {
    ('(', Symbol.LPAREN, ')', Symbol.RPAREN),
    ('[', Symbol.LBRACKET, ']', Symbol.RBRACKET),
}


def is_matrix_separator(node: Node) -> bool:
    return isinstance(node, Identifier) and node.text == MATRIX_SEPARATOR


def is_matrix_row(node: Node) -> bool:
    """A row is a paren delimited by exactly ``(...)`` or ``[...]``."""
    if not isinstance(node, Paren) or node.left is None or node.right is None:
        return False
    if node.left.token_class is not TokenClass.LEFT_PAREN:
        return False
    if node.right.token_class is not TokenClass.RIGHT_PAREN:
        return False
    key = (node.left.text, node.left.symbol, node.right.text, node.right.symbol)
    return key in ROW_DELIMITERS


def _split_rows(body: Node) -> Tuple[List[Node], List[Node]]:
    if isinstance(body, Sequence):
        # even positions are rows, odd positions separators
        children = list(body)
        return children[0::2], children[1::2]
    if isinstance(body, Paren):
        return [body], []
    return [], []


def _chunk_to_cell(chunk: List[Node]) -> Node:
    if not chunk:
        return EMPTY
    if len(chunk) == 1:
        return chunk[0]
    return Sequence(tuple(chunk))


def _row_cells(row: Paren) -> Row:
    content = row.body
    if not isinstance(content, Sequence):
        return Row((content if content is not None else EMPTY,))

    cells = []
    chunk: List[Node] = []
    for child in content:
        if is_matrix_separator(child):
            cells.append(_chunk_to_cell(chunk))
            chunk = []
        else:
            chunk.append(child)
    cells.append(_chunk_to_cell(chunk))
    return Row(tuple(cells))


def convert_to_matrix(paren: Paren) -> Node:
    """Return a :class:`Matrix` for a matrix-shaped paren, otherwise ``paren``."""
    rows, separators = _split_rows(paren.body)

    if not rows or len(rows) <= len(separators):
        return paren
    if not all(is_matrix_separator(s) for s in separators):
        return paren
    if not all(is_matrix_row(r) for r in rows):
        return paren

    matrix = Matrix(paren.left, tuple(_row_cells(row) for row in rows), paren.right)
    logger.debug(f"Detected matrix with {len(matrix.rows)} rows")
    return matrix
