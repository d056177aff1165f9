"""
Crispy Reader
Converts a tagged syntax tree into a tree of runtime values
"""

from typing import Dict
import re

from parsing import CSTNode, ROOT_TAG, REGEX_TAG, NUMBER_PATTERN
from values import (
  make_error,
  make_number,
  make_symbol,
  make_sexpr,
  make_qexpr,
  add_value,
  in_number_range
)


PUNCTUATION = ("(", ")", "{", "}")


def read_number(node: CSTNode) -> Dict:
  """Number literal, or an error when it does not fit a 64-bit integer"""
  # int() alone would also accept "1_000" and surrounding whitespace
  if not isinstance(node.value, str) or not re.fullmatch(NUMBER_PATTERN, node.value):
    return make_error("Invalid number.")
  x = int(node.value)
  return make_number(x) if in_number_range(x) else make_error("Invalid number.")


def read_value(node: CSTNode) -> Dict:
  """Read a syntax node; the root becomes an S-Expression of the top-level forms"""
  tag = node.type

  if "number" in tag:
    return read_number(node)
  if "symbol" in tag:
    return make_symbol(node.value)

  if tag == ROOT_TAG or "sexpr" in tag:
    x = make_sexpr()
  elif "qexpr" in tag:
    x = make_qexpr()
  else:
    return make_error(f"Unknown syntax node '{tag}'")

  for child in node.children:
    if child.value in PUNCTUATION:
      continue
    if child.type == REGEX_TAG:
      continue
    add_value(x, read_value(child))

  return x
