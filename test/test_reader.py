"""
Tests for the reader: syntax tree to runtime values
"""

import pytest
from parsing import CSTNode, ROOT_TAG, NUMBER_TAG, SYMBOL_TAG, SEXPR_TAG, QEXPR_TAG, CHAR_TAG, REGEX_TAG
from reader import read_value
from values import (
  make_number, make_symbol, make_sexpr, make_qexpr, make_error, show_value
)


class TestReadFromParser:
  """Reading what the grammar produces"""

  def test_root_becomes_sexpr(self, read):
    assert read("+ 1 2") == make_sexpr([make_symbol("+"), make_number(1), make_number(2)])

  def test_nested_lists(self, read):
    v = read("(head {1 (2)})")
    assert show_value(v) == "((head {1 (2)}))"
    inner = v['value'][0]['value'][1]
    assert inner == make_qexpr([make_number(1), make_sexpr([make_number(2)])])

  def test_negative_number(self, read):
    assert read("-17") == make_sexpr([make_number(-17)])

  def test_number_limits(self, read):
    assert read("9223372036854775807")['value'][0] == make_number(2 ** 63 - 1)
    assert read("-9223372036854775808")['value'][0] == make_number(-2 ** 63)

  def test_out_of_range_number_is_error(self, read):
    assert read("9223372036854775808")['value'][0] == make_error("Invalid number.")
    assert read("-9223372036854775809")['value'][0] == make_error("Invalid number.")


class TestReadHandBuiltTrees:
  """The reader only depends on tags, contents and children"""

  def test_skips_punctuation_and_anchors(self):
    tree = CSTNode(ROOT_TAG, "", [
        CSTNode(REGEX_TAG, ""),
        CSTNode(QEXPR_TAG, "", [
            CSTNode(CHAR_TAG, "{"),
            CSTNode(NUMBER_TAG, "1"),
            CSTNode(SYMBOL_TAG, "x"),
            CSTNode(CHAR_TAG, "}"),
        ]),
        CSTNode(REGEX_TAG, ""),
    ])
    assert read_value(tree) == make_sexpr([make_qexpr([make_number(1), make_symbol("x")])])

  def test_tags_are_matched_by_substring(self):
    tree = CSTNode("sexpr", "", [CSTNode("number", "3"), CSTNode("symbol", "y")])
    assert read_value(tree) == make_sexpr([make_number(3), make_symbol("y")])

  def test_unknown_tag_is_error_value(self):
    assert read_value(CSTNode("string", "abc")) == make_error("Unknown syntax node 'string'")

  def test_malformed_number_is_error_value(self):
    assert read_value(CSTNode(NUMBER_TAG, "12x")) == make_error("Invalid number.")

  @pytest.mark.parametrize("text", ["1_000", " 12", "12\n", "+5", "--1", ""])
  def test_number_text_must_match_literal_shape(self, text):
    assert read_value(CSTNode(NUMBER_TAG, text)) == make_error("Invalid number.")
