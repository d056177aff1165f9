"""
Tests for the evaluator: reduction rules, error propagation and the Q-Expression barrier
"""

from interpreter import eval_value, create_builtin_env
from environment import env_names
from values import (
  make_number, make_symbol, make_sexpr, make_qexpr, make_error, make_function,
  copy_value, show_value
)


class TestNormalForms:
  """Atoms other than symbols evaluate to themselves"""

  def test_number(self, env):
    assert eval_value(env, make_number(4)) == make_number(4)

  def test_error(self, env):
    assert eval_value(env, make_error("x")) == make_error("x")

  def test_qexpr_is_a_barrier(self, env, read):
    v = read("{+ 1 2}")
    assert show_value(eval_value(env, v)) == "{+ 1 2}"

  def test_sexpr_is_evaluated(self, run):
    assert run("(+ 1 2)") == "3"

  def test_function_value(self, env):
    f = eval_value(env, make_symbol("head"))
    assert eval_value(env, copy_value(f)) == f


class TestSymbols:
  """Symbols resolve against the environment"""

  def test_unbound_symbol(self, run):
    assert run("foo") == "Error: unbound symbol 'foo'"

  def test_builtin_symbol(self, run):
    assert run("+") == "<function>"

  def test_bound_symbol_is_idempotent(self, env, run):
    run("def {x} 5")
    once = eval_value(env, make_symbol("x"))
    assert eval_value(env, copy_value(once)) == once == make_number(5)


class TestSExpressions:
  """Reduction of S-Expressions"""

  def test_empty_sexpr_is_returned(self, run):
    assert run("()") == "()"

  def test_singleton_is_unwrapped(self, run):
    assert run("(5)") == "5"
    assert run("((((7))))") == "7"
    assert run("({1 2})") == "{1 2}"

  def test_nested_arithmetic(self, run):
    assert run("(* 2 (+ 1 1))") == "4"
    assert run("+ 1 (* 7 5) 3") == "39"

  def test_non_function_head(self, run):
    assert run("(1 2 3)") == "Error: S-expression does not start with a function!"
    assert run("{head} {1}") == "Error: S-expression does not start with a function!"

  def test_first_error_wins(self, run):
    assert run("(+ 1 (/ 1 0) (unbound-sym))") == "Error: Division by zero!"
    assert run("(+ (unbound-sym) (/ 1 0))") == "Error: unbound symbol 'unbound-sym'"

  def test_error_stops_sibling_evaluation(self, env, run):
    run("(+ (/ 1 0) (def {y} 1))")
    assert "y" not in env_names(env)
    assert run("y") == "Error: unbound symbol 'y'"

  def test_left_to_right_definitions(self, run):
    assert run("(list (def {a} 1) (def {b} 2))") == "{() ()}"
    assert run("+ a b") == "3"

  def test_builtin_receives_remaining_arguments(self, env):
    seen = []

    def record(env, a):
      seen.append(show_value(a))
      return make_number(len(a['value']))

    v = make_sexpr([make_function(record), make_number(1), make_qexpr([make_symbol("x")])])
    assert eval_value(env, v) == make_number(2)
    assert seen == ["(1 {x})"]


class TestDeepCopyLaw:
  """Evaluating a copy gives the same result as evaluating the original"""

  def test_copy_evaluates_the_same(self, read):
    for text in ["+ 1 2", "head {1 2 3}", "eval {* 2 3}", "join {1} 2", "(1 2)"]:
      original = read(text)
      copied = copy_value(original)
      assert eval_value(create_builtin_env(), copied) == eval_value(create_builtin_env(), original)

  def test_evaluation_does_not_touch_bound_value(self, run):
    run("def {xs} {1 2 3}")
    assert run("tail xs") == "{2 3}"
    assert run("xs") == "{1 2 3}"
