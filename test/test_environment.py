"""
Tests for the global environment
"""

import pytest
from environment import make_env, env_get, env_put, env_add_builtin, env_names, env_delete
from values import (
  FUNCTION, make_number, make_symbol, make_qexpr, make_error, pop_value
)


def identity_builtin(env, a):
  return a


class TestEnvironment:
  """get and put copy values in and out"""

  @pytest.fixture
  def env(self):
    return make_env()

  def test_unbound_symbol(self, env):
    assert env_get(env, make_symbol("nope")) == make_error("unbound symbol 'nope'")

  def test_put_then_get(self, env):
    env_put(env, make_symbol("x"), make_number(5))
    assert env_get(env, make_symbol("x")) == make_number(5)

  def test_put_stores_a_copy(self, env):
    value = make_qexpr([make_number(1), make_number(2)])
    env_put(env, make_symbol("xs"), value)
    pop_value(value, 0)
    assert env_get(env, make_symbol("xs")) == make_qexpr([make_number(1), make_number(2)])

  def test_get_returns_a_copy(self, env):
    env_put(env, make_symbol("xs"), make_qexpr([make_number(1)]))
    first = env_get(env, make_symbol("xs"))
    pop_value(first, 0)
    assert env_get(env, make_symbol("xs")) == make_qexpr([make_number(1)])

  def test_rebinding_replaces_in_place(self, env):
    env_put(env, make_symbol("a"), make_number(1))
    env_put(env, make_symbol("b"), make_number(2))
    env_put(env, make_symbol("a"), make_number(3))
    assert env_names(env) == ["a", "b"]
    assert env_get(env, make_symbol("a")) == make_number(3)

  def test_put_requires_symbol_key(self, env):
    with pytest.raises(TypeError):
      env_put(env, make_number(1), make_number(2))

  def test_add_builtin(self, env):
    env_add_builtin(env, "id", identity_builtin)
    f = env_get(env, make_symbol("id"))
    assert f['type'] == FUNCTION
    assert f['value'] is identity_builtin

  def test_delete_clears_bindings(self, env):
    env_put(env, make_symbol("x"), make_number(1))
    env_delete(env)
    assert env_names(env) == []


class TestBuiltinEnvironment:
  """The catalog registered into a fresh global environment"""

  def test_catalog_order(self, env):
    assert env_names(env) == ["list", "head", "tail", "eval", "join", "len", "def",
                              "+", "-", "*", "/", "%", "^"]

  def test_every_entry_is_a_function(self, env):
    for name in env_names(env):
      assert env_get(env, make_symbol(name))['type'] == FUNCTION
