"""
Crispy Standard Library
Builtin functions registered into the global environment

Every builtin takes (env, a) where `a` is the S-Expression of already
evaluated arguments. The builtin owns `a` and must consume it on every
path, returning a fresh result value.
"""

from typing import Callable, Dict
import operator

from values import (
  NUMBER,
  SYMBOL,
  QEXPR,
  make_error,
  make_number,
  make_sexpr,
  delete_value,
  count_cells,
  pop_value,
  take_value,
  join_values,
  in_number_range
)
from environment import env_put
from utilities import (
  fail,
  check_arity,
  check_has_args,
  check_type,
  check_all_types,
  check_list,
  check_not_empty
)


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def crispy_list(env: Dict, a: Dict) -> Dict:
  """Relabel the argument list itself as a Q-Expression"""
  a['type'] = QEXPR
  return a


def crispy_head(env: Dict, a: Dict) -> Dict:
  """Q-Expression holding only the first element"""
  error = (check_arity("head", a, 1)
           or check_type("head", a, 0, QEXPR)
           or check_not_empty("head", a, 0))
  if error:
    return error

  v = take_value(a, 0)
  while count_cells(v) > 1:
    delete_value(pop_value(v, 1))
  return v


def crispy_tail(env: Dict, a: Dict) -> Dict:
  """Q-Expression with the first element removed"""
  error = (check_arity("tail", a, 1)
           or check_type("tail", a, 0, QEXPR)
           or check_not_empty("tail", a, 0))
  if error:
    return error

  v = take_value(a, 0)
  delete_value(pop_value(v, 0))
  return v


def crispy_join(env: Dict, a: Dict) -> Dict:
  """Concatenate every Q-Expression argument, in order"""
  error = check_has_args("join", a) or check_all_types("join", a, QEXPR)
  if error:
    return error

  x = pop_value(a, 0)
  while count_cells(a):
    x = join_values(x, pop_value(a, 0))
  delete_value(a)
  return x


def crispy_len(env: Dict, a: Dict) -> Dict:
  error = (check_arity("len", a, 1)
           or check_list("len", a, 0)
           or check_not_empty("len", a, 0))
  if error:
    return error

  x = make_number(count_cells(a['value'][0]))
  delete_value(a)
  return x


# ============================================================================
# BINDING
# ============================================================================

def crispy_def(env: Dict, a: Dict) -> Dict:
  """Bind each symbol of the first argument to the matching remaining argument"""
  error = check_has_args("def", a) or check_type("def", a, 0, QEXPR)
  if error:
    return error

  syms = a['value'][0]
  for sym in syms['value']:
    if sym['type'] != SYMBOL:
      return fail(a, f"Function 'def' cannot define non-symbol! Got {sym['type']}, expected {SYMBOL}")

  expected = count_cells(syms)
  got = count_cells(a) - 1
  if expected != got:
    return fail(
      a,
      f"Function 'def' cannot define incorrect number of values to symbols! Got {got}, expected {expected}"
    )

  for i, sym in enumerate(syms['value']):
    env_put(env, sym, a['value'][i + 1])

  delete_value(a)
  return make_sexpr()


# ============================================================================
# ARITHMETIC
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero"""
  q = abs(x) // abs(y)
  return q if (x < 0) == (y < 0) else -q


def truncating_mod(x: int, y: int) -> int:
  """Remainder whose sign follows the dividend"""
  return x - y * truncating_div(x, y)


def bounded_pow(x: int, y: int) -> int:
  # |x| >= 2 with y >= 64 is always outside the 64-bit range
  if abs(x) > 1 and y >= 64:
    raise OverflowError(f"{x} ^ {y}")
  return x ** y


ARITHMETIC_OPS: Dict[str, Callable[[int, int], int]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': truncating_div,
    '%': truncating_mod,
    '^': bounded_pow,
}


def builtin_op(env: Dict, a: Dict, op: str) -> Dict:
  """Fold op over Number arguments left to right; unary '-' negates"""
  error = check_has_args(op, a) or check_all_types(op, a, NUMBER)
  if error:
    return error

  x = pop_value(a, 0)

  if op == '-' and count_cells(a) == 0:
    x['value'] = -x['value']
    if not in_number_range(x['value']):
      x = make_error("Integer overflow!")

  while count_cells(a) > 0:
    y = pop_value(a, 0)

    if op in ('/', '%') and y['value'] == 0:
      delete_value(x)
      delete_value(y)
      x = make_error("Division by zero!")
      break

    if op == '^' and y['value'] < 0:
      delete_value(x)
      delete_value(y)
      x = make_error("Negative exponent!")
      break

    try:
      result = ARITHMETIC_OPS[op](x['value'], y['value'])
    except OverflowError:
      result = None
    delete_value(y)

    if result is None or not in_number_range(result):
      delete_value(x)
      x = make_error("Integer overflow!")
      break
    x['value'] = result

  delete_value(a)
  return x


def crispy_add(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '+')


def crispy_sub(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '-')


def crispy_mul(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '*')


def crispy_div(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '/')


def crispy_mod(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '%')


def crispy_pow(env: Dict, a: Dict) -> Dict:
  return builtin_op(env, a, '^')
