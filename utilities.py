"""
Utilities module for the Crispy builtins
Argument checks shared by every builtin

Every check follows the same contract: on success it returns None, on
failure it destroys the argument list it was given and returns an Error
value for the builtin to hand straight back to the evaluator.
"""

from typing import Dict, Optional

from values import (
  QEXPR,
  make_error,
  delete_value,
  count_cells,
  is_list_value
)


# ==================== FAILURE ====================

def fail(args: Dict, message: str) -> Dict:
  """
  Consume an argument list and produce an Error value

  Args:
    args: Argument list owned by the caller
    message: Error message

  Returns:
    Freshly built Error value
  """
  delete_value(args)
  return make_error(message)


# ==================== ARGUMENT CHECKS ====================

def check_arity(func_name: str, args: Dict, expected: int) -> Optional[Dict]:
  """
  Require exactly `expected` arguments

  Examples:
    check_arity("head", (sexpr of 2 cells), 1)
      -> Error("Function 'head' passed incorrect number of arguments! Got 2, expected 1")
  """
  got = count_cells(args)
  if got != expected:
    return fail(
      args,
      f"Function '{func_name}' passed incorrect number of arguments! Got {got}, expected {expected}"
    )
  return None


def check_has_args(func_name: str, args: Dict) -> Optional[Dict]:
  """Require at least one argument"""
  if count_cells(args) == 0:
    return fail(args, f"Function '{func_name}' passed no arguments!")
  return None


def check_type(func_name: str, args: Dict, index: int, expected: str) -> Optional[Dict]:
  """
  Require the argument at `index` to carry the `expected` type tag

  Args:
    func_name: Builtin name for error messages
    args: Argument list
    index: Position of the argument to check
    expected: Expected type tag

  Returns:
    None, or an Error value naming both the received and expected type
  """
  actual = args['value'][index]['type']
  if actual != expected:
    return fail(
      args,
      f"Function '{func_name}' passed incorrect type for argument {index}! Got {actual}, expected {expected}"
    )
  return None


def check_all_types(func_name: str, args: Dict, expected: str) -> Optional[Dict]:
  """Require every argument to carry the `expected` type tag"""
  for index in range(count_cells(args)):
    error = check_type(func_name, args, index, expected)
    if error:
      return error
  return None


def check_list(func_name: str, args: Dict, index: int) -> Optional[Dict]:
  """Require the argument at `index` to be a list of either kind; leaves are reported against Q-Expression"""
  if is_list_value(args['value'][index]):
    return None
  return check_type(func_name, args, index, QEXPR)


def check_not_empty(func_name: str, args: Dict, index: int) -> Optional[Dict]:
  """Require the list argument at `index` to have at least one element"""
  if count_cells(args['value'][index]) == 0:
    return fail(args, f"Function '{func_name}' passed '{{}}'!")
  return None
