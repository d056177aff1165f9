"""
Crispy Values
Runtime representation of every expression and result
Plain dictionaries tagged with a 'type' name, owned by exactly one holder at a time
"""

from typing import Any, Callable, Dict, List, Optional


# ============================================================================
# TYPE TAGS
# ============================================================================

NUMBER = "Number"
ERROR = "Error"
SYMBOL = "Symbol"
SEXPR = "S-Expression"
QEXPR = "Q-Expression"
FUNCTION = "Function"

LIST_TYPES = (SEXPR, QEXPR)

# Numbers are signed 64-bit integers
NUMBER_MIN = -2 ** 63
NUMBER_MAX = 2 ** 63 - 1


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def make_value(value: Any, type_name: str) -> Dict:
  """Create a freshly owned runtime value"""
  return {
      'type': type_name,
      'value': value
  }


def make_number(x: int) -> Dict:
  return make_value(x, NUMBER)


def make_error(message: str) -> Dict:
  return make_value(message, ERROR)


def make_symbol(name: str) -> Dict:
  return make_value(name, SYMBOL)


def make_sexpr(cells: Optional[List[Dict]] = None) -> Dict:
  """Create an S-Expression, taking ownership of cells"""
  return make_value(cells if cells is not None else [], SEXPR)


def make_qexpr(cells: Optional[List[Dict]] = None) -> Dict:
  """Create a Q-Expression, taking ownership of cells"""
  return make_value(cells if cells is not None else [], QEXPR)


def make_function(builtin: Callable[[Dict, Dict], Dict]) -> Dict:
  """Wrap a native builtin taking (env, args) and returning a value"""
  return make_value(builtin, FUNCTION)


def is_list_value(v: Dict) -> bool:
  return v['type'] in LIST_TYPES


def in_number_range(x: int) -> bool:
  return NUMBER_MIN <= x <= NUMBER_MAX


# ============================================================================
# DESTRUCTION AND COPY
# ============================================================================

def delete_value(v: Dict) -> None:
  """
  Destroy a value

  Lists destroy every child first and are left empty. Leaves own only
  their scalar payload, which needs no further release.
  """
  if is_list_value(v):
    for cell in v['value']:
      delete_value(cell)
    v['value'].clear()


def copy_value(v: Dict) -> Dict:
  """Deep copy: lists copy each child, leaves duplicate their payload"""
  if is_list_value(v):
    return make_value([copy_value(cell) for cell in v['value']], v['type'])
  return make_value(v['value'], v['type'])


# ============================================================================
# LIST PRIMITIVES
# ============================================================================

def _require_list(v: Dict, operation: str) -> List[Dict]:
  if not is_list_value(v):
    raise TypeError(f"{operation} requires an S-Expression or Q-Expression, got {v['type']}")
  return v['value']


def count_cells(v: Dict) -> int:
  return len(_require_list(v, "count"))


def add_value(lst: Dict, x: Dict) -> Dict:
  """Append x as the last child of lst; ownership of x moves into lst"""
  _require_list(lst, "add").append(x)
  return lst


def pop_value(lst: Dict, index: int) -> Dict:
  """Remove and return the child at index; the caller owns the result"""
  cells = _require_list(lst, "pop")
  if not 0 <= index < len(cells):
    raise IndexError(f"pop index {index} out of range for {len(cells)} cells")
  return cells.pop(index)


def take_value(lst: Dict, index: int) -> Dict:
  """Pop the child at index and destroy what is left of lst"""
  x = pop_value(lst, index)
  delete_value(lst)
  return x


def join_values(x: Dict, y: Dict) -> Dict:
  """Move every child of y onto the end of x, then destroy y"""
  while count_cells(y):
    add_value(x, pop_value(y, 0))
  delete_value(y)
  return x


# ============================================================================
# PRINTING
# ============================================================================

def _show_expr(v: Dict, open_char: str, close_char: str) -> str:
  return open_char + " ".join(show_value(cell) for cell in v['value']) + close_char


def show_value(v: Dict) -> str:
  """Printed form of a value, without a trailing newline"""
  type_name = v['type']
  if type_name == NUMBER:
    return str(v['value'])
  elif type_name == ERROR:
    return f"Error: {v['value']}"
  elif type_name == SYMBOL:
    return v['value']
  elif type_name == SEXPR:
    return _show_expr(v, "(", ")")
  elif type_name == QEXPR:
    return _show_expr(v, "{", "}")
  elif type_name == FUNCTION:
    return "<function>"
  return f"<{type_name}>"


def print_value(v: Dict) -> None:
  print(show_value(v), end='')


def println_value(v: Dict) -> None:
  print_value(v)
  print()
