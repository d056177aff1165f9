"""
Crispy Interpreter
Evaluator, builtin catalog and interpreter sessions

Evaluation consumes its input: every function here takes ownership of the
value it is given and returns a freshly owned result.
"""

from typing import Callable, Dict, List, Tuple

from values import (
  ERROR,
  SYMBOL,
  SEXPR,
  QEXPR,
  FUNCTION,
  make_error,
  delete_value,
  count_cells,
  pop_value,
  take_value,
  show_value
)
from environment import (
  make_env,
  env_get,
  env_add_builtin,
  env_names,
  env_delete
)
from utilities import check_arity, check_type
from parsing import CSTNode, create_parser
from reader import read_value

# Import stdlib functions
from stdlib import (
    crispy_list,
    crispy_head,
    crispy_tail,
    crispy_join,
    crispy_len,
    crispy_def,
    crispy_add,
    crispy_sub,
    crispy_mul,
    crispy_div,
    crispy_mod,
    crispy_pow,
)


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_value(env: Dict, v: Dict) -> Dict:
  """
  Reduce a value to normal form.
  Symbols are looked up, S-Expressions are applied, everything else
  (numbers, errors, Q-Expressions, functions) is returned unchanged.
  """
  if env['debug']:
    print(f"Evaluating: {show_value(v)}")

  if v['type'] == SYMBOL:
    x = env_get(env, v)
    delete_value(v)
    return x

  if v['type'] == SEXPR:
    return eval_sexpr(env, v)

  return v


def eval_sexpr(env: Dict, v: Dict) -> Dict:
  """Evaluate children left to right, then apply the leading function"""
  cells = v['value']

  for i in range(len(cells)):
    cells[i] = eval_value(env, cells[i])
    # first error wins; later siblings are never evaluated
    if cells[i]['type'] == ERROR:
      return take_value(v, i)

  if count_cells(v) == 0:
    return v

  if count_cells(v) == 1:
    return take_value(v, 0)

  f = pop_value(v, 0)
  if f['type'] != FUNCTION:
    delete_value(f)
    delete_value(v)
    return make_error("S-expression does not start with a function!")

  result = f['value'](env, v)
  delete_value(f)
  return result


# Note: eval lives here rather than in stdlib.py because it re-enters the evaluator

def crispy_eval(env: Dict, a: Dict) -> Dict:
  """Reinterpret a Q-Expression as an S-Expression and evaluate it"""
  error = check_arity("eval", a, 1) or check_type("eval", a, 0, QEXPR)
  if error:
    return error

  x = take_value(a, 0)
  x['type'] = SEXPR
  return eval_value(env, x)


# ============================================================================
# BUILTIN CATALOG
# ============================================================================

BUILTINS: List[Tuple[str, Callable[[Dict, Dict], Dict]]] = [
    # List functions
    ('list', crispy_list),
    ('head', crispy_head),
    ('tail', crispy_tail),
    ('eval', crispy_eval),
    ('join', crispy_join),
    ('len', crispy_len),
    ('def', crispy_def),
    # Math functions
    ('+', crispy_add),
    ('-', crispy_sub),
    ('*', crispy_mul),
    ('/', crispy_div),
    ('%', crispy_mod),
    ('^', crispy_pow),
]

BUILTIN_NAMES = [name for name, _ in BUILTINS]


def add_builtins(env: Dict) -> Dict:
  for name, func in BUILTINS:
    env_add_builtin(env, name, func)
  return env


def create_builtin_env(debug: bool = False) -> Dict:
  """Create the global environment with every builtin registered"""
  return add_builtins(make_env(debug))


# ============================================================================
# INTERPRETER SESSION
# ============================================================================

class CrispyInterpreter:
  """One evaluation session: a parser and the environment it mutates"""

  def __init__(self, debug: bool = False):
    self.debug = debug
    self.parser = create_parser(debug)
    self.env = create_builtin_env(debug)

  def eval_cst(self, node: CSTNode) -> Dict:
    """Read and evaluate one parsed input"""
    return eval_value(self.env, read_value(node))

  def eval_string(self, text: str, filename: str = "<input>") -> Dict:
    """Parse, read and evaluate one input; parse failures raise CrispyParseError"""
    return self.eval_cst(self.parser.parse_string(text, filename))

  def run_lines(self, text: str, filename: str = "<input>") -> List[str]:
    """Evaluate every non-blank line in order and return the printed results"""
    outputs = []
    for node in self.parser.parse_lines(text, filename):
      result = self.eval_cst(node)
      outputs.append(show_value(result))
      delete_value(result)
    return outputs

  def user_bindings(self) -> Dict[str, str]:
    """Printed form of every binding other than the untouched builtins"""
    bindings = self.env['bindings']
    return {
        name: show_value(bindings[name])
        for name in env_names(self.env)
        if name not in BUILTIN_NAMES or bindings[name]['type'] != FUNCTION
    }

  def close(self) -> None:
    env_delete(self.env)


# Factory functions for creating interpreters
def create_interpreter(debug: bool = False) -> CrispyInterpreter:
  """Create a Crispy interpreter"""
  return CrispyInterpreter(debug=debug)


def create_debug_interpreter() -> CrispyInterpreter:
  """Create a Crispy interpreter with debug enabled"""
  return CrispyInterpreter(debug=True)
