"""
Crispy Environment
Single flat table binding symbol names to values
Values are copied in on put and copied out on get
"""

from typing import Callable, Dict, List

from values import (
  SYMBOL,
  make_error,
  make_function,
  make_symbol,
  copy_value,
  delete_value
)


def make_env(debug: bool = False) -> Dict:
  """Create an empty environment"""
  return {
      'bindings': {},
      'debug': debug
  }


def env_get(env: Dict, k: Dict) -> Dict:
  """Return a copy of the value bound to symbol k, or an unbound symbol error"""
  name = k['value']
  if name in env['bindings']:
    return copy_value(env['bindings'][name])
  return make_error(f"unbound symbol '{name}'")


def env_put(env: Dict, k: Dict, v: Dict) -> None:
  """Bind symbol k to a copy of v, replacing any previous binding in place"""
  if k['type'] != SYMBOL:
    raise TypeError(f"environment keys must be Symbols, got {k['type']}")
  name = k['value']
  old = env['bindings'].get(name)
  if old is not None:
    delete_value(old)
  env['bindings'][name] = copy_value(v)


def env_add_builtin(env: Dict, name: str, func: Callable[[Dict, Dict], Dict]) -> None:
  key = make_symbol(name)
  value = make_function(func)
  env_put(env, key, value)
  delete_value(key)
  delete_value(value)


def env_names(env: Dict) -> List[str]:
  """Bound names in binding order"""
  return list(env['bindings'])


def env_delete(env: Dict) -> None:
  for value in env['bindings'].values():
    delete_value(value)
  env['bindings'].clear()
