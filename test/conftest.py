"""
Test configuration for Crispy tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import create_parser
from reader import read_value
from interpreter import create_builtin_env, create_interpreter, eval_value
from values import show_value


@pytest.fixture
def parser():
  return create_parser()


@pytest.fixture
def env():
  """Fresh global environment with every builtin registered"""
  return create_builtin_env()


@pytest.fixture
def read(parser):
  """Parse and read one input into a value"""
  def read_text(text):
    return read_value(parser.parse_string(text))
  return read_text


@pytest.fixture
def run(env, read):
  """Evaluate one input in the shared environment and return its printed form"""
  def run_text(text):
    return show_value(eval_value(env, read(text)))
  return run_text


@pytest.fixture
def interpreter():
  interp = create_interpreter()
  yield interp
  interp.close()
