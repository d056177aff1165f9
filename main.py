"""
Crispy Programming Language - Main Entry Point
A small Lisp with S-Expressions, Q-Expressions and a flat global environment
"""

import sys
import argparse
from pathlib import Path
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser, CrispyParseError, pretty_print_cst
from interpreter import create_interpreter, create_debug_interpreter, BUILTIN_NAMES
from values import println_value, delete_value


VERSION = "0.0.5"
PROMPT = "crispy> "
DEFAULT_HISTORY_FILE = "~/.crispy_history"

# Each level of brackets costs the parser about a dozen Python frames
RECURSION_LIMIT = 10000


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Crispy - a small Lisp with S-Expressions and Q-Expressions',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.crispy          # Run a script, one expression per line
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse script.crispy  # Parse and show the syntax trees
  %(prog)s --debug script.crispy  # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Crispy script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show syntax trees (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'Crispy v{VERSION}'
  )

  return parser


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Crispy script file and show its syntax trees"""
  try:
    parser = create_debug_parser() if debug else create_parser()

    print(f"Parsing {script_path}...")
    cst_nodes = parser.parse_file(script_path)

    print(f"\nParsed {len(cst_nodes)} inputs:")
    print("=" * 50)

    for i, node in enumerate(cst_nodes, 1):
      print(f"\nInput {i}:")
      print(pretty_print_cst(node), end='')

  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    sys.exit(1)
  except CrispyParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Crispy script, printing the result of every line"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      content = f.read()
    for output in interpreter.run_lines(content, script_path):
      print(output)

  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)
  except CrispyParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)
  except RecursionError:
    print(f"Error: Expression in '{script_path}' nested too deeply to evaluate")
    sys.exit(1)
  finally:
    interpreter.close()


def history_file_path() -> str:
  return os.path.expanduser(os.environ.get("CRISPY_HISTORY", DEFAULT_HISTORY_FILE))


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = history_file_path()
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = BUILTIN_NAMES + [":parse", ":env", ":help", "exit"]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit

  def save_history():
    try:
      readline.write_history_file(history_file)
    except OSError:
      pass

  atexit.register(save_history)


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show the syntax tree")
  print("  :env              - Show user bindings")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  + 1 2                     - Top level S-Expression")
  print("  (* 2 (+ 1 1))             - Nested S-Expressions")
  print("  {1 2 3}                   - Q-Expression, never evaluated")
  print("  eval {head (list + 1 2)}  - Evaluate a Q-Expression")
  print("  def {x y} 1 2             - Bind symbols in the global environment")


def handle_line(interpreter, code: str) -> None:
  """Evaluate one REPL line and print its result"""
  stripped = code.strip()

  if stripped.startswith(":parse "):
    print(pretty_print_cst(interpreter.parser.parse_string(stripped[7:])), end='')
    return

  if stripped == ":env":
    bindings = interpreter.user_bindings()
    if not bindings:
      print("  (no user-defined bindings)")
    for name, val_str in bindings.items():
      if len(val_str) > 60:
        val_str = val_str[:57] + "..."
      print(f"  {name} = {val_str}")
    return

  if stripped == ":help":
    show_help()
    return

  result = interpreter.eval_string(code)
  println_value(result)
  delete_value(result)


def run_interactive_mode(debug: bool = False) -> None:
  """Run Crispy in interactive mode"""
  print(f"Crispy Version {VERSION}")
  print("Press Ctrl+c to Exit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  while True:
    try:
      code = input(PROMPT)

      if code.strip() == "exit":
        break

      if not code.strip():
        continue

      handle_line(interpreter, code)

    except CrispyParseError as e:
      print(e)
    except RecursionError:
      print("Error: Expression nested too deeply to evaluate")
    except KeyboardInterrupt:
      print("\nGoodbye!")
      break
    except EOFError:
      print("\nGoodbye!")
      break
    except Exception as e:
      print(f"Unexpected error: {e}")
      if debug:
        import traceback
        traceback.print_exc()

  interpreter.close()


def main() -> None:
  """Main entry point for Crispy"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()
  sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)

  else:
    # No script: interactive mode, with or without -i
    run_interactive_mode(debug=args.debug)


if __name__ == "__main__":
  main()
