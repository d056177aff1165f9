"""
Enhanced error handling for the Crispy parser with detailed error messages
Pure functional style - the classes only wrap the functions below
"""

from typing import List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# DATA STRUCTURES (Plain Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None,
    filename: str = "<input>"
) -> Dict:
    """Create a parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or [],
        'filename': filename
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error in {error['filename']} at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg.rstrip('\n')


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error, with a caret under the error column"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseException) -> List[str]:
    """Extract expected tokens from exception"""
    msg = str(exc)
    # pyparsing messages look like "Expected <pattern>, found <text>  (at char ...)"
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(at|$)", msg)
    if expected_match:
        return [expected_match.group(1).strip()]
    return ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of input"
    return "unknown"


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the source and the error location"""
    suggestions = []

    opened, closed = source_text.count("("), source_text.count(")")
    if opened != closed:
        suggestions.append(f"Unbalanced parentheses: {opened} '(' against {closed} ')'")

    opened, closed = source_text.count("{"), source_text.count("}")
    if opened != closed:
        suggestions.append(f"Unbalanced braces: {opened} '{{' against {closed} '}}'")

    if "[" in got or "]" in got:
        suggestions.append("Use braces {} for quoted lists, square brackets are not part of the syntax")

    if '"' in got or "'" in got:
        suggestions.append("Strings are not supported, only numbers, symbols and lists")

    if not source_text.strip():
        suggestions.append("Enter at least one expression")

    return suggestions


def max_nesting_depth(source_text: str) -> int:
    """Deepest level of open parentheses and braces anywhere in the source"""
    depth = deepest = 0
    for char in source_text:
        if char in "({":
            depth += 1
            deepest = max(deepest, depth)
        elif char in ")}":
            depth = max(depth - 1, 0)
    return deepest


def enhance_parse_exception_dict(exc: ParseException, source_text: str, filename: str = "<input>") -> Dict:
    """Convert pyparsing exception to an enhanced Crispy error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got)

    return make_parse_error(
        message=str(exc),
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions,
        filename=filename
    )


# ============================================================================
# EXCEPTION AND HANDLER CLASSES
# ============================================================================

class CrispyParseError(Exception):
    """Raised when source text does not match the Crispy grammar"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions,
            self.filename
        )
        return format_parse_error(error_dict)


def parse_error_from_dict(error_dict: Dict) -> CrispyParseError:
    return CrispyParseError(**error_dict)


class CrispyErrorHandler:
    """Holds the source text so parse exceptions can be enriched later"""
    def __init__(self, source_text: str, filename: str = "<input>"):
        self.source_text = source_text
        self.filename = filename

    def enhance_parse_exception(self, exc: ParseException) -> CrispyParseError:
        """Convert pyparsing exception to an enhanced Crispy error"""
        error_dict = enhance_parse_exception_dict(exc, self.source_text, self.filename)
        return parse_error_from_dict(error_dict)
