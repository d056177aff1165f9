"""
Crispy Programming Language Parser
Builds the tagged syntax tree the reader consumes, with source spans
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from pyparsing import (
    Forward, Literal, OneOrMore, ParseException, ParserElement, Regex,
    StringEnd, StringStart, ZeroOrMore, col, lineno
)

from error_handling import CrispyErrorHandler, CrispyParseError, max_nesting_depth

# Enable packrat parsing for performance
ParserElement.enable_packrat()


# Tags of the syntax tree, in the shape the reader inspects
ROOT_TAG = ">"
NUMBER_TAG = "expr|number|regex"
SYMBOL_TAG = "expr|symbol|regex"
SEXPR_TAG = "expr|sexpr|>"
QEXPR_TAG = "expr|qexpr|>"
CHAR_TAG = "char"
REGEX_TAG = "regex"

NUMBER_PATTERN = r'-?[0-9]+'
SYMBOL_PATTERN = r'[a-zA-Z0-9_+\-*/\\=<>!&%^]+'


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for a syntax node"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class CSTNode:
    """Syntax tree node: a grammar tag, the raw contents for leaves, and children"""
    type: str
    value: Any
    children: List['CSTNode'] = field(default_factory=list)
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.children:
            children_str = ", ".join(str(child) for child in self.children)
            return f"{self.type}({self.value!r}, [{children_str}])"
        return f"{self.type}({self.value!r})"


class CrispyGrammar:
    """Crispy grammar definition using pyparsing

        number : /-?[0-9]+/ ;
        symbol : /[a-zA-Z0-9_+\\-*\\/\\\\=<>!&%^]+/ ;
        sexpr  : '(' <expr>* ')' ;
        qexpr  : '{' <expr>* '}' ;
        expr   : <number> | <symbol> | <sexpr> | <qexpr> ;
        lispy  : /^/ <expr>+ /$/ ;
    """

    def __init__(self, filename: str = "<input>", debug: bool = False):
        self.filename = filename
        self.debug = debug
        self._setup_grammar()

    def _span(self, s: str, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            self.filename,
            lineno(start, s), col(start, s),
            lineno(end, s), col(end, s),
            s[start:end]
        )

    def _leaf(self, tag: str):
        def make_leaf(s, loc, toks):
            text = toks[0]
            return CSTNode(tag, text, [], self._span(s, loc, loc + len(text)))
        return make_leaf

    def _compound(self, tag: str):
        def make_compound(s, loc, toks):
            children = list(toks)
            # children are bracketed by their punctuation nodes
            first, last = children[0].span, children[-1].span
            span = SourceSpan(self.filename, first.start_line, first.start_col,
                              last.end_line, last.end_col)
            return CSTNode(tag, "", children, span)
        return make_compound

    def _punctuation(self, char: str) -> ParserElement:
        return Literal(char).set_parse_action(self._leaf(CHAR_TAG))

    def _root(self, s, loc, toks):
        children = [CSTNode(REGEX_TAG, "")] + list(toks) + [CSTNode(REGEX_TAG, "")]
        return CSTNode(ROOT_TAG, "", children, self._span(s, 0, len(s)))

    def _setup_grammar(self):
        """Setup the grammar; each rule builds CSTNodes through parse actions"""
        expr = Forward()

        number = Regex(NUMBER_PATTERN).set_parse_action(self._leaf(NUMBER_TAG))
        symbol = Regex(SYMBOL_PATTERN).set_parse_action(self._leaf(SYMBOL_TAG))

        sexpr = (
            self._punctuation("(") + ZeroOrMore(expr) + self._punctuation(")")
        ).set_parse_action(self._compound(SEXPR_TAG))

        qexpr = (
            self._punctuation("{") + ZeroOrMore(expr) + self._punctuation("}")
        ).set_parse_action(self._compound(QEXPR_TAG))

        # Order matters: "-5" is a number, "-" alone falls through to symbol
        expr <<= number | symbol | sexpr | qexpr

        lispy = (
            StringStart() + OneOrMore(expr) + StringEnd()
        ).set_parse_action(self._root)

        self.number = number
        self.symbol = symbol
        self.sexpr = sexpr
        self.qexpr = qexpr
        self.expr = expr
        self.lispy = lispy

        if self.debug:
            for element in (number, symbol, sexpr, qexpr, lispy):
                element.set_debug()

    def parse_program(self, text: str) -> CSTNode:
        """Parse one complete input into its root node"""
        try:
            result = self.lispy.parse_string(text, parse_all=True)
        except ParseException as e:
            raise CrispyErrorHandler(text, self.filename).enhance_parse_exception(e) from e
        except RecursionError as e:
            raise CrispyParseError(
                "Expression nested too deeply",
                line=1,
                column=1,
                got=f"{max_nesting_depth(text)} levels of brackets",
                suggestions=["Flatten the expression or split it across several definitions"],
                filename=self.filename,
            ) from e
        return result[0]


class CrispyParser:
    """Main Crispy parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def parse_string(self, text: str, filename: str = "<input>") -> CSTNode:
        """Parse Crispy source code from string"""
        return CrispyGrammar(filename, self.debug).parse_program(text)

    def parse_lines(self, text: str, filename: str = "<input>") -> List[CSTNode]:
        """Parse every non-blank line as its own input"""
        grammar = CrispyGrammar(filename, self.debug)
        return [grammar.parse_program(line) for line in text.split('\n') if line.strip()]

    def parse_file(self, filepath: str) -> List[CSTNode]:
        """Parse a Crispy source file, one input per non-blank line"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise CrispyParseError(f"Cannot decode file {filepath}: {e}", filename=filepath) from e
        return self.parse_lines(content, filepath)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> CrispyParser:
    """Create a Crispy parser"""
    return CrispyParser(debug=debug)


def create_debug_parser() -> CrispyParser:
    """Create a Crispy parser with debug enabled"""
    return CrispyParser(debug=True)


# Utility functions for working with the syntax tree
def find_nodes_by_type(cst: CSTNode, node_type: str) -> List[CSTNode]:
    """Find all nodes whose tag contains node_type"""
    result = []

    def search(node: CSTNode):
        if node_type in node.type:
            result.append(node)
        for child in node.children:
            search(child)

    search(cst)
    return result


def pretty_print_cst(cst: CSTNode, indent: int = 0) -> str:
    """Pretty print a syntax tree for debugging"""
    result = "  " * indent + f"{cst.type}"
    if cst.value:
        result += f" {cst.value!r}"
    result += "\n"

    for child in cst.children:
        result += pretty_print_cst(child, indent + 1)

    return result


def cst_to_dict(cst: CSTNode) -> Dict[str, Any]:
    """Convert a syntax tree to dictionary representation"""
    return {
        "type": cst.type,
        "value": cst.value,
        "span": {
            "filename": cst.span.filename,
            "start_line": cst.span.start_line,
            "start_col": cst.span.start_col,
            "end_line": cst.span.end_line,
            "end_col": cst.span.end_col,
        } if cst.span else None,
        "children": [cst_to_dict(child) for child in cst.children]
    }
