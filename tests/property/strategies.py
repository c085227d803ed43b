"""Hypothesis strategies for property-based testing.

This module defines strategies that generate small, syntactically valid
Swift sources and expressions for the splurge-xctest-to-swift-testing
components. Names always start with ``my`` so they never collide with
Swift keywords or XCTest identifiers.
"""

from hypothesis import strategies as st

# Basic building blocks
identifiers = st.from_regex(r"[a-z][a-zA-Z0-9]{0,6}", fullmatch=True).map(lambda s: "my" + s)
type_names = st.from_regex(r"[A-Z][a-zA-Z0-9]{0,6}", fullmatch=True).map(lambda s: "My" + s)
integers = st.integers(min_value=0, max_value=9999).map(str)
string_literals = st.text(alphabet="abcdefg XYZ019_.,", max_size=10).map(lambda s: f'"{s}"')
indentation = st.sampled_from(["", "    ", "        ", "\t", "  "])
trailing_space = st.sampled_from(["", " ", "  ", "\t"])
line_comments = st.text(alphabet="abc XYZ 0123.,!", max_size=15).map(lambda s: f"// {s}")
block_comments = st.text(alphabet="abc XYZ 0123.,!", max_size=15).map(lambda s: f"/* {s} */")
newlines = st.sampled_from(["\n", "\r\n"])

COMPARISON_OPERATORS = ["==", "!=", "<", ">", "<=", ">=", "&&", "||"]
ARITHMETIC_OPERATORS = ["+", "-", "*", "/", "%"]


@st.composite
def postfix_expressions(draw) -> str:
    """Identifiers, member chains, calls, subscripts and optional chains."""
    base = draw(identifiers)
    for _ in range(draw(st.integers(min_value=0, max_value=3))):
        form = draw(st.sampled_from(["member", "call", "subscript", "optional"]))
        if form == "member":
            base = f"{base}.{draw(identifiers)}"
        elif form == "call":
            args = draw(st.lists(st.one_of(identifiers, integers, string_literals), max_size=3))
            base = f"{base}({', '.join(args)})"
        elif form == "subscript":
            base = f"{base}[{draw(integers)}]"
        else:
            base = f"{base}?.{draw(identifiers)}"
    return base


@st.composite
def operator_spacing(draw) -> tuple[str, str]:
    """Balanced spacing around a binary operator."""
    space = draw(st.sampled_from(["", " ", "  "]))
    return space, space


@st.composite
def infix_expressions(draw, operators: list[str] | None = None) -> str:
    """``lhs <op> rhs`` with balanced but arbitrary spacing."""
    operator = draw(st.sampled_from(operators or COMPARISON_OPERATORS + ARITHMETIC_OPERATORS))
    before, after = draw(operator_spacing())
    lhs = draw(st.one_of(postfix_expressions(), integers))
    rhs = draw(st.one_of(postfix_expressions(), integers, string_literals))
    return f"{lhs}{before}{operator}{after}{rhs}"


expressions = st.one_of(postfix_expressions(), infix_expressions(), integers, string_literals)


@st.composite
def statements(draw) -> str:
    """One statement line without indentation or line break."""
    form = draw(st.sampled_from(["let", "var", "assign", "call", "comment", "if"]))
    if form == "let":
        text = f"let {draw(identifiers)} = {draw(expressions)}"
    elif form == "var":
        text = f"var {draw(identifiers)}: {draw(type_names)} = {draw(expressions)}"
    elif form == "assign":
        text = f"{draw(identifiers)} = {draw(expressions)}"
    elif form == "call":
        text = draw(postfix_expressions()) + "()"
    elif form == "comment":
        return draw(line_comments)
    else:
        condition = draw(infix_expressions(COMPARISON_OPERATORS))
        text = f"if {condition} {{ {draw(identifiers)}() }}"
    suffix = draw(st.one_of(st.just(""), line_comments.map(lambda c: " " + c), block_comments.map(lambda c: " " + c)))
    return text + suffix


@st.composite
def function_declarations(draw, name: str | None = None) -> str:
    newline = "\n"
    body = draw(st.lists(statements(), max_size=4))
    inner = "".join(f"{newline}        {line}{draw(trailing_space)}" for line in body)
    fn_name = name or draw(identifiers)
    return f"    func {fn_name}() {{{inner}\n    }}"


@st.composite
def swift_sources(draw) -> str:
    """A small Swift file: imports, top-level statements and a type."""
    newline = draw(newlines)
    parts: list[str] = []
    for _ in range(draw(st.integers(min_value=0, max_value=3))):
        parts.append(f"import {draw(type_names)}")
    if parts and draw(st.booleans()):
        parts.append("")
    for _ in range(draw(st.integers(min_value=0, max_value=3))):
        parts.append(draw(indentation) + draw(statements()) + draw(trailing_space))
    if draw(st.booleans()):
        members = draw(st.lists(function_declarations(), max_size=3))
        keyword = draw(st.sampled_from(["class", "struct", "final class", "enum"]))
        inheritance = draw(st.one_of(st.just(""), type_names.map(lambda t: f": {t}")))
        parts.append(f"{keyword} {draw(type_names)}{inheritance} {{")
        parts.extend(member.replace("\n", newline) for member in members)
        parts.append("}")
    text = newline.join(parts)
    if draw(st.booleans()):
        text += newline
    return text


@st.composite
def xctest_assertions(draw) -> str:
    """An XCTest assertion call over generated operands."""
    name = draw(st.sampled_from(["XCTAssertEqual", "XCTAssertTrue", "XCTAssertFalse", "XCTAssertNil", "XCTAssertNotNil"]))
    if name == "XCTAssertEqual":
        args = [draw(st.one_of(postfix_expressions(), integers, string_literals)) for _ in range(2)]
    elif name in ("XCTAssertTrue", "XCTAssertFalse"):
        args = [draw(st.one_of(postfix_expressions(), infix_expressions(COMPARISON_OPERATORS)))]
    else:
        args = [draw(postfix_expressions())]
    if draw(st.booleans()):
        args.append(draw(string_literals))
    return f"{name}({', '.join(args)})"


@st.composite
def xctest_test_methods(draw) -> str:
    suffix = draw(st.from_regex(r"[A-Z][a-zA-Z0-9]{0,8}", fullmatch=True))
    body = draw(st.lists(st.one_of(xctest_assertions(), statements()), min_size=1, max_size=4))
    inner = "".join(f"\n        {line}" for line in body)
    return f"    func test{suffix}() {{{inner}\n    }}"


@st.composite
def xctest_sources(draw) -> str:
    """A file with one ``XCTestCase`` subclass."""
    parts = ["import XCTest"]
    if draw(st.booleans()):
        parts.append(f"import {draw(type_names)}")
    parts.append("")
    final = "final " if draw(st.booleans()) else ""
    parts.append(f"{final}class {draw(type_names)}Tests: XCTestCase {{")
    members: list[str] = []
    if draw(st.booleans()):
        members.append(f"    var {draw(identifiers)} = {draw(integers)}")
    if draw(st.booleans()):
        members.append("    override func setUp() {\n        super.setUp()\n    }")
    if draw(st.booleans()):
        members.append("    override func tearDown() {\n        super.tearDown()\n    }")
    members.extend(draw(st.lists(xctest_test_methods(), min_size=1, max_size=3)))
    if draw(st.booleans()):
        members.append(draw(function_declarations()))
    parts.append("\n\n".join(members))
    parts.append("}")
    return "\n".join(parts) + "\n"
