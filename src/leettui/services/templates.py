"""Solution file templates, one strategy per supported language."""

import re
from collections.abc import Callable
from dataclasses import dataclass

from leettui.domain.models import Example, Language, Problem
from leettui.infrastructure.parsers import URLParser

BEGIN_MARKER = "@leettui-begin"
END_MARKER = "@leettui-end"

STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
ASSIGNMENT = re.compile(r"^([A-Za-z_]\w*)\s*=\s*(.+)$", re.DOTALL)


@dataclass(frozen=True)
class LanguageTemplate:
    """How to lay out and render a solution file for one language."""

    language: Language
    name: str
    source_path: str
    comment: str
    render: Callable[[Problem], str]
    metadata: Callable[[Problem], dict[str, str]] = lambda problem: {}

    def extract_solution(self, source: str) -> str:
        """Return the code between the solution markers, or the whole file."""
        lines = source.splitlines()
        begin = end = None
        for index, line in enumerate(lines):
            if BEGIN_MARKER in line and begin is None:
                begin = index
            elif END_MARKER in line and begin is not None:
                end = index
                break

        if begin is None or end is None:
            return source.strip()
        return "\n".join(lines[begin + 1 : end]).strip()


def split_top_level(text: str, brackets: str = "([{") -> list[str]:
    """Split on commas that are not nested in brackets or string literals."""
    closers = {"(": ")", "[": "]", "{": "}", "<": ">"}
    closing = {closers[b] for b in brackets}

    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    escaped = False

    for char in text:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in "\"'":
            quote = char
        elif char in brackets:
            depth += 1
        elif char in closing:
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail or parts:
        parts.append(tail)
    return parts


def parse_assignments(text: str) -> list[tuple[str, str]] | None:
    """Parse ``a = 1, b = [2,3]`` into pairs; None if the text has another shape."""
    pairs = []
    for part in split_top_level(text):
        match = ASSIGNMENT.match(part)
        if not match:
            return None
        pairs.append((match.group(1), match.group(2).strip()))
    return pairs or None


def expected_value(output: str) -> str:
    """The returned value of an example output such as ``2, nums = [2,2,_,_]``."""
    parts = split_top_level(output)
    first = parts[0] if parts else output.strip()
    match = ASSIGNMENT.match(first)
    return match.group(2).strip() if match else first


def _outside_strings(text: str, convert: Callable[[str], str]) -> str:
    """Apply ``convert`` to everything except double-quoted string literals."""
    result = []
    position = 0
    for match in STRING_LITERAL.finditer(text):
        result.append(convert(text[position : match.start()]))
        result.append(match.group(0))
        position = match.end()
    result.append(convert(text[position:]))
    return "".join(result)


def render_header(problem: Problem, comment: str) -> list[str]:
    lines = [
        f"{problem.id}. {problem.title}",
        f"Difficulty: {problem.difficulty.value}",
        URLParser.build_problem_url(problem.slug),
    ]
    if problem.description:
        lines.append("")
        lines.extend(problem.description.splitlines())
    return [f"{comment} {line}".rstrip() for line in lines]


def render_example_comments(example: Example, comment: str, indent: str) -> list[str]:
    lines = [
        f"{indent}{comment} Input: {example.input}",
        f"{indent}{comment} Output: {example.output}",
    ]
    if example.explanation:
        lines.append(f"{indent}{comment} Explanation: {example.explanation}")
    return lines


# Python


def python_literal(value: str) -> str:
    def convert(segment: str) -> str:
        segment = re.sub(r"\btrue\b", "True", segment)
        segment = re.sub(r"\bfalse\b", "False", segment)
        return re.sub(r"\bnull\b", "None", segment)

    return _outside_strings(value, convert)


def _python_stub(problem: Problem) -> str:
    snippet = problem.snippet_for(Language.PYTHON3.value)
    if not snippet:
        return "class Solution:\n    def solve(self):\n        pass"

    lines = snippet.code.rstrip().splitlines()
    # The judge's stubs end in a bare signature; give it a body so the file imports.
    if lines and lines[-1].rstrip().endswith(":"):
        indent = len(lines[-1]) - len(lines[-1].lstrip())
        lines.append(" " * (indent + 4) + "pass")
    return "\n".join(lines)


def _python_method(stub: str) -> str | None:
    for name in re.findall(r"def\s+(\w+)\s*\(\s*self", stub):
        if not name.startswith("__"):
            return name
    return None


def _python_test(index: int, example: Example, method: str | None) -> list[str]:
    lines = ["", "", f"def test_example_{index}():"]
    lines.extend(render_example_comments(example, "#", "    "))

    arguments = parse_assignments(example.input)
    if method and arguments:
        call_args = ", ".join(f"{name}={python_literal(value)}" for name, value in arguments)
        expected = python_literal(expected_value(example.output))
        lines.append(f"    assert Solution().{method}({call_args}) == {expected}")
    else:
        lines.append("    # TODO: translate this example into an assertion")
        lines.append("    pass")
    return lines


def render_python(problem: Problem) -> str:
    stub = _python_stub(problem)
    method = _python_method(stub)

    lines = render_header(problem, "#")
    lines += [
        "",
        "from __future__ import annotations",
        "",
        "from typing import List, Optional",
        "",
        f"# {BEGIN_MARKER}",
        stub,
        f"# {END_MARKER}",
    ]
    for index, example in enumerate(problem.examples, start=1):
        lines += _python_test(index, example, method)
    return "\n".join(lines) + "\n"


# Rust


def rust_literal(value: str, type_hint: str = "") -> str:
    def convert(segment: str) -> str:
        return segment.replace("[", "vec![")

    converted = _outside_strings(value, convert)
    if "char" in type_hint:
        return re.sub(r'"(\\?.)"', r"'\1'", converted)
    if "String" in type_hint:
        return STRING_LITERAL.sub(lambda m: f"{m.group(0)}.to_string()", converted)
    return converted


def _rust_signature(stub: str) -> tuple[str, list[str], str | None] | None:
    match = re.search(r"pub fn\s+(\w+)\s*\(([^)]*)\)\s*(?:->\s*([^{]+?))?\s*\{", stub)
    if not match:
        return None
    params = [p for p in split_top_level(match.group(2), "([{<") if p]
    types = [p.split(":", 1)[1].strip() if ":" in p else "" for p in params]
    return match.group(1), types, match.group(3)


def _rust_test(index: int, example: Example, signature) -> list[str]:
    lines = ["", "    #[test]", f"    fn example_{index}() {{"]
    lines.extend(render_example_comments(example, "//", "        "))

    arguments = parse_assignments(example.input)
    if signature and arguments and len(arguments) == len(signature[1]):
        method, types, returns = signature
        args = []
        for (_, value), type_hint in zip(arguments, types):
            literal = rust_literal(value, type_hint)
            args.append(f"&mut {literal}" if type_hint.startswith("&mut") else literal)
        call = f"Solution::{method}({', '.join(args)})"
        if returns:
            expected = rust_literal(expected_value(example.output), returns)
            lines.append(f"        assert_eq!({call}, {expected});")
        else:
            lines.append(f"        {call};")
    else:
        lines.append("        // TODO: translate this example into an assertion")
    lines.append("    }")
    return lines


def render_rust(problem: Problem) -> str:
    snippet = problem.snippet_for(Language.RUST.value)
    stub = snippet.code.rstrip() if snippet else "impl Solution {\n    pub fn solve() {}\n}"
    signature = _rust_signature(stub)

    lines = render_header(problem, "//")
    lines += [
        "",
        f"// {BEGIN_MARKER}",
        stub,
        f"// {END_MARKER}",
        "",
        "struct Solution;",
        "",
        "fn main() {",
        '    println!("Run the examples with: cargo test");',
        "}",
        "",
        "#[cfg(test)]",
        "mod tests {",
        "    use super::*;",
    ]
    for index, example in enumerate(problem.examples, start=1):
        lines += _rust_test(index, example, signature)
    lines.append("}")
    return "\n".join(lines) + "\n"


def rust_metadata(problem: Problem) -> dict[str, str]:
    # Cargo package names can't start with a digit.
    package = f"p{problem.id}-{problem.slug}"
    return {
        "Cargo.toml": (
            "[package]\n"
            f'name = "{package}"\n'
            'version = "0.1.0"\n'
            'edition = "2021"\n'
            "\n"
            "[dependencies]\n"
        )
    }


# C++


def cpp_literal(value: str) -> str:
    def convert(segment: str) -> str:
        segment = segment.replace("[", "{").replace("]", "}")
        return re.sub(r"\bnull\b", "nullptr", segment)

    return _outside_strings(value, convert)


def _cpp_signature(stub: str) -> tuple[str, list[str], str] | None:
    body = stub.split("public:", 1)[-1]
    match = re.search(r"([A-Za-z_][\w:<>,\s*&]*?)\s+(\w+)\s*\(([^)]*)\)\s*\{", body)
    if not match:
        return None
    types = []
    for param in split_top_level(match.group(3), "([{<"):
        if not param:
            continue
        param_match = re.match(r"^(.*?)(\w+)$", param.strip())
        types.append(param_match.group(1).strip().rstrip("&*").strip() if param_match else "auto")
    return match.group(2), types, match.group(1).strip()


def _cpp_test(index: int, example: Example, signature) -> list[str]:
    lines = ["", f"void test_example_{index}() {{"]
    lines.extend(render_example_comments(example, "//", "    "))
    lines.append("    Solution solution;")

    arguments = parse_assignments(example.input)
    if signature and arguments and len(arguments) == len(signature[1]):
        method, types, returns = signature
        for (name, value), type_hint in zip(arguments, types):
            lines.append(f"    {type_hint} {name} = {cpp_literal(value)};")
        call = f"solution.{method}({', '.join(name for name, _ in arguments)})"
        if returns == "void":
            lines.append(f"    {call};")
        else:
            lines.append(f"    {returns} expected = {cpp_literal(expected_value(example.output))};")
            lines.append(f"    assert({call} == expected);")
    else:
        lines.append("    // TODO: translate this example into an assertion")
    lines.append("}")
    return lines


def render_cpp(problem: Problem) -> str:
    snippet = problem.snippet_for(Language.CPP.value)
    default = "class Solution {\npublic:\n    void solve() {}\n};"
    stub = snippet.code.rstrip() if snippet else default
    signature = _cpp_signature(stub)

    lines = render_header(problem, "//")
    lines += [
        "",
        "#include <bits/stdc++.h>",
        "using namespace std;",
        "",
        f"// {BEGIN_MARKER}",
        stub,
        f"// {END_MARKER}",
    ]
    for index, example in enumerate(problem.examples, start=1):
        lines += _cpp_test(index, example, signature)

    lines += ["", "int main() {"]
    lines += [f"    test_example_{index}();" for index in range(1, len(problem.examples) + 1)]
    lines += ['    cout << "All examples passed" << endl;', "    return 0;", "}"]
    return "\n".join(lines) + "\n"


TEMPLATES: dict[Language, LanguageTemplate] = {
    Language.PYTHON3: LanguageTemplate(
        language=Language.PYTHON3,
        name="python3-pytest",
        source_path="solution.py",
        comment="#",
        render=render_python,
    ),
    Language.RUST: LanguageTemplate(
        language=Language.RUST,
        name="rust-cargo",
        source_path="src/main.rs",
        comment="//",
        render=render_rust,
        metadata=rust_metadata,
    ),
    Language.CPP: LanguageTemplate(
        language=Language.CPP,
        name="cpp-assert",
        source_path="solution.cpp",
        comment="//",
        render=render_cpp,
    ),
}
