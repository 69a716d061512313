from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Hover,
    InsertTextFormat,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)
from pygls.server import LanguageServer
from pygls.workspace import Document

from ssc.compiler import compile_shapescript
from ssc.config.config import SVG_BUILTIN, SVG_VALUE_ARG
from ssc.evaluator.core.evaluator import display
from ssc.evaluator.core.stdlib import load_stdlib_shapes
from ssc.exceptions import ShapeScriptError
from ssc.lexer.core.lexer import lex
from ssc.parser.core.classes import NumberLiteral, Parameter, ShapeDefinition, StringLiteral
from ssc.parser.core.parser import parse_program

server = LanguageServer("shapescript-server", "v1")


def _get_diagnostics(source: str) -> List[Diagnostic]:
    """Compiles the document and turns a failure into a single diagnostic."""
    result = compile_shapescript(source)
    if result.error is None:
        return []

    error = result.error
    start = Position(line=error.line, character=error.column)
    end = Position(line=error.line, character=error.column + 1)
    return [Diagnostic(range=Range(start=start, end=end), message=error.message, severity=DiagnosticSeverity.Error, source="ssc")]


def _get_known_shapes(source: str) -> Dict[str, ShapeDefinition]:
    """
    Returns the builtin shapes plus whatever the document declares.
    A document that does not parse contributes no shapes of its own.
    """
    shapes = dict(load_stdlib_shapes())
    try:
        program = parse_program(lex(source))
    except ShapeScriptError:
        return shapes
    for shape in program.shapes:
        shapes.setdefault(shape.name, shape)
    return shapes


def _format_param(param: Parameter) -> str:
    default = param.default
    if default is None:
        return param.name
    if isinstance(default, NumberLiteral):
        return f"{param.name} = {display(default.value)}"
    if isinstance(default, StringLiteral):
        return f'{param.name} = "{default.value}"'
    return f"{param.name} = ..."


def format_signature(shape: ShapeDefinition) -> str:
    params = ", ".join(_format_param(p) for p in shape.params)
    return f"shape {shape.name}({params})"


def _get_word_at_position(document: Document, position: Position) -> str:
    if position.line >= len(document.lines):
        return ""
    line = document.lines[position.line]
    start, end = position.character, position.character
    while start > 0 and line[start - 1].isalnum():
        start -= 1
    while end < len(line) and line[end].isalnum():
        end += 1
    return line[start:end]


def _create_call_snippet(name: str, param_names: List[str]) -> str:
    """Creates an LSP snippet string with one named-argument placeholder per given parameter."""
    placeholders = [f"{p}: ${{{i + 1}:{p}}}" for i, p in enumerate(param_names)]
    return f"{name}({', '.join(placeholders)})"


def _hover_text(word: str, source: str) -> Optional[str]:
    if word == SVG_BUILTIN:
        return f"```shapescript\n(builtin) {SVG_BUILTIN}({SVG_VALUE_ARG})\n```\n---\nInjects a string verbatim into the output."

    shape = _get_known_shapes(source).get(word)
    if shape is None:
        return None
    return f"```shapescript\n{format_signature(shape)}\n```"


def _completion_items(source: str) -> List[CompletionItem]:
    builtin_names = set(load_stdlib_shapes())
    items = [
        CompletionItem(
            label=SVG_BUILTIN,
            kind=CompletionItemKind.Function,
            detail="Builtin",
            insert_text=_create_call_snippet(SVG_BUILTIN, [SVG_VALUE_ARG]),
            insert_text_format=InsertTextFormat.Snippet,
        )
    ]
    for name, shape in _get_known_shapes(source).items():
        items.append(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function,
                detail="Builtin Shape" if name in builtin_names else "User-Defined Shape",
                documentation=format_signature(shape),
                insert_text=_create_call_snippet(name, [p.name for p in shape.params if p.default is None]),
                insert_text_format=InsertTextFormat.Snippet,
            )
        )
    return items


def _validate(ls: LanguageServer, uri: str):
    document = ls.workspace.get_document(uri)
    ls.publish_diagnostics(uri, _get_diagnostics(document.source))


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls, params):
    document = ls.workspace.get_document(params.text_document.uri)
    word = _get_word_at_position(document, params.position)
    if not word:
        return None

    text = _hover_text(word, document.source)
    if text is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=text))


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completions(ls, params):
    document = ls.workspace.get_document(params.text_document.uri)
    return CompletionList(items=_completion_items(document.source), is_incomplete=False)


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
