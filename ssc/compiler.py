import json
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ssc.evaluator.core.evaluator import eval_program
from ssc.lexer.core.lexer import lex
from ssc.parser.core.parser import parse_program

from .exceptions import InternalCompilerError, ShapeScriptError
from .utils import CompilerArtifactEncoder

STAGES = ("tokens", "ast", "svg")


class CompileError(BaseModel):
    line: int
    column: int
    message: str


class CompileResult(BaseModel):
    """Exactly one of `svg` and `error` is populated."""

    svg: Optional[str] = None
    error: Optional[CompileError] = None


class CompilationPipeline:
    """
    Orchestrates the full compilation process from source code to SVG document.
    This class manages the flow of data between the lexer, parser and evaluator.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str] = None,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
    ):
        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.dump_stages = dump_stages or []
        self.stop_after_stage = stop_after_stage
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []

    def run(self) -> Any:
        """
        Executes the compilation pipeline stage by stage.
        The final artifact from each stage is passed as input to the next.
        """
        try:
            # --- Stage 1: Lexing ---
            self._run_stage("tokens", lex, self.source_content)
            if self.stop_after_stage == "tokens":
                return self.results[-1]

            # --- Stage 2: Parsing ---
            self._run_stage("ast", parse_program, self.results[-1])
            if self.stop_after_stage == "ast":
                return self.results[-1]

            # --- Stage 3: Evaluation ---
            self._run_stage("svg", eval_program, self.results[-1])
            return self.results[-1]

        except (ShapeScriptError, InternalCompilerError):
            raise
        except Exception as e:
            import traceback

            traceback.print_exc()
            raise InternalCompilerError(f"An unexpected internal error occurred: {e}") from e

    def _run_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        result = func(*args, **kwargs)
        self.artifacts[name] = result
        self.results.append(result)
        if name in self.dump_stages:
            self.save_artifact(name, result)
        return result

    def save_artifact(self, name: str, data: Any):
        """Saves an intermediate artifact to a JSON file named after the input."""

        if self.file_path == "<stdin>":
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]

        output_path = f"{base_name}.{name}.json"

        print(f"--- Saving artifact '{name}' to {output_path} ---")

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=False, cls=CompilerArtifactEncoder)
        except OSError as e:
            print(f"Error: Could not save artifact '{name}': {e}")


def compile_to_svg(
    script_content: str,
    file_path: Optional[str] = None,
    dump_stages: Optional[List[str]] = None,
    stop_after_stage: Optional[str] = None,
):
    """High-level entry point for the compilation pipeline."""
    pipeline = CompilationPipeline(script_content, file_path, dump_stages, stop_after_stage)
    return pipeline.run()


def compile_shapescript(source: str) -> CompileResult:
    """
    Host-facing boundary: compiles source text into either an SVG document or
    a single positioned error. Internal compiler errors are not caught here.
    """
    try:
        svg = compile_to_svg(source)
    except ShapeScriptError as e:
        return CompileResult(error=CompileError(line=e.pos.line, column=e.pos.column, message=e.message))
    return CompileResult(svg=svg)
