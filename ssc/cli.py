import argparse
import os
import sys
import time

from .compiler import compile_to_svg
from .exceptions import InternalCompilerError, ShapeScriptError
from .utils import TerminalColors

# This provides a single source of truth for stage names and their order.
STAGE_MAP = {
    "1": ("tokens", "Token Stream"),
    "2": ("ast", "Abstract Syntax Tree"),
}


def build_arg_parser() -> argparse.ArgumentParser:
    stage_help_text = "Compile up to a specific stage and save the intermediate artifact. "
    for key, (name, desc) in STAGE_MAP.items():
        stage_help_text += f"'{key}' for {desc}. "
    stage_help_text += "Omitting this flag runs the full pipeline to generate the final .svg document."

    parser = argparse.ArgumentParser(description="Compile a .shape file into an .svg document.")
    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="The path to the input .shape file. Omit to read from stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_file",
        help="The path to the output .svg file. Only used for full compilation.",
    )
    parser.add_argument("-c", "--compile", type=str, choices=STAGE_MAP.keys(), help=stage_help_text)
    return parser


def main(argv=None):
    start_time = time.perf_counter()

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    # --- Input Validation ---
    if not args.input_file and sys.stdin.isatty():
        parser.error("input_file is required when not reading from a pipe.")

    script_path_for_display = args.input_file or "stdin"
    print(f"--- Compiling {script_path_for_display} ---")

    try:
        # --- Read Input ---
        if not args.input_file:
            script_content = sys.stdin.read()
            input_file_path_abs = None
        else:
            input_file_path_abs = os.path.abspath(args.input_file)
            with open(input_file_path_abs, "r", encoding="utf-8") as f:
                script_content = f.read()

        # --- Determine Pipeline Stop Point ---
        stop_after_stage = None
        if args.compile:
            stop_after_stage, stage_desc = STAGE_MAP[args.compile]

        # The compiler pipeline will automatically save the artifact if requested
        dump_stages = [stop_after_stage] if stop_after_stage else []

        # --- Run Compilation ---
        final_product = compile_to_svg(
            script_content,
            file_path=input_file_path_abs,
            dump_stages=dump_stages,
            stop_after_stage=stop_after_stage,
        )

        # --- Handle Output ---
        if stop_after_stage:
            print(f"\n{TerminalColors.GREEN}--- Compilation to stage '{args.compile} ({stage_desc})' successful ---{TerminalColors.RESET}")
        else:
            if args.output_file:
                raw_output_path = args.output_file
            elif args.input_file:
                raw_output_path = os.path.splitext(args.input_file)[0] + ".svg"
            else:
                raw_output_path = "stdin.svg"

            output_file_path = os.path.abspath(raw_output_path)
            os.makedirs(os.path.dirname(output_file_path), exist_ok=True)

            with open(output_file_path, "w", encoding="utf-8") as f:
                f.write(final_product)

            print(f"\n{TerminalColors.GREEN}--- Compilation Successful ---{TerminalColors.RESET}")
            print(f"SVG written to {output_file_path}")

    # --- Error Handling ---
    except ShapeScriptError as e:
        print(
            f"\n{TerminalColors.RED}--- COMPILATION ERROR ---\n{e.render(args.input_file)}{TerminalColors.RESET}",
            file=sys.stderr,
        )
        sys.exit(1)
    except FileNotFoundError:
        print(
            f"{TerminalColors.RED}ERROR: Script file '{script_path_for_display}' not found.{TerminalColors.RESET}",
            file=sys.stderr,
        )
        sys.exit(1)
    except InternalCompilerError as e:
        print(
            f"\n{TerminalColors.RED}--- UNEXPECTED COMPILER ERROR ---{TerminalColors.RESET}",
            file=sys.stderr,
        )
        print("This may be a bug in the compiler. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        end_time = time.perf_counter()
        duration = end_time - start_time
        print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")


if __name__ == "__main__":
    main()
