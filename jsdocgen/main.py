"""Command-line interface for the JSDoc generator.

This module provides the main entry point for generating JSDoc headers from
the command line. It uses argparse to handle one subcommand per generation
scope: position, file, folder and workspace.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path

from . import __version__
from .builder.header_builder import HeaderBuilder
from .claude.description_service import ClaudeDescriptionService
from .config import GeneratorConfig, find_config_file
from .descriptions.sources import select_description_source
from .errors import JsdocGeneratorError
from .generation.cancellation import CancellationSignal, ConsoleProgress, NullProgress
from .generation.orchestrator import HeaderOrchestrator
from .generation.sources import DEFAULT_FILE_GLOB
from .models.generation_result import GenerationResult
from .parsers.typescript_parser import TypeScriptParser
from .writer.file_writer import FileWriter
from .writer.sinks import FileEditBatch, FileInsertionSink, InteractiveSink, StdoutSink

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_config(args: argparse.Namespace, target: Path) -> GeneratorConfig:
    """Load settings from --config, else from the nearest settings file.

    Args:
        args: Parsed command-line arguments.
        target: File or directory the command works on.

    Returns:
        GeneratorConfig: Loaded settings, or defaults when no file exists.
    """
    if args.config:
        return GeneratorConfig.load(Path(args.config))
    config_path = find_config_file(target)
    if config_path is None:
        return GeneratorConfig()
    logger.debug("Using settings from %s", config_path)
    return GeneratorConfig.load(config_path)


def create_orchestrator(
    args: argparse.Namespace,
    config: GeneratorConfig,
    base_path: Path,
    cancellation: CancellationSignal,
) -> HeaderOrchestrator:
    """Create a HeaderOrchestrator with injected dependencies.

    Args:
        args: Parsed command-line arguments.
        config: Generator settings.
        base_path: Directory that written files must stay within.
        cancellation: Signal set when the user interrupts the run.

    Returns:
        HeaderOrchestrator: Configured orchestrator instance.
    """
    parser = TypeScriptParser(helper_path=Path(args.helper) if args.helper else None)
    service = ClaudeDescriptionService.from_config(
        config, max_retries=args.max_retries, timeout=args.timeout
    )
    builder = HeaderBuilder(config, select_description_source(config, service))
    writer = FileWriter(base_path=str(base_path))
    return HeaderOrchestrator(
        parser=parser,
        builder=builder,
        batch_factory=lambda: FileEditBatch(writer),
        progress=ConsoleProgress() if args.verbose else NullProgress(),
        cancellation=cancellation,
        file_glob=args.glob,
    )


async def _run_then_close(coroutine, orchestrator: HeaderOrchestrator) -> GenerationResult:
    try:
        return await coroutine
    finally:
        await orchestrator.close()


def run_with_cancellation(coroutine, orchestrator: HeaderOrchestrator) -> GenerationResult:
    """Run a generation coroutine, then release the orchestrator's connections.

    Ctrl+C requests cooperative cancellation while the coroutine runs.
    """
    previous = signal.signal(signal.SIGINT, lambda signum, frame: orchestrator.cancellation.cancel())
    try:
        return asyncio.run(_run_then_close(coroutine, orchestrator))
    finally:
        signal.signal(signal.SIGINT, previous)


def report(result: GenerationResult, output_format: str, stream=None) -> int:
    """Print a generation result.

    Args:
        result: Result to print.
        output_format: 'summary' or 'json'.
        stream: Stream for the summary line; stdout by default.

    Returns:
        Exit code (0 for success, 1 when generated edits could not be applied).
    """
    if output_format == "json":
        print(json.dumps(result.to_dict(), indent=2), file=stream or sys.stdout)
    else:
        for failure in result.failures:
            print(f"Warning: Failed to process {failure.filepath}: {failure.error}", file=sys.stderr)
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        if result.generated == 0 and not result.cancelled:
            print(f"Warning: {result.message}", file=sys.stderr)
        else:
            print(result.message, file=stream or sys.stdout)

    if result.generated and not result.applied and not result.cancelled:
        return 1
    return 0


def _line_column_to_offset(text: str, line: int, column: int) -> int:
    """Convert a 1-based line and column into an offset of ``text``."""
    lines = text.split("\n")
    if not 1 <= line <= len(lines):
        raise ValueError(f"Line {line} is outside the file (1-{len(lines)})")
    if not 1 <= column <= len(lines[line - 1]) + 1:
        raise ValueError(f"Column {column} is outside line {line}")
    return sum(len(previous) + 1 for previous in lines[: line - 1]) + column - 1


def cmd_position(
    args: argparse.Namespace, orchestrator: HeaderOrchestrator, sink: InteractiveSink
) -> int:
    """Handle the position subcommand.

    Args:
        args: Parsed command-line arguments.
        orchestrator: Orchestrator instance (dependency injection).
        sink: Receives the header (dependency injection).

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        text = sys.stdin.read() if args.stdin else None
        if args.offset is not None:
            position = args.offset
        else:
            if text is None:
                with open(args.file, encoding="utf-8", newline="") as f:
                    text = f.read()
            position = _line_column_to_offset(text, args.line, args.column)

        result = run_with_cancellation(
            orchestrator.generate_at_position(args.file, position, sink, text=text),
            orchestrator,
        )
        # Printed headers own stdout
        return report(result, args.format, sys.stderr if args.print else None)

    except (JsdocGeneratorError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return 1


def cmd_file(args: argparse.Namespace, orchestrator: HeaderOrchestrator) -> int:
    """Handle the file subcommand.

    Args:
        args: Parsed command-line arguments.
        orchestrator: Orchestrator instance (dependency injection).

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        result = run_with_cancellation(
            orchestrator.generate_for_file(args.file), orchestrator
        )
        return report(result, args.format)

    except (JsdocGeneratorError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return 1


def cmd_folder(args: argparse.Namespace, orchestrator: HeaderOrchestrator) -> int:
    """Handle the folder and workspace subcommands.

    Args:
        args: Parsed command-line arguments.
        orchestrator: Orchestrator instance (dependency injection).

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        if args.command == "workspace":
            coroutine = orchestrator.generate_for_workspace(args.path)
        else:
            coroutine = orchestrator.generate_for_folder(args.path)
        result = run_with_cancellation(coroutine, orchestrator)
        return report(result, args.format)

    except JsdocGeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return 1


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        help="Settings file (default: nearest .jsdoc-generator.json)",
    )
    subparser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format (default: summary)",
    )
    subparser.add_argument(
        "--helper",
        help="Path to ts-syntax-tree.js (default: bundled helper)",
    )
    subparser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Timeout in seconds for description requests (default: 30.0)",
    )
    subparser.add_argument(
        "--max-retries",
        type=int,
        default=3,
        help="Maximum attempts for rate-limited description requests (default: 3)",
    )
    subparser.add_argument(
        "--verbose", action="store_true", help="Enable verbose output"
    )


def main(argv: list | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, 1 for error).
    """
    parser = argparse.ArgumentParser(
        prog="jsdocgen",
        description="Generate JSDoc headers for TypeScript and JavaScript declarations",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Position command
    position_parser = subparsers.add_parser(
        "position", help="Generate the JSDoc of the declaration at a position"
    )
    position_parser.add_argument("file", help="TypeScript or JavaScript file")
    location = position_parser.add_mutually_exclusive_group(required=True)
    location.add_argument("--offset", type=int, help="Character offset in the file")
    location.add_argument("--line", type=int, help="1-based line (requires --column)")
    position_parser.add_argument("--column", type=int, default=1, help="1-based column (default: 1)")
    position_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the file text from stdin (implies --print)",
    )
    position_parser.add_argument(
        "--print",
        action="store_true",
        help="Print the header instead of inserting it",
    )
    position_parser.add_argument(
        "--snippet",
        action="store_true",
        help="With --print, render editable regions as snippet tab stops",
    )
    _add_common_arguments(position_parser)

    # File command
    file_parser = subparsers.add_parser(
        "file", help="Generate JSDoc for every undocumented declaration of a file"
    )
    file_parser.add_argument("file", help="TypeScript or JavaScript file")
    _add_common_arguments(file_parser)

    # Folder command
    folder_parser = subparsers.add_parser(
        "folder", help="Generate JSDoc for every supported file in a folder"
    )
    folder_parser.add_argument("path", help="Folder to process")
    folder_parser.add_argument(
        "--glob", default=DEFAULT_FILE_GLOB, help="Files to include (default: %(default)s)"
    )
    _add_common_arguments(folder_parser)

    # Workspace command
    workspace_parser = subparsers.add_parser(
        "workspace", help="Generate JSDoc for every supported file of the workspace"
    )
    workspace_parser.add_argument(
        "path", nargs="?", default=".", help="Workspace root (default: current directory)"
    )
    workspace_parser.add_argument(
        "--glob", default=DEFAULT_FILE_GLOB, help="Files to include (default: %(default)s)"
    )
    _add_common_arguments(workspace_parser)

    # Parse arguments
    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)
    if not hasattr(args, "glob"):
        args.glob = DEFAULT_FILE_GLOB
    if args.command == "position" and args.stdin:
        args.print = True

    target = Path(args.file if args.command in ("position", "file") else args.path).resolve()
    base_path = target if target.is_dir() else target.parent

    # Instantiate dependencies (ONLY place with instantiation)
    try:
        config = load_config(args, target)
        cancellation = CancellationSignal()
        orchestrator = create_orchestrator(args, config, base_path, cancellation)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Dispatch to command handler with injected dependencies
    if args.command == "position":
        if args.print:
            sink: InteractiveSink = StdoutSink(snippets=args.snippet)
        else:
            sink = FileInsertionSink(args.file, FileWriter(base_path=str(base_path)))
        return cmd_position(args, orchestrator, sink)
    elif args.command == "file":
        return cmd_file(args, orchestrator)
    elif args.command in ("folder", "workspace"):
        return cmd_folder(args, orchestrator)

    return 1


if __name__ == "__main__":
    sys.exit(main())
