"""
sudoku16 - Command line entry point

Rates, explains, solves and generates 16x16 Sudoku puzzles.

Example:
    python main.py rate PUZZLE
    python main.py rate -i puzzles.txt --format "%g ED=%r/%p/%d" --want p
    python main.py hints PUZZLE
    python main.py solve PUZZLE
    python main.py generate --symmetry Rotational180 --min 2.0 --max 6.0 --count 3
    python main.py techniques
"""

import sys
import logging
import argparse
from contextlib import ExitStack
from typing import Iterator, List, Optional, TextIO

from sudoku16 import (
    GeneratorWorker,
    LoadStatus,
    PuzzleFormat,
    Settings,
    SolvingTechnique,
    Symmetry,
    format_pencil_marks,
    load_from_text,
    load_settings,
    save_to_text,
)
from sudoku16.grid import Grid
from sudoku16.solver import (
    AlwaysAsker,
    Asker,
    CallbackAsker,
    NeverAsker,
    RatingMode,
    Solver,
    get_producer_info,
)

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "ED=%r/%p/%d"


def setup_logging(debug: bool, verbose: bool = False) -> None:
    """Configure console logging for the command line."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler()],
    )


def read_puzzles(args: argparse.Namespace) -> Iterator[str]:
    """Yield puzzle texts from the command line, then from -i FILE (- for stdin)."""
    for puzzle in args.puzzles:
        yield puzzle
    if args.input is None:
        return
    if args.input == "-":
        for line in sys.stdin:
            if line.strip():
                yield line.rstrip("\n")
        return
    with open(args.input, encoding="utf-8") as f:
        for line in f:
            if line.strip():
                yield line.rstrip("\n")


def load_puzzle(text: str, fmt: PuzzleFormat) -> Optional[Grid]:
    grid, status = load_from_text(text, fmt)
    if status is LoadStatus.ERROR:
        logger.error(f"Skipping unreadable puzzle: {text[:32]}...")
        return None
    return grid


def cli_settings(args: argparse.Namespace) -> Settings:
    """Load the settings file, with command line overrides applied."""
    settings = load_settings(args.settings)
    if args.puzzle_format:
        settings = settings.evolve(puzzle_format=args.puzzle_format)
    return settings


def console_asker(message: str) -> bool:
    answer = input(f"{message} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def cmd_rate(args: argparse.Namespace, out: TextIO) -> int:
    settings = cli_settings(args)
    fmt = PuzzleFormat(settings.puzzle_format)
    want = RatingMode(args.want) if args.want else RatingMode.NONE
    for text in read_puzzles(args):
        grid = load_puzzle(text, fmt)
        if grid is None:
            continue
        out.write(text + "\n")
        solver = Solver(grid, settings)
        solver.rebuild_potential_values()

        def trace(hint, _grid):
            out.write(f"{hint.difficulty:.1f} {hint.describe()}\n")

        rating = solver.get_difficulty(want, trace if args.trace else None)
        out.write(rating.format(args.format, text) + "\n")
        out.flush()
    return 0


def hints_asker(advanced: bool, interactive: bool) -> Asker:
    """
    Choose how the hints command confirms the advanced techniques.

    With --advanced they always run. Otherwise an interactive console asks
    first and piped input skips them.
    """
    if advanced:
        return AlwaysAsker()
    if interactive:
        return CallbackAsker(console_asker)
    return NeverAsker()


def cmd_hints(args: argparse.Namespace, out: TextIO) -> int:
    settings = cli_settings(args)
    fmt = PuzzleFormat(settings.puzzle_format)
    asker = hints_asker(args.advanced, sys.stdin.isatty())
    for text in read_puzzles(args):
        grid = load_puzzle(text, fmt)
        if grid is None:
            continue
        solver = Solver(grid, settings)
        solver.rebuild_potential_values()
        out.write(format_pencil_marks(grid, fmt) + "\n")
        hints = solver.get_all_hints(asker)
        if not hints:
            out.write("No hint found\n")
        for hint in hints:
            out.write(f"{hint.difficulty:.1f} {hint.describe()}\n")
    return 0


def cmd_solve(args: argparse.Namespace, out: TextIO) -> int:
    settings = cli_settings(args)
    fmt = PuzzleFormat(settings.puzzle_format)
    status = 0
    for text in read_puzzles(args):
        grid = load_puzzle(text, fmt)
        if grid is None:
            status = 1
            continue
        solver = Solver(grid, settings)
        solver.rebuild_potential_values()
        problem = solver.check_validity()
        if problem is not None:
            out.write(f"{problem.describe()}\n")
            status = 1
            continue
        analysis = solver.analyse()
        result = solver.solve()
        out.write(save_to_text(grid, fmt))
        if analysis is not None:
            out.write(analysis.describe() + "\n")
        if not result.is_solved:
            out.write(f"Not solved: {result.status.name.lower()}\n")
            status = 1
    return status


def cmd_generate(args: argparse.Namespace, out: TextIO) -> int:
    settings = cli_settings(args)
    fmt = PuzzleFormat(settings.puzzle_format)
    symmetries = [Symmetry.from_name(name) for name in args.symmetry] or list(Symmetry)

    puzzles: List[Optional[Grid]] = []
    errors: List[str] = []
    worker = GeneratorWorker(
        symmetries, args.min, args.max, settings=settings,
        count=args.count, seed=args.seed,
        on_status=lambda status: logger.info(f"Generator: {status}"),
        on_generated=puzzles.append,
        on_error=errors.append,
    )
    worker.start()
    try:
        while worker.is_alive():
            worker.join(0.5)
    except KeyboardInterrupt:
        logger.warning("Interrupted, stopping generator")
        worker.request_stop()
        worker.join()

    for grid in puzzles:
        if grid is None:
            continue
        out.write(save_to_text(grid, fmt) + "\n")
        rating = Solver(grid.copy(), settings)
        rating.rebuild_potential_values()
        out.write(rating.get_difficulty().format(DEFAULT_FORMAT) + "\n\n")
    for error in errors:
        logger.error(f"Generation failed: {error}")
    return 1 if errors else 0


def cmd_techniques(args: argparse.Namespace, out: TextIO) -> int:
    settings = load_settings(args.settings)
    for technique in SolvingTechnique:
        mark = "x" if settings.is_using(technique) else " "
        out.write(f"[{mark}] {technique.name:28} {technique}\n")
    if args.debug:
        for info in get_producer_info():
            out.write(f"    {info['name']:24} {info['kind']:9} {info['description']}"
                      f" [{info['techniques']}]\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="16x16 Sudoku rater, solver and generator")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    parser.add_argument("--settings", default=None, help="Settings file (default: sudoku16.json)")
    parser.add_argument("-o", "--output", default="-", help="Output file, - for stdout")
    parser.add_argument("--puzzle-format", type=int, choices=[1, 2, 3, 4], default=None,
                        help="Puzzle characters: 1=0-9A-F 2=1-9A-G 3=numbers 4=A-P")
    sub = parser.add_subparsers(dest="command", required=True)

    def with_input(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("puzzles", nargs="*", help="Puzzles as 256-character lines")
        p.add_argument("-i", "--input", default=None, help="Read puzzles from FILE, - for stdin")
        return p

    rate = with_input(sub.add_parser("rate", help="Rate puzzles"))
    rate.add_argument("--format", default=DEFAULT_FORMAT,
                      help="Output format: %%r rating, %%p pearl, %%d diamond, %%g puzzle")
    rate.add_argument("--want", choices=["p", "d"], default=None,
                      help="Invalidate ratings that are not pearls (p) or diamonds (d)")
    rate.add_argument("--trace", action="store_true", help="Print every solving step")
    rate.set_defaults(func=cmd_rate)

    hints = with_input(sub.add_parser("hints", help="List the next hints"))
    hints.add_argument("--advanced", action="store_true",
                       help="Run the nested forcing chains without asking")
    hints.set_defaults(func=cmd_hints)

    solve = with_input(sub.add_parser("solve", help="Solve puzzles and summarize the rules used"))
    solve.set_defaults(func=cmd_solve)

    generate = sub.add_parser("generate", help="Generate puzzles")
    generate.add_argument("--symmetry", nargs="*", default=[],
                          help=f"Allowed symmetries (default: all): {', '.join(s.name.rstrip('_') for s in Symmetry)}")
    generate.add_argument("--min", type=float, default=0.0, help="Minimum rating")
    generate.add_argument("--max", type=float, default=20.0, help="Maximum rating")
    generate.add_argument("--seed", type=int, default=None, help="Random seed")
    generate.add_argument("--count", type=int, default=1, help="Number of puzzles")
    generate.set_defaults(func=cmd_generate)

    techniques = sub.add_parser("techniques", help="List solving techniques")
    techniques.set_defaults(func=cmd_techniques)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug, args.verbose)

    with ExitStack() as stack:
        if args.output == "-":
            out = sys.stdout
        else:
            out = stack.enter_context(open(args.output, "w", encoding="utf-8"))
        try:
            return args.func(args, out)
        except ValueError as e:
            logger.error(str(e))
            return 2


if __name__ == "__main__":
    sys.exit(main())
