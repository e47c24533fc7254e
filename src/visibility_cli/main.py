"""
CLI main entry point for the HTML Visibility Analyzer.

Thin wrapper around the core engine - no business logic here.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from visibility_engine import (
    AnalysisOptions,
    JobRunner,
    PagePair,
    analyze_content_difference,
    analyze_html_both_scenarios,
    analyze_visibility,
    generate_recommendations,
    generate_visibility_score,
)
from visibility_engine.storage import FileStorage, StorageError

from .output import print_analysis, print_results_summary, print_scenarios


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="html-visibility",
        description="Measure how much of a page's rendered content is visible in its initial HTML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s compare initial.html rendered.html
  %(prog)s compare initial.html rendered.html --format json
  %(prog)s compare crawler.txt user.txt --plain-text --show-diff
  %(prog)s batch pairs.txt -o ./results --format json --concurrency 5
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser("compare", help="Compare one initial/rendered pair")
    compare.add_argument("initial", type=str, help="File with the initial HTML (what crawlers see)")
    compare.add_argument("rendered", type=str, help="File with the rendered HTML (what users see)")
    compare.add_argument(
        "-f",
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    compare.add_argument(
        "--show-diff",
        action="store_true",
        help="Print the word diff with <ins>/<del> markers",
    )
    compare.add_argument(
        "--scenarios",
        action="store_true",
        help="Also compare with and without navigation/footer filtering",
    )
    _add_filter_arguments(compare)

    batch = subparsers.add_parser("batch", help="Compare many pairs listed in a file")
    batch.add_argument(
        "input_file",
        type=str,
        help="Text file with one 'initial_path rendered_path [name]' entry per line",
    )
    batch.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="Directory to save output files (default: current directory)",
    )
    batch.add_argument(
        "-f",
        "--format",
        type=str,
        choices=["csv", "json"],
        default="csv",
        help="Output format (default: csv)",
    )
    batch.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=3,
        help="Maximum number of pairs to process concurrently (default: 3)",
    )
    _add_filter_arguments(batch)

    return parser.parse_args(argv)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--keep-nav-footer",
        action="store_true",
        help="Keep navigation, header and footer regions in the compared text",
    )
    parser.add_argument(
        "--plain-text",
        action="store_true",
        help="Treat input files as plain text instead of HTML",
    )


def read_file(path: str) -> str:
    """
    Read an input file.

    Raises:
        SystemExit: If file cannot be read
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading file {path}: {e}", file=sys.stderr)
        sys.exit(1)


def read_pairs_from_file(input_file: str) -> list[PagePair]:
    """
    Read page pairs from input file.

    Blank lines and lines starting with '#' are skipped. Relative paths are
    resolved against the directory of the input file.

    Args:
        input_file: Path to input file

    Returns:
        List of page pairs

    Raises:
        SystemExit: If file cannot be read or holds no valid pairs
    """
    base_dir = Path(input_file).parent
    pairs: list[PagePair] = []

    for line_number, line in enumerate(read_file(input_file).splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split()
        if len(fields) not in (2, 3):
            print(
                f"Warning: Skipping line {line_number}: expected 'initial rendered [name]'",
                file=sys.stderr,
            )
            continue

        initial, rendered = (str(base_dir / field) for field in fields[:2])
        name = fields[2] if len(fields) == 3 else fields[0]
        pairs.append(PagePair(name=name, initial_path=initial, rendered_path=rendered))

    if not pairs:
        print(f"Error: No page pairs found in {input_file}", file=sys.stderr)
        sys.exit(1)

    return pairs


def run_compare(args: argparse.Namespace) -> None:
    """Compare a single pair and print the result."""
    initial = read_file(args.initial)
    rendered = read_file(args.rendered)
    options = AnalysisOptions(ignore_nav_footer=not args.keep_nav_footer)

    if args.plain_text:
        analysis = analyze_content_difference(initial, rendered, options)
        score = generate_visibility_score(analysis.metrics)
    else:
        report = analyze_visibility(initial, rendered, options)
        analysis, score = report.analysis, report.visibility_score

    recommendations = generate_recommendations(analysis.metrics)
    scenarios = None
    if args.scenarios and not args.plain_text:
        scenarios = analyze_html_both_scenarios(initial, rendered)

    if args.format == "json":
        data = analysis.to_dict()
        data["visibility_score"] = score.to_dict()
        data["recommendations"] = recommendations
        if scenarios:
            data["scenarios"] = scenarios.to_dict()
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    print_analysis(analysis, score, recommendations, show_diff=args.show_diff)
    if scenarios:
        print_scenarios(scenarios)


def run_batch(args: argparse.Namespace) -> None:
    """Compare every pair of the input file and save the results."""
    print(f"Reading page pairs from: {args.input_file}")
    pairs = read_pairs_from_file(args.input_file)
    print(f"Found {len(pairs)} pairs to process\n")

    runner = JobRunner(
        max_concurrency=args.concurrency,
        ignore_nav_footer=not args.keep_nav_footer,
        plain_text=args.plain_text,
    )

    print("Processing pairs...")
    result = runner.run_job(pairs)

    print_results_summary(result)

    print(f"\nSaving results to {args.format.upper()} file...")
    storage = FileStorage(output_directory=args.output_dir)

    try:
        output_path = storage.save(result, format=args.format)
        print(f"✓ Results saved to: {output_path}")
    except StorageError as e:
        print(f"✗ Failed to save results: {e}", file=sys.stderr)
        sys.exit(1)

    # Exit with error code if any pairs failed
    if result.pairs_failed > 0:
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Dispatches to the compare or batch workflow.
    """
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "compare":
        run_compare(args)
    else:
        run_batch(args)


if __name__ == "__main__":
    main()
