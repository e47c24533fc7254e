"""
Terminal output formatter for CLI.

Handles all display logic - no business logic, just presentation.
"""

from visibility_engine import generate_html_diff
from visibility_engine.models import (
    ContentAnalysis,
    JobResult,
    PairAnalysis,
    ScenarioComparison,
    VisibilityCategory,
    VisibilityScore,
)


def print_analysis(
    analysis: ContentAnalysis,
    score: VisibilityScore,
    recommendations: list[str],
    show_diff: bool = False,
) -> None:
    """
    Print a human-readable report for a single comparison.

    Args:
        analysis: Comparison of the two texts
        score: Visibility score of the comparison
        recommendations: Recommendations to list
        show_diff: Whether to print the marked-up word diff
    """
    metrics = analysis.metrics

    print("\n" + "=" * 80)
    print("HTML VISIBILITY REPORT")
    print("=" * 80)
    print(f"\nVisibility Score:     {score.score} ({score.category.value})")
    print(f"                      {score.description}")
    print(f"Citation Readability: {metrics.citation_readability}%")
    print(f"Similarity:           {metrics.similarity}%")
    print(f"Content Gain:         {metrics.content_gain_formatted}")
    print(f"Missing Words:        {metrics.missing_words_formatted}")

    print("\n    Word Count:")
    print(f"      Initial: {metrics.word_count.initial}")
    print(f"      Final:   {metrics.word_count.final}")
    print(f"      Delta:   {metrics.word_count.difference:+d}")

    print(f"\n    Words: {analysis.word_diff.summary}")
    print(f"    Lines: {analysis.line_diff.summary}")
    print(f"    Text retention: {analysis.text_retention_percent}")

    if recommendations:
        print("\n    Recommendations:")
        for recommendation in recommendations:
            print(f"      • {recommendation}")

    if show_diff:
        print("\n" + "-" * 80)
        print(generate_html_diff(analysis.word_diff.operations))
        print("-" * 80)


def print_scenarios(scenarios: ScenarioComparison) -> None:
    """Print metrics with and without navigation/footer filtering side by side."""
    ignored = scenarios.with_nav_footer_ignored.metrics
    kept = scenarios.without_nav_footer_ignored.metrics

    print(f"\n{'':24}{'Nav/footer ignored':>20}{'Nav/footer kept':>20}")
    print(f"{'Citation Readability':24}{ignored.citation_readability:>19}%{kept.citation_readability:>19}%")
    print(f"{'Similarity':24}{ignored.similarity:>19}%{kept.similarity:>19}%")
    print(f"{'Content Gain':24}{ignored.content_gain_formatted:>20}{kept.content_gain_formatted:>20}")
    print(f"{'Missing Words':24}{ignored.missing_words:>20}{kept.missing_words:>20}")


def print_results_summary(result: JobResult) -> None:
    """
    Print a human-readable summary of results to terminal.

    Shows overall statistics and detailed information for pairs scoring
    below 'good'.

    Args:
        result: JobResult containing all analyses
    """
    print("\n" + "=" * 80)
    print("HTML VISIBILITY REPORT")
    print("=" * 80)
    print(f"\nPairs Processed: {result.pairs_processed}")
    print(f"Pairs Succeeded: {result.pairs_succeeded}")
    print(f"Pairs Failed:    {result.pairs_failed}")
    print(f"Success Rate:    {result.success_rate}%")
    print(f"Average Score:   {result.average_score}")

    if result.finished_at:
        duration = (result.finished_at - result.started_at).total_seconds()
        print(f"Duration:        {duration:.1f} seconds")

    low_visibility = result.get_analyses_below(VisibilityCategory.GOOD)

    print(f"\n{'=' * 80}")
    print(f"Low Visibility: {len(low_visibility)} / {result.pairs_processed} pairs")
    print(f"{'=' * 80}\n")

    if not low_visibility:
        print("✓ No visibility problems detected.")
        print("  All pairs score 'good' or better.\n")
    else:
        for i, analysis in enumerate(low_visibility, 1):
            _print_pair(i, analysis)

    failed_analyses = result.get_failed_analyses()
    if failed_analyses:
        print(f"\n{'=' * 80}")
        print(f"FAILED PAIRS ({len(failed_analyses)})")
        print(f"{'=' * 80}\n")

        for i, analysis in enumerate(failed_analyses, 1):
            print(f"[{i}] {analysis.name}")
            _print_errors(analysis)
            print("-" * 80 + "\n")


def _print_pair(index: int, analysis: PairAnalysis) -> None:
    score = analysis.visibility_score
    metrics = analysis.analysis.metrics

    print(f"[{index}] {analysis.name}")
    print(f"    Score: {score.score} ({score.category.value})")
    print(f"    Citation Readability: {metrics.citation_readability}%")
    print(f"    Content Gain: {metrics.content_gain_formatted}")
    print(f"    Missing Words: {metrics.missing_words_formatted}")

    for recommendation in analysis.recommendations:
        print(f"      • {recommendation}")

    print("\n" + "-" * 80 + "\n")


def _print_errors(analysis: PairAnalysis) -> None:
    """
    Print errors from an analysis in a readable format.

    Args:
        analysis: PairAnalysis containing errors
    """
    if analysis.read_errors:
        print("  Read Errors:")
        for error in analysis.read_errors:
            print(f"    • {error}")

    if analysis.analysis_errors:
        print("  Analysis Errors:")
        for error in analysis.analysis_errors:
            print(f"    • {error}")
