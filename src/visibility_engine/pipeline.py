"""
HTML-level entry points.

Filters both documents to plain text and hands them to the analyzer.
"""

from .analyzer import (
    analyze_both_scenarios,
    analyze_content_difference,
    generate_recommendations,
    generate_visibility_score,
)
from .html_filter import strip_tags_to_text
from .models import (
    DEFAULT_POLICY,
    AnalysisOptions,
    CitationReadiness,
    QuickComparison,
    ScenarioComparison,
    ScoringPolicy,
    VisibilityReport,
)


def analyze_visibility(
    initial_html: str | None,
    rendered_html: str | None,
    options: AnalysisOptions | None = None,
    include_score: bool = True,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> VisibilityReport:
    """
    Analyze how much rendered content is visible in the initial HTML.

    Args:
        initial_html: HTML as seen by crawlers
        rendered_html: HTML as seen by users after rendering
        options: Analysis options (navigation/footer filtering)
        include_score: Whether to compute the visibility score
        policy: Scoring policy

    Returns:
        VisibilityReport with the analysis and optional score
    """
    options = options or AnalysisOptions()
    analysis = analyze_content_difference(
        strip_tags_to_text(initial_html, options.ignore_nav_footer),
        strip_tags_to_text(rendered_html, options.ignore_nav_footer),
        options,
    )

    score = generate_visibility_score(analysis.metrics, policy) if include_score else None
    return VisibilityReport(analysis=analysis, visibility_score=score)


def quick_compare(
    html1: str | None, html2: str | None, options: AnalysisOptions | None = None
) -> QuickComparison:
    """Headline metrics for two HTML documents."""
    metrics = analyze_visibility(html1, html2, options, include_score=False).metrics
    return QuickComparison(
        word_count=metrics.word_count,
        content_gain=metrics.content_gain,
        missing_words=metrics.missing_words,
        similarity=metrics.similarity,
    )


def get_citation_readiness(
    initial_html: str | None,
    rendered_html: str | None,
    options: AnalysisOptions | None = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> CitationReadiness:
    """
    Citation readiness of a page, with recommendations.

    Args:
        initial_html: HTML as crawlers see it
        rendered_html: HTML as users see it
        options: Analysis options
        policy: Scoring policy

    Returns:
        CitationReadiness with score, category and recommendations
    """
    report = analyze_visibility(initial_html, rendered_html, options, policy=policy)
    score = report.visibility_score

    return CitationReadiness(
        score=score.score,
        category=score.category,
        description=score.description,
        metrics=report.metrics,
        recommendations=generate_recommendations(report.metrics, policy),
    )


def analyze_html_both_scenarios(
    initial_html: str | None, rendered_html: str | None
) -> ScenarioComparison:
    """Compare two HTML documents with and without navigation/footer filtering."""
    return analyze_both_scenarios(
        strip_tags_to_text(initial_html, ignore_nav_footer=False),
        strip_tags_to_text(initial_html, ignore_nav_footer=True),
        strip_tags_to_text(rendered_html, ignore_nav_footer=False),
        strip_tags_to_text(rendered_html, ignore_nav_footer=True),
    )
