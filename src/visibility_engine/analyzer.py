"""
Content analysis and scoring.

Turns diff output and token counts into content gain, missing words,
citation readability, similarity and a weighted visibility score.
"""

import logging
from collections.abc import Callable

from .differ import generate_diff_report
from .models import (
    DEFAULT_POLICY,
    AnalysisOptions,
    ContentAnalysis,
    Metrics,
    ScenarioComparison,
    ScoreBreakdown,
    ScoringPolicy,
    TokenMode,
    VisibilityScore,
    WordCount,
    round_half_up,
)
from .utils import hash_djb2, pct

logger = logging.getLogger(__name__)


def analyze_content_difference(
    initial_text: str | None,
    final_text: str | None,
    options: AnalysisOptions | None = None,
) -> ContentAnalysis:
    """
    Compare the text crawlers see with the text users see.

    Args:
        initial_text: Plain text of the initial HTML (what crawlers see)
        final_text: Plain text of the rendered HTML (what users see)
        options: Analysis options; ignore_nav_footer is recorded as-is since
            filtering already happened upstream

    Returns:
        ContentAnalysis with word and line diffs and derived metrics
    """
    options = options or AnalysisOptions()
    initial_text = initial_text or ""
    final_text = final_text or ""

    initial_length = len(initial_text)
    final_length = len(final_text)
    text_retention = initial_length / final_length if final_length > 0 else 0.0

    word_diff = generate_diff_report(initial_text, final_text, TokenMode.WORD)
    line_diff = generate_diff_report(initial_text, final_text, TokenMode.LINE)

    initial_count = word_diff.initial_token_count
    final_count = word_diff.final_token_count

    content_gain = final_count / initial_count if initial_count > 0 else 1.0
    missing_words = abs(final_count - initial_count)
    # An empty initial text has no base to measure against
    if initial_count == 0:
        citation_readability = 100.0
    else:
        citation_readability = calculate_citation_readability(initial_count, final_count)

    logger.debug(
        "Compared %d -> %d words (%s)", initial_count, final_count, word_diff.summary
    )

    metrics = Metrics(
        content_gain=round_half_up(content_gain, 1),
        missing_words=missing_words,
        citation_readability=int(round_half_up(citation_readability)),
        similarity=word_diff.similarity,
        word_count=WordCount(
            initial=initial_count,
            final=final_count,
            difference=final_count - initial_count,
        ),
    )

    return ContentAnalysis(
        initial_text=initial_text,
        final_text=final_text,
        initial_text_length=initial_length,
        final_text_length=final_length,
        text_retention=text_retention,
        text_retention_percent=pct(text_retention),
        word_diff=word_diff,
        line_diff=line_diff,
        initial_text_hash=hash_djb2(initial_text),
        final_text_hash=hash_djb2(final_text),
        metrics=metrics,
        ignore_nav_footer=options.ignore_nav_footer,
    )


def calculate_citation_readability(initial_word_count: int, final_word_count: int) -> float:
    """
    How much of the final content's volume the initial content represents.

    Returns 100 when there is no final content, since nothing can be missed.
    An empty initial text against non-empty final content scores 0 here;
    analyze_content_difference reports that case as 100 instead.

    Args:
        initial_word_count: Word count of the initial text
        final_word_count: Word count of the final text

    Returns:
        Score between 0 and 100
    """
    if final_word_count == 0:
        return 100.0
    return min(100.0, (initial_word_count / final_word_count) * 100)


def analyze_both_scenarios(
    text1_with_nav: str | None,
    text1_without_nav: str | None,
    text2_with_nav: str | None,
    text2_without_nav: str | None,
) -> ScenarioComparison:
    """
    Run the analysis on texts filtered with and without navigation/footer.

    Args:
        text1_with_nav: Initial text, navigation and footer kept
        text1_without_nav: Initial text, navigation and footer removed
        text2_with_nav: Final text, navigation and footer kept
        text2_without_nav: Final text, navigation and footer removed
    """
    return ScenarioComparison(
        with_nav_footer_ignored=analyze_content_difference(
            text1_without_nav, text2_without_nav, AnalysisOptions(ignore_nav_footer=True)
        ),
        without_nav_footer_ignored=analyze_content_difference(
            text1_with_nav, text2_with_nav, AnalysisOptions(ignore_nav_footer=False)
        ),
    )


def normalize_content_gain(content_gain: float, policy: ScoringPolicy = DEFAULT_POLICY) -> float:
    """Map content gain onto 0-100: 1x scores 100, 3x and above score 0."""
    return min(100.0, max(0.0, 100 - (content_gain - 1) * policy.gain_penalty_slope))


def generate_visibility_score(
    metrics: Metrics | ContentAnalysis, policy: ScoringPolicy = DEFAULT_POLICY
) -> VisibilityScore:
    """
    Weighted composite of readability, similarity and content gain.

    Args:
        metrics: Metrics, or a ContentAnalysis carrying them
        policy: Weights and category cutoffs

    Returns:
        VisibilityScore with category, description and breakdown
    """
    if isinstance(metrics, ContentAnalysis):
        metrics = metrics.metrics

    normalized_gain = normalize_content_gain(metrics.content_gain, policy)
    weighted_score = (
        metrics.citation_readability * policy.readability_weight
        + metrics.similarity * policy.similarity_weight
        + normalized_gain * policy.content_gain_weight
    )
    score = int(round_half_up(weighted_score))
    category = policy.categorize(score)

    return VisibilityScore(
        score=score,
        category=category,
        description=category.description,
        breakdown=ScoreBreakdown(
            citation_readability=metrics.citation_readability,
            similarity=metrics.similarity,
            content_gain=normalized_gain,
        ),
    )


# (condition, message) pairs, evaluated in order; every match is reported.
RecommendationRule = tuple[Callable[[Metrics, ScoringPolicy], bool], str]

RECOMMENDATION_RULES: list[RecommendationRule] = [
    (
        lambda m, p: m.citation_readability < p.low_readability,
        "Consider implementing server-side rendering (SSR) to improve content "
        "visibility for AI crawlers",
    ),
    (
        lambda m, p: m.content_gain > p.heavy_gain,
        "Significant content is loaded via JavaScript - ensure critical content "
        "is present in initial HTML",
    ),
    (
        lambda m, p: m.missing_words > p.large_gap_words,
        "Large amount of content is missing from initial HTML - review your "
        "content loading strategy",
    ),
    (
        lambda m, p: m.citation_readability >= p.healthy_readability
        and m.content_gain < p.healthy_gain,
        "Great job! Your content is well-optimized for AI visibility and citations",
    ),
]


def generate_recommendations(
    metrics: Metrics, policy: ScoringPolicy = DEFAULT_POLICY
) -> list[str]:
    """Recommendations for every rule the metrics trigger, in rule order."""
    return [message for condition, message in RECOMMENDATION_RULES if condition(metrics, policy)]
