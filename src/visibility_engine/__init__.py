"""
HTML Visibility Analyzer engine.

Compares the text crawlers see in initial HTML with the text users see after
client-side rendering, and scores how visible the content is. Designed to be
reusable by the CLI and other callers.
"""

from .analyzer import (
    analyze_both_scenarios,
    analyze_content_difference,
    calculate_citation_readability,
    generate_recommendations,
    generate_visibility_score,
)
from .differ import (
    calculate_similarity,
    diff_tokens,
    generate_diff_report,
    generate_html_diff,
)
from .html_filter import extract_word_count, filter_html_content, strip_tags_to_text
from .job_runner import JobRunner
from .models import (
    DEFAULT_POLICY,
    AnalysisOptions,
    CitationReadiness,
    ContentAnalysis,
    DiffKind,
    DiffOperation,
    DiffReport,
    InvalidModeError,
    JobResult,
    Metrics,
    PagePair,
    PairAnalysis,
    QuickComparison,
    ScenarioComparison,
    ScoringPolicy,
    TokenMode,
    VisibilityCategory,
    VisibilityReport,
    VisibilityScore,
    WordCount,
)
from .pipeline import (
    analyze_html_both_scenarios,
    analyze_visibility,
    get_citation_readiness,
    quick_compare,
)
from .tokenizer import count_lines, count_words, normalize_text, tokenize
from .utils import format_number_to_k, hash_djb2, pct

__all__ = [
    # Models
    "AnalysisOptions",
    "CitationReadiness",
    "ContentAnalysis",
    "DEFAULT_POLICY",
    "DiffKind",
    "DiffOperation",
    "DiffReport",
    "InvalidModeError",
    "JobResult",
    "Metrics",
    "PagePair",
    "PairAnalysis",
    "QuickComparison",
    "ScenarioComparison",
    "ScoringPolicy",
    "TokenMode",
    "VisibilityCategory",
    "VisibilityReport",
    "VisibilityScore",
    "WordCount",
    # Tokenizer
    "tokenize",
    "normalize_text",
    "count_words",
    "count_lines",
    # Differ
    "diff_tokens",
    "generate_diff_report",
    "calculate_similarity",
    "generate_html_diff",
    # Analyzer
    "analyze_content_difference",
    "calculate_citation_readability",
    "analyze_both_scenarios",
    "generate_visibility_score",
    "generate_recommendations",
    # HTML filter
    "filter_html_content",
    "strip_tags_to_text",
    "extract_word_count",
    # Pipeline
    "analyze_visibility",
    "quick_compare",
    "get_citation_readiness",
    "analyze_html_both_scenarios",
    # Utilities
    "hash_djb2",
    "pct",
    "format_number_to_k",
    # Batch entry point
    "JobRunner",
]
