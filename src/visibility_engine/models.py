"""
Core data models for the HTML visibility analyzer.

All models are pure data structures created fresh for every comparison and
discarded once the caller has consumed them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import total_ordering

from .utils import format_number_to_k


class InvalidModeError(ValueError):
    """Raised when an unsupported tokenization mode is requested."""

    pass


class TokenMode(str, Enum):
    """Granularity of comparison units."""

    WORD = "word"
    LINE = "line"

    @classmethod
    def parse(cls, mode: "TokenMode | str") -> "TokenMode":
        """
        Resolve a mode given as an enum member or its string value.

        Raises:
            InvalidModeError: If the mode is not one of 'word' or 'line'
        """
        if isinstance(mode, cls):
            return mode
        try:
            return cls(mode)
        except ValueError:
            raise InvalidModeError(
                f"Unsupported tokenization mode: {mode!r}. Use 'word' or 'line'."
            ) from None


class DiffKind(str, Enum):
    """Classification of a token in an aligned diff."""

    SAME = "same"
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class DiffOperation:
    """A single token tagged with how it aligns between the two texts."""

    kind: DiffKind
    text: str


def similarity_from_counts(common: int, first_total: int, second_total: int) -> float:
    """
    Similarity percentage from an LCS length and both token counts.

    Identical sequences (both empty included) score 100, sequences with no
    common subsequence score 0.
    """
    if common == first_total == second_total:
        return 100.0
    if common == 0:
        return 0.0
    return round_half_up(2 * common / (first_total + second_total) * 100, 1)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves away from zero for non-negative values."""
    factor = 10**digits
    return int(value * factor + 0.5) / factor


@dataclass
class DiffReport:
    """
    Aggregate view over an aligned diff.

    Counts of each operation kind plus the token totals of both inputs.
    """

    operations: list[DiffOperation]
    same: int
    added: int
    removed: int
    summary: str  # "Added: A • Removed: R • Same: S"
    initial_token_count: int
    final_token_count: int

    @property
    def similarity(self) -> float:
        """Similarity percentage implied by the number of aligned tokens."""
        return similarity_from_counts(
            self.same, self.initial_token_count, self.final_token_count
        )

    def to_dict(self) -> dict:
        return {
            "operations": [{"kind": op.kind.value, "text": op.text} for op in self.operations],
            "same": self.same,
            "added": self.added,
            "removed": self.removed,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class WordCount:
    """Token counts of both texts."""

    initial: int
    final: int
    difference: int  # final - initial


@dataclass(frozen=True)
class Metrics:
    """
    Interpretable numbers derived from a comparison.

    content_gain is rounded to one decimal, citation_readability to an
    integer and similarity to one decimal.
    """

    content_gain: float
    missing_words: int
    citation_readability: int
    similarity: float
    word_count: WordCount

    @property
    def content_gain_formatted(self) -> str:
        """Content gain as a multiplier, e.g. '2.5x'."""
        gain = self.content_gain
        return f"{int(gain) if gain == int(gain) else gain}x"

    @property
    def missing_words_formatted(self) -> str:
        """Missing words in K/M notation."""
        return format_number_to_k(self.missing_words)

    def to_dict(self) -> dict:
        return {
            "content_gain": self.content_gain,
            "content_gain_formatted": self.content_gain_formatted,
            "missing_words": self.missing_words,
            "missing_words_formatted": self.missing_words_formatted,
            "citation_readability": self.citation_readability,
            "similarity": self.similarity,
            "word_count": {
                "initial": self.word_count.initial,
                "final": self.word_count.final,
                "difference": self.word_count.difference,
            },
        }


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Options for an analysis.

    ignore_nav_footer is only consumed by the HTML filter upstream of the
    text comparison.
    """

    ignore_nav_footer: bool = True


@dataclass
class ContentAnalysis:
    """
    Complete comparison of an initial (crawler) text and a final (user) text.
    """

    initial_text: str
    final_text: str
    initial_text_length: int
    final_text_length: int
    text_retention: float  # initial length / final length, by characters
    text_retention_percent: str
    word_diff: DiffReport
    line_diff: DiffReport
    initial_text_hash: str
    final_text_hash: str
    metrics: Metrics
    ignore_nav_footer: bool = True

    def to_dict(self) -> dict:
        """
        Convert analysis to dictionary for serialization.

        Diff operations are left out; only their summaries are included.
        """
        return {
            "initial_text_length": self.initial_text_length,
            "final_text_length": self.final_text_length,
            "text_retention": self.text_retention,
            "text_retention_percent": self.text_retention_percent,
            "word_diff": self.word_diff.summary,
            "line_diff": self.line_diff.summary,
            "initial_text_hash": self.initial_text_hash,
            "final_text_hash": self.final_text_hash,
            "ignore_nav_footer": self.ignore_nav_footer,
            "metrics": self.metrics.to_dict(),
        }


@total_ordering
class VisibilityCategory(Enum):
    """Ordered qualitative bands of the visibility score."""

    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return list(VisibilityCategory).index(self)

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self]

    def __lt__(self, other):
        if not isinstance(other, VisibilityCategory):
            return NotImplemented
        return self.rank < other.rank


CATEGORY_DESCRIPTIONS = {
    VisibilityCategory.EXCELLENT: "Excellent - AI models can easily read and cite your content",
    VisibilityCategory.GOOD: "Good - Most of your content is visible to AI models",
    VisibilityCategory.FAIR: "Fair - Some content may be missed by AI crawlers",
    VisibilityCategory.POOR: "Poor - Significant content is hidden from AI models",
}


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Tunable policy behind the visibility score and recommendations.

    The defaults reproduce the published scoring behavior.
    """

    readability_weight: float = 0.5
    similarity_weight: float = 0.3
    content_gain_weight: float = 0.2
    gain_penalty_slope: float = 50.0  # points lost per 1x of gain above 1x
    excellent_cutoff: int = 90
    good_cutoff: int = 70
    fair_cutoff: int = 50

    # Recommendation thresholds
    low_readability: float = 50.0
    heavy_gain: float = 3.0
    large_gap_words: int = 1000
    healthy_readability: float = 80.0
    healthy_gain: float = 1.5

    def categorize(self, score: int) -> VisibilityCategory:
        """Map a score onto its category using inclusive lower bounds."""
        if score >= self.excellent_cutoff:
            return VisibilityCategory.EXCELLENT
        if score >= self.good_cutoff:
            return VisibilityCategory.GOOD
        if score >= self.fair_cutoff:
            return VisibilityCategory.FAIR
        return VisibilityCategory.POOR


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class ScoreBreakdown:
    """The three weighted inputs of a visibility score."""

    citation_readability: float
    similarity: float
    content_gain: float  # normalized gain score, 0-100


@dataclass(frozen=True)
class VisibilityScore:
    """Composite 0-100 score with its category."""

    score: int
    category: VisibilityCategory
    description: str
    breakdown: ScoreBreakdown

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "category": self.category.value,
            "description": self.description,
            "breakdown": {
                "citation_readability": self.breakdown.citation_readability,
                "similarity": self.breakdown.similarity,
                "content_gain": self.breakdown.content_gain,
            },
        }


@dataclass
class ScenarioComparison:
    """The same comparison run with and without navigation/footer filtering."""

    with_nav_footer_ignored: ContentAnalysis
    without_nav_footer_ignored: ContentAnalysis

    def to_dict(self) -> dict:
        return {
            "with_nav_footer_ignored": self.with_nav_footer_ignored.metrics.to_dict(),
            "without_nav_footer_ignored": self.without_nav_footer_ignored.metrics.to_dict(),
        }


@dataclass
class VisibilityReport:
    """Full analysis of two HTML documents, optionally scored."""

    analysis: ContentAnalysis
    visibility_score: VisibilityScore | None = None

    @property
    def metrics(self) -> Metrics:
        return self.analysis.metrics

    def to_dict(self) -> dict:
        data = self.analysis.to_dict()
        if self.visibility_score is not None:
            data["visibility_score"] = self.visibility_score.to_dict()
        return data


@dataclass(frozen=True)
class QuickComparison:
    """Headline numbers of a comparison without diff details."""

    word_count: WordCount
    content_gain: float
    missing_words: int
    similarity: float


@dataclass
class CitationReadiness:
    """Score, category and actionable recommendations for a page."""

    score: int
    category: VisibilityCategory
    description: str
    metrics: Metrics
    recommendations: list[str]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "category": self.category.value,
            "description": self.description,
            "metrics": self.metrics.to_dict(),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class PagePair:
    """
    An initial (crawler) and rendered (user) HTML file to compare.

    Frozen to ensure immutability once created.
    """

    name: str
    initial_path: str
    rendered_path: str

    def __post_init__(self):
        """Validate paths."""
        for label, path in (("initial", self.initial_path), ("rendered", self.rendered_path)):
            if not path or not isinstance(path, str):
                raise ValueError(f"{label} path must be a non-empty string: {path}")
        if not self.name:
            raise ValueError("Page pair name must be non-empty")


@dataclass
class PairAnalysis:
    """
    Complete analysis for a single page pair.

    Combines the comparison, its score and any errors collected on the way.
    """

    name: str
    initial_path: str
    rendered_path: str
    analysis: ContentAnalysis | None
    visibility_score: VisibilityScore | None
    recommendations: list[str] = field(default_factory=list)

    # Errors
    read_errors: list[str] = field(default_factory=list)
    analysis_errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if analysis completed successfully."""
        return (
            len(self.read_errors) == 0
            and len(self.analysis_errors) == 0
            and self.analysis is not None
        )

    def to_dict(self) -> dict:
        """
        Convert analysis to dictionary for serialization.

        Used for JSON/CSV export.
        """
        metrics = self.analysis.metrics if self.analysis else None
        score = self.visibility_score

        return {
            "name": self.name,
            "initial_path": self.initial_path,
            "rendered_path": self.rendered_path,
            "initial_word_count": metrics.word_count.initial if metrics else 0,
            "final_word_count": metrics.word_count.final if metrics else 0,
            "content_gain": metrics.content_gain if metrics else 0.0,
            "missing_words": metrics.missing_words if metrics else 0,
            "citation_readability": metrics.citation_readability if metrics else 0,
            "similarity": metrics.similarity if metrics else 0.0,
            "score": score.score if score else 0,
            "category": score.category.value if score else "",
            "recommendations": list(self.recommendations),
            "read_errors": self.read_errors,
            "analysis_errors": self.analysis_errors,
            "success": self.success,
        }


@dataclass
class JobResult:
    """
    Complete results for a batch of page pairs.

    Represents the full output of a job run.
    """

    started_at: datetime
    finished_at: datetime | None
    pairs_processed: int
    pairs_succeeded: int
    pairs_failed: int
    results: list[PairAnalysis]

    @property
    def success_rate(self) -> float:
        """Percentage of pairs processed successfully."""
        if self.pairs_processed == 0:
            return 0.0
        return round((self.pairs_succeeded / self.pairs_processed) * 100, 2)

    @property
    def average_score(self) -> float:
        """Mean visibility score over successful pairs."""
        scores = [r.visibility_score.score for r in self.results if r.visibility_score]
        if not scores:
            return 0.0
        return round(sum(scores) / len(scores), 1)

    def get_failed_analyses(self) -> list[PairAnalysis]:
        """Get all analyses that failed."""
        return [result for result in self.results if not result.success]

    def get_analyses_below(self, category: VisibilityCategory) -> list[PairAnalysis]:
        """Get successful analyses scored strictly below a category."""
        return [
            result
            for result in self.results
            if result.visibility_score and result.visibility_score.category < category
        ]
