"""
Job runner for analyzing many page pairs.

Each pair is an independent comparison, so pairs are processed concurrently,
one worker thread per comparison.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path

from .analyzer import (
    analyze_content_difference,
    generate_recommendations,
    generate_visibility_score,
)
from .html_filter import strip_tags_to_text
from .models import (
    DEFAULT_POLICY,
    AnalysisOptions,
    JobResult,
    PagePair,
    PairAnalysis,
    ScoringPolicy,
)

logger = logging.getLogger(__name__)


class JobRunner:
    """
    Orchestrates the full pipeline for a batch of page pairs.

    Reads both files of a pair, filters markup, compares the texts and
    scores the result.
    """

    def __init__(
        self,
        max_concurrency: int = 3,
        ignore_nav_footer: bool = True,
        plain_text: bool = False,
        policy: ScoringPolicy = DEFAULT_POLICY,
    ):
        """
        Initialize the job runner.

        Args:
            max_concurrency: Maximum number of pairs analyzed concurrently
            ignore_nav_footer: Whether to remove navigation/footer elements
            plain_text: Treat input files as plain text instead of HTML
            policy: Scoring policy for visibility scores and recommendations
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1: {max_concurrency}")

        self.max_concurrency = max_concurrency
        self.options = AnalysisOptions(ignore_nav_footer=ignore_nav_footer)
        self.plain_text = plain_text
        self.policy = policy

    async def run_job_async(self, pairs: list[PagePair]) -> JobResult:
        """
        Run a job asynchronously.

        Args:
            pairs: Page pairs to analyze

        Returns:
            JobResult containing all analyses
        """
        started_at = datetime.now()

        unique_pairs = self._deduplicate(pairs)
        logger.debug("Analyzing %d page pairs", len(unique_pairs))

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [self._process_pair(pair, semaphore) for pair in unique_pairs]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        analyses: list[PairAnalysis] = []
        for pair, result in zip(unique_pairs, results):
            if isinstance(result, Exception):
                logger.debug("Pair %s failed unexpectedly: %s", pair.name, result)
                analyses.append(
                    PairAnalysis(
                        name=pair.name,
                        initial_path=pair.initial_path,
                        rendered_path=pair.rendered_path,
                        analysis=None,
                        visibility_score=None,
                        analysis_errors=[f"Unexpected error: {str(result)}"],
                    )
                )
            else:
                analyses.append(result)

        finished_at = datetime.now()

        pairs_succeeded = sum(1 for analysis in analyses if analysis.success)

        return JobResult(
            started_at=started_at,
            finished_at=finished_at,
            pairs_processed=len(unique_pairs),
            pairs_succeeded=pairs_succeeded,
            pairs_failed=len(analyses) - pairs_succeeded,
            results=analyses,
        )

    def run_job(self, pairs: list[PagePair]) -> JobResult:
        """
        Run a job synchronously.

        Convenience method that wraps run_job_async.
        """
        return asyncio.run(self.run_job_async(pairs))

    def analyze_pair(self, pair: PagePair) -> PairAnalysis:
        """
        Read, compare and score a single pair.

        Read and analysis failures are recorded on the result rather than
        raised.
        """
        read_errors: list[str] = []
        analysis_errors: list[str] = []

        initial_content = self._read(pair.initial_path, read_errors)
        rendered_content = self._read(pair.rendered_path, read_errors)

        analysis = None
        visibility_score = None
        recommendations: list[str] = []

        if not read_errors:
            try:
                analysis = analyze_content_difference(
                    self._to_text(initial_content),
                    self._to_text(rendered_content),
                    self.options,
                )
                visibility_score = generate_visibility_score(analysis.metrics, self.policy)
                recommendations = generate_recommendations(analysis.metrics, self.policy)
            except Exception as e:
                analysis_errors.append(f"Content comparison failed: {str(e)}")

        return PairAnalysis(
            name=pair.name,
            initial_path=pair.initial_path,
            rendered_path=pair.rendered_path,
            analysis=analysis,
            visibility_score=visibility_score,
            recommendations=recommendations,
            read_errors=read_errors,
            analysis_errors=analysis_errors,
        )

    def _deduplicate(self, pairs: list[PagePair]) -> list[PagePair]:
        """Drop pairs whose name was already seen, keeping input order."""
        seen: set[str] = set()
        unique: list[PagePair] = []

        for pair in pairs:
            if pair.name in seen:
                logger.debug("Skipping duplicate pair %s", pair.name)
                continue
            seen.add(pair.name)
            unique.append(pair)

        return unique

    async def _process_pair(self, pair: PagePair, semaphore: asyncio.Semaphore) -> PairAnalysis:
        """
        Process a single pair in a worker thread.

        Args:
            pair: Pair to process
            semaphore: Semaphore for concurrency control
        """
        async with semaphore:
            return await asyncio.to_thread(self.analyze_pair, pair)

    def _read(self, path: str, errors: list[str]) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            errors.append(f"File not found: {path}")
        except (OSError, UnicodeDecodeError) as e:
            errors.append(f"Could not read {path}: {str(e)}")
        return ""

    def _to_text(self, content: str) -> str:
        if self.plain_text:
            return content
        return strip_tags_to_text(content, self.options.ignore_nav_footer)
