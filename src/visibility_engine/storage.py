"""
Storage layer for persisting job results.

Provides abstract interface for storage backends and file-based implementations
for CSV and JSON export.
"""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

from .models import JobResult, PairAnalysis


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class Storage(ABC):
    """Abstract interface for storage backends."""

    @abstractmethod
    def save(self, result: JobResult, format: str = "csv", output_path: str | None = None) -> str:
        """
        Save job results to storage.

        Args:
            result: JobResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file (for file storage) or identifier

        Raises:
            StorageError: If save operation fails
        """
        pass


class FileStorage(Storage):
    """
    File-based storage implementation.

    Exports results to CSV or JSON files.
    """

    def __init__(self, output_directory: str = "."):
        """
        Initialize file storage.

        Args:
            output_directory: Directory to save output files (default: current directory)
        """
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

    def save(self, result: JobResult, format: str = "csv", output_path: str | None = None) -> str:
        """
        Save job results to file.

        Args:
            result: JobResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file name. If not provided, generates one.

        Returns:
            Path to the saved file

        Raises:
            StorageError: If save operation fails
        """
        format_lower = format.lower()

        if format_lower not in ("csv", "json"):
            raise StorageError(f"Unsupported format: {format}. Use 'csv' or 'json'.")

        if output_path is None:
            timestamp = result.started_at.strftime("%Y%m%d_%H%M%S")
            output_path = f"visibility_results_{timestamp}.{format_lower}"

        output_file_path = self.output_directory / output_path

        try:
            if format_lower == "csv":
                self._save_csv(result, output_file_path)
            else:
                self._save_json(result, output_file_path)

            return str(output_file_path)

        except Exception as e:
            raise StorageError(f"Failed to save results: {str(e)}") from e

    def _save_csv(self, result: JobResult, output_path: Path):
        """
        Save results to CSV format.

        Includes summary comment lines and one row per page pair.
        """
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            csvfile.write("# HTML Visibility Report\n")
            csvfile.write(f"# Generated: {result.finished_at}\n")
            csvfile.write(f"# Pairs Processed: {result.pairs_processed}\n")
            csvfile.write(f"# Pairs Succeeded: {result.pairs_succeeded}\n")
            csvfile.write(f"# Pairs Failed: {result.pairs_failed}\n")
            csvfile.write(f"# Average Score: {result.average_score}\n")
            csvfile.write("\n")

            fieldnames = [
                "Name",
                "Initial File",
                "Rendered File",
                "Initial Word Count",
                "Final Word Count",
                "Content Gain",
                "Missing Words",
                "Citation Readability (%)",
                "Similarity (%)",
                "Score",
                "Category",
                "Recommendations",
                "Success",
                "Errors",
            ]

            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()

            for analysis in result.results:
                data = analysis.to_dict()
                writer.writerow(
                    {
                        "Name": data["name"],
                        "Initial File": data["initial_path"],
                        "Rendered File": data["rendered_path"],
                        "Initial Word Count": data["initial_word_count"],
                        "Final Word Count": data["final_word_count"],
                        "Content Gain": data["content_gain"],
                        "Missing Words": data["missing_words"],
                        "Citation Readability (%)": data["citation_readability"],
                        "Similarity (%)": data["similarity"],
                        "Score": data["score"],
                        "Category": data["category"],
                        "Recommendations": " | ".join(data["recommendations"]),
                        "Success": "Yes" if analysis.success else "No",
                        "Errors": self._format_errors(analysis),
                    }
                )

    def _save_json(self, result: JobResult, output_path: Path):
        """
        Save results to JSON format.

        Includes hashes and diff summaries for programmatic access.
        """
        data = {
            "metadata": {
                "started_at": result.started_at.isoformat(),
                "finished_at": result.finished_at.isoformat() if result.finished_at else None,
                "pairs_processed": result.pairs_processed,
                "pairs_succeeded": result.pairs_succeeded,
                "pairs_failed": result.pairs_failed,
                "success_rate": result.success_rate,
                "average_score": result.average_score,
            },
            "results": [],
        }

        for analysis in result.results:
            analysis_dict = analysis.to_dict()

            if analysis.analysis:
                analysis_dict["analysis"] = analysis.analysis.to_dict()

            data["results"].append(analysis_dict)

        with open(output_path, "w", encoding="utf-8") as jsonfile:
            json.dump(data, jsonfile, indent=2, ensure_ascii=False)

    def _format_errors(self, analysis: PairAnalysis) -> str:
        """Join all errors of an analysis into one string."""
        all_errors = []

        if analysis.read_errors:
            all_errors.extend([f"Read: {e}" for e in analysis.read_errors])
        if analysis.analysis_errors:
            all_errors.extend([f"Analysis: {e}" for e in analysis.analysis_errors])

        return "; ".join(all_errors)
