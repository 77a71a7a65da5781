"""
HTML summary report for a checked batch.

One table row per result, grouped by submission. The first row of a group
carries the submission name and the group color, the second row carries the
"Total X of Y" label without color, later rows carry neither.
"""

from datetime import datetime
from html import escape
from pathlib import Path
from string import Template
from typing import Iterable

from .config import (
    ERROR_MARKERS,
    NO_DATA_CSS_CLASS,
    PARTIAL_CSS_CLASS,
    REPORT_FILENAME,
    REPORT_TIMESTAMP_FORMAT,
    SUCCESS_CSS_CLASS,
)
from .evaluator import is_error_message
from .models import AggregateReport, ReportLabels, ReportRow, TaskResult

REPORT_TEMPLATE = Template("""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>$title</title>
<style>
body { font-family: sans-serif; margin: 20px; color: #2c3e50; }
table { border-collapse: collapse; }
td { border: 1px solid #bdc3c7; padding: 6px 12px; text-align: left; }
.green { background-color: #d5f5e3; }
.yellow { background-color: #fcf3cf; }
.black { background-color: #2c3e50; color: white; }
</style>
</head>
<body>
<h2>$title: $directory</h2>
<p>$timestamp</p>
<table>
$rows
</table>
</body>
</html>
""")

ROW_TEMPLATE = Template(
    '<tr class="$css_class"><td>$label</td><td>$task</td><td>$status</td><td>$time</td></tr>'
)


class ReportBuilder:
    """
    Renders an AggregateReport as an HTML document.
    """

    def __init__(
        self,
        labels: ReportLabels | None = None,
        error_markers: Iterable[str] = ERROR_MARKERS,
    ) -> None:
        """
        Initialize the report builder.

        Args:
            labels: Localized words used in the report.
            error_markers: Substrings that mark a result as failed.
        """
        self.labels = labels or ReportLabels()
        self.error_markers = tuple(error_markers)

    def passed(self, results: list[TaskResult]) -> int:
        """Number of results whose diagnostic text holds no error marker."""
        return sum(1 for r in results if not is_error_message(r.error, self.error_markers))

    def css_class(self, results: list[TaskResult]) -> str:
        passed = self.passed(results)
        if passed == len(results):
            return SUCCESS_CSS_CLASS
        if passed == 0:
            return NO_DATA_CSS_CLASS
        return PARTIAL_CSS_CLASS

    def rows(self, aggregate: AggregateReport) -> list[ReportRow]:
        """
        Build the table rows, submissions in alphabetical order.

        Args:
            aggregate: Results keyed by submission name.

        Returns:
            Rows in display order.
        """
        rows: list[ReportRow] = []
        for name in sorted(aggregate):
            results = aggregate[name]
            passed = self.passed(results)
            css_class = self.css_class(results)

            for counter, result in enumerate(results):
                label = ""
                if counter == 0:
                    label = result.name
                elif counter == 1:
                    css_class = ""
                    label = self.labels.total.format(passed=passed, total=len(results))

                is_error = is_error_message(result.error, self.error_markers)
                rows.append(
                    ReportRow(
                        css_class=css_class,
                        label=label,
                        task=result.task,
                        status=self.labels.error if is_error else self.labels.complete,
                        time=result.time,
                    )
                )
        return rows

    def render(
        self,
        aggregate: AggregateReport,
        context_label: str,
        generated_at: datetime | None = None,
    ) -> str:
        """
        Render the full HTML document.

        Args:
            aggregate: Results keyed by submission name.
            context_label: Name of the checked batch, shown in the heading.
            generated_at: Timestamp shown in the report. Defaults to now.

        Returns:
            The HTML document.
        """
        generated_at = generated_at or datetime.now()
        body = "\n".join(
            ROW_TEMPLATE.substitute(
                css_class=escape(row.css_class),
                label=escape(row.label),
                task=escape(row.task),
                status=escape(row.status),
                time=escape(row.time),
            )
            for row in self.rows(aggregate)
        )
        return REPORT_TEMPLATE.substitute(
            title=escape(self.labels.title),
            directory=escape(context_label),
            timestamp=generated_at.strftime(REPORT_TIMESTAMP_FORMAT),
            rows=body,
        )

    def write(
        self,
        aggregate: AggregateReport,
        root_dir: Path,
        generated_at: datetime | None = None,
    ) -> Path | None:
        """
        Render the report and write it into the batch root directory.

        An existing report is overwritten. Write failures are reported as a
        warning and do not raise.

        Args:
            aggregate: Results keyed by submission name.
            root_dir: Batch root directory; its name is the report title.
            generated_at: Timestamp shown in the report. Defaults to now.

        Returns:
            Path of the written report, or None if it could not be written.
        """
        root_dir = root_dir.resolve()
        report_path = root_dir / REPORT_FILENAME
        document = self.render(aggregate, root_dir.name, generated_at)
        try:
            report_path.write_text(document, encoding="utf-8")
        except OSError as e:
            print(f"  Warning: Failed to write {report_path}: {e}")
            return None
        return report_path
