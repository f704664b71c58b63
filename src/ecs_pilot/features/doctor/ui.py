"""UI components for environment diagnostics."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...core.base import BaseUIComponent
from ...core.utils import show_spinner
from .doctor import CheckResult, CheckStatus, DoctorService

console = Console()

_STATUS_DISPLAY = {
    CheckStatus.PASSED: ("✅", "green"),
    CheckStatus.WARNING: ("⚠️", "yellow"),
    CheckStatus.FAILED: ("❌", "red"),
}


class DoctorUI(BaseUIComponent):
    def __init__(self, doctor_service: DoctorService) -> None:
        super().__init__()
        self.doctor_service = doctor_service

    def run(self) -> list[CheckResult]:
        with show_spinner("Running checks..."):
            results = self.doctor_service.run_checks()
        self.display_results(results)
        return results

    def display_results(self, results: list[CheckResult]) -> None:
        table = Table(title="🏥 Environment diagnostics", show_header=True, header_style="bold magenta")
        table.add_column("Check", style="cyan")
        table.add_column("Status")
        table.add_column("Details", style="white")

        for result in results:
            icon, style = _STATUS_DISPLAY[result.status]
            table.add_row(result.name, f"[{style}]{icon} {result.status.value}[/{style}]", result.message)

        console.print(table)

        failed = sum(1 for result in results if result.status is CheckStatus.FAILED)
        warnings = sum(1 for result in results if result.status is CheckStatus.WARNING)
        passed = len(results) - failed - warnings
        summary_style = "red" if failed else "yellow" if warnings else "green"
        console.print(f"{passed} passed, {warnings} warnings, {failed} failed", style=summary_style)
