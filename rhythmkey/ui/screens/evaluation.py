"""Evaluation screen: replay a suite of synthetic tap sequences with progress."""

import asyncio

from loguru import logger
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, DataTable, Label, ProgressBar, Static

from rhythmkey.core.evaluation import Evaluator
from rhythmkey.suites.standard import StandardSuites


class EvaluationScreen(Screen):
    """Screen for running an evaluation suite with real-time progress."""

    CSS = """
    EvaluationScreen {
        align: center middle;
    }

    #evaluation-container {
        width: 90;
        height: auto;
        border: solid $primary;
        padding: 2;
        background: $panel;
    }

    .evaluation-title {
        text-align: center;
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    ProgressBar {
        margin: 1 0;
    }

    DataTable {
        height: 20;
        margin: 1 0;
    }

    .status-message {
        margin: 1 0;
        text-align: center;
    }
    """

    def __init__(self, suite_name: str = "all", n_taps: int = 16):
        super().__init__()
        self.suite_name = suite_name
        self.n_taps = n_taps
        self.results = []

    def compose(self) -> ComposeResult:
        with Container(id="evaluation-container"):
            yield Label(f"Evaluating: {self.suite_name.title()}", classes="evaluation-title")

            yield ProgressBar(id="progress-bar", total=100)
            yield Static("Initializing...", id="status-message", classes="status-message")

            table = DataTable(id="results-table")
            table.add_columns("Sequence", "Expected", "Estimate", "Confidence", "Settled", "Pass")
            yield table

            yield Button("Back", variant="primary", id="back")

    async def on_mount(self) -> None:
        await self.run_evaluation()

    async def run_evaluation(self) -> None:
        logger.info(f"Starting evaluation for suite: {self.suite_name}")
        status = self.query_one("#status-message", Static)
        try:
            status.update("Generating tap sequences...")
            sequences = StandardSuites.get_suite(self.suite_name, n_taps=self.n_taps)

            progress = self.query_one("#progress-bar", ProgressBar)
            progress.update(total=len(sequences))
            table = self.query_one("#results-table", DataTable)

            for idx, sequence in enumerate(sequences):
                status.update(f"Replaying {idx + 1}/{len(sequences)}: {sequence.name}")

                _, metrics = Evaluator.evaluate_sequence(sequence.sequence_def)
                self.results.append((sequence.name, metrics))

                table.add_row(
                    sequence.name,
                    f"{sequence.sequence_def.metadata.bpm:.1f}",
                    f"{metrics.final_bpm:.1f}",
                    f"{metrics.final_confidence:.2f}",
                    str(metrics.settled_after_taps or "-"),
                    "✓" if metrics.passed else "✗",
                )
                progress.update(progress=idx + 1)

                # Allow UI to update
                await asyncio.sleep(0.05)

            passed = sum(1 for _, m in self.results if m.passed)
            logger.success(f"Evaluation complete: {passed}/{len(self.results)} passed")
            status.update(f"Evaluation complete: {passed}/{len(self.results)} passed.")

        except Exception as e:
            logger.exception(f"Evaluation failed: {e}")
            status.update(f"Error during evaluation: {e}")
            self.notify(f"Evaluation failed: {e}", severity="error")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.app.pop_screen()
