"""
RhythmKey - Main Textual Application

Terminal tap tempo: tap the space bar along with the music and read the
estimated BPM, its half/double time, and related keys.
"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from rhythmkey.core.metronome import MetronomeScheduler
from rhythmkey.core.session import TapSession
from rhythmkey.presets import SessionConfig

from .screens.evaluation import EvaluationScreen
from .screens.tap import TapScreen


class RhythmKeyApp(App):
    """
    Main RhythmKey application.

    Provides a terminal-based interface for:
    - Tapping a tempo and fine-tuning it
    - Running a metronome at the estimated tempo
    - Browsing keys related to a selected root
    - Evaluating the estimator on synthetic tap sequences
    """

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        background: $primary;
    }

    Footer {
        background: $panel;
    }
    """

    TITLE = "RhythmKey"
    SUB_TITLE = "Tap tempo and key finder"

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("e", "evaluate", "Evaluate"),
        Binding("h", "help", "Help"),
    ]

    def __init__(self, config: SessionConfig | None = None):
        super().__init__()
        self.session = TapSession(config=config)
        self.metronome = MetronomeScheduler(on_pulse=self._on_pulse)

    def on_mount(self) -> None:
        self.push_screen(TapScreen(self.session))

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container()
        yield Footer()

    def _on_pulse(self) -> None:
        self.bell()
        if isinstance(self.screen, TapScreen):
            self.screen.pulse()

    def action_evaluate(self) -> None:
        """Run every evaluation suite."""
        self.push_screen(EvaluationScreen("all"))

    def action_help(self) -> None:
        help_text = (
            "space: tap along | up/down: fine-tune (shift for x10)\n"
            "m: metronome | k: next key | n: major/minor\n"
            "r: restart session | e: evaluate estimator | q: quit"
        )
        self.notify(help_text, title="RhythmKey Help", timeout=8)

    def on_unmount(self) -> None:
        self.metronome.stop()


def main():
    """Main entry point for the application."""
    app = RhythmKeyApp()
    app.run()


if __name__ == "__main__":
    main()
