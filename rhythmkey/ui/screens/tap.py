"""Tap screen: tap along, fine-tune the tempo and read related keys."""

from loguru import logger
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Label, ProgressBar, Static

from rhythmkey.core.keys import NOTES, key_grid
from rhythmkey.core.session import TapSession, TempoReading


class TapScreen(Screen):
    """Main tapping screen."""

    CSS = """
    TapScreen {
        align: center middle;
    }

    #tap-container {
        width: 70;
        height: auto;
        border: solid $primary;
        padding: 1 2;
        background: $panel;
    }

    #bpm {
        text-align: center;
        text-style: bold;
        color: $accent;
        height: 3;
        content-align: center middle;
    }

    #bpm.pulse {
        background: $accent 30%;
    }

    #derived, #metronome-status, .caption {
        text-align: center;
        width: 100%;
    }

    ProgressBar {
        margin: 1 0;
    }

    #key-grid {
        margin-top: 1;
        text-align: center;
    }
    """

    BINDINGS = [
        Binding("space", "tap", "Tap"),
        Binding("up", "nudge(1)", "Faster"),
        Binding("down", "nudge(-1)", "Slower"),
        Binding("shift+up", "nudge(10)", "Faster x10", show=False),
        Binding("shift+down", "nudge(-10)", "Slower x10", show=False),
        Binding("m", "toggle_metronome", "Metronome"),
        Binding("k", "next_key", "Key"),
        Binding("n", "toggle_minor", "Major/Minor"),
        Binding("r", "restart", "Restart"),
    ]

    def __init__(self, session: TapSession):
        super().__init__()
        self.session = session
        self.selected_note: str | None = None
        self.minor = False

    def compose(self) -> ComposeResult:
        with Container(id="tap-container"):
            yield Static("", id="bpm")
            yield Label("BPM", classes="caption")
            yield Static("", id="derived")
            yield ProgressBar(id="confidence", total=100, show_eta=False)
            yield Static("", id="metronome-status")
            with Horizontal():
                yield Static("", id="key-grid")
        yield Footer()

    def on_mount(self) -> None:
        self.session.add_listener(self._on_bpm_change)
        self.refresh_reading(self.session.reading())
        self.refresh_keys()
        self.refresh_metronome()

    def on_unmount(self) -> None:
        self.session.remove_listener(self._on_bpm_change)

    def _on_bpm_change(self, bpm: float) -> None:
        self.app.metronome.retune(bpm)
        self.refresh_metronome()

    def refresh_reading(self, reading: TempoReading) -> None:
        self.query_one("#bpm", Static).update(f"{reading.bpm:.1f}")
        self.query_one("#derived", Static).update(
            f"½× {reading.half_time_bpm:.1f}    2× {reading.double_time_bpm:.1f}"
        )
        self.query_one("#confidence", ProgressBar).update(progress=reading.confidence * 100)

    def refresh_metronome(self) -> None:
        metronome = self.app.metronome
        if metronome.running:
            text = f"Metronome on: every {metronome.period:.3f}s"
        else:
            text = "Metronome off"
        self.query_one("#metronome-status", Static).update(text)

    def refresh_keys(self) -> None:
        cells = []
        for cell in key_grid(self.selected_note, minor=self.minor):
            if cell.is_selected:
                cells.append(f"[reverse bold]{cell.note}[/]")
            elif self.selected_note is None:
                cells.append(cell.note)
            elif cell.is_related:
                cells.append(f"[green]{cell.note}[/]")
            else:
                cells.append(f"[red dim]{cell.note}[/]")

        mode = "minor" if self.minor else "major"
        root = self.selected_note or "-"
        self.query_one("#key-grid", Static).update(f"{root} {mode}\n" + "  ".join(cells))

    def pulse(self) -> None:
        """Flash the tempo display on each metronome beat."""
        bpm = self.query_one("#bpm", Static)
        bpm.add_class("pulse")
        self.set_timer(0.08, lambda: bpm.remove_class("pulse"))

    def action_tap(self) -> None:
        reading = self.session.tap()
        self.refresh_reading(reading)

    def action_nudge(self, steps: int) -> None:
        reading = self.session.nudge(steps * self.session.config.nudge_step)
        self.refresh_reading(reading)

    def action_toggle_metronome(self) -> None:
        metronome = self.app.metronome
        if metronome.running:
            metronome.stop()
        else:
            metronome.start(self.session.bpm)
        logger.debug(f"Metronome running={metronome.running}")
        self.refresh_metronome()

    def action_next_key(self) -> None:
        if self.selected_note is None:
            self.selected_note = NOTES[0]
        else:
            index = NOTES.index(self.selected_note) + 1
            self.selected_note = NOTES[index] if index < len(NOTES) else None
        self.refresh_keys()

    def action_toggle_minor(self) -> None:
        self.minor = not self.minor
        self.refresh_keys()

    def action_restart(self) -> None:
        reading = self.session.restart()
        self.refresh_reading(reading)
        self.notify("Session restarted")
