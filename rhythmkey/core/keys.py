"""Music key lookup tables.

Static relationships shown next to the tempo: related keys for each major
key, and which of the twelve notes belong to a selected major or natural
minor scale.
"""

from dataclasses import dataclass
from enum import Enum

NOTES = ["C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯", "A", "A♯", "B"]


class MusicKey(Enum):
    """Major keys around the circle of fifths."""

    C = "C"
    G = "G"
    D = "D"
    A = "A"
    E = "E"
    B = "B/C♭"
    Gb = "F♯/G♭"
    Db = "C♯/D♭"
    Ab = "G♯/A♭"
    Eb = "D♯/E♭"
    Bb = "A♯/B♭"
    F = "F"

    @property
    def label(self) -> str:
        return self.value

    @property
    def related_keys(self) -> list[str]:
        """Relative minor, subdominant, supertonic, dominant and mediant."""
        return list(RELATED_KEYS[self])


RELATED_KEYS: dict[MusicKey, tuple[str, ...]] = {
    MusicKey.C: ("Am", "F", "Dm", "G", "Em"),
    MusicKey.G: ("Em", "C", "Am", "D", "Bm"),
    MusicKey.D: ("Bm", "G", "Em", "A", "F#m"),
    MusicKey.A: ("F#m", "D", "Bm", "E", "C#m"),
    MusicKey.E: ("C#m", "A", "F#m", "B", "G#m"),
    MusicKey.B: ("G#m", "E", "C#m", "F#", "D#m"),
    MusicKey.Gb: ("D#m", "B", "G#m", "C#", "A#m"),
    MusicKey.Db: ("Bbm", "Gb", "Ebm", "Ab", "Fm"),
    MusicKey.Ab: ("Fm", "Db", "Bbm", "Eb", "Cm"),
    MusicKey.Eb: ("Cm", "Ab", "Fm", "Bb", "Gm"),
    MusicKey.Bb: ("Gm", "Eb", "Cm", "F", "Dm"),
    MusicKey.F: ("Dm", "Bb", "Gm", "C", "Am"),
}

MAJOR_SCALE_NOTES: dict[str, tuple[str, ...]] = {
    "C": ("C", "D", "E", "F", "G", "A", "B"),
    "C♯": ("C♯", "D♯", "F", "F♯", "G♯", "A♯"),
    "D": ("D", "E", "F", "G", "A", "B", "C"),
    "D♯": ("D♯", "F", "G", "G♯", "A♯", "C"),
    "E": ("E", "F♯", "G♯", "A", "B", "C♯", "D"),
    "F": ("F", "G", "A", "A♯", "C", "D", "E"),
    "F♯": ("F♯", "G♯", "A♯", "B", "C♯", "D♯"),
    "G": ("G", "A", "B", "C", "D", "E", "F♯"),
    "G♯": ("G♯", "A♯", "C", "C♯", "D♯", "F"),
    "A": ("A", "B", "C♯", "D", "E", "F♯", "G"),
    "A♯": ("A♯", "C", "D", "D♯", "F", "G"),
    "B": ("B", "C♯", "D♯", "E", "F♯", "G♯", "A"),
}

MINOR_SCALE_NOTES: dict[str, tuple[str, ...]] = {
    "C": ("C", "D", "D♯", "F", "G", "G♯", "A♯"),
    "C♯": ("C♯", "D♯", "E", "F♯", "G♯", "A", "B"),
    "D": ("D", "E", "F", "G", "A", "A♯", "C"),
    "D♯": ("D♯", "F", "F♯", "G♯", "A♯", "B", "C♯"),
    "E": ("E", "F♯", "G", "A", "B", "C", "D"),
    "F": ("F", "G", "G♯", "A♯", "C", "C♯", "D♯"),
    "F♯": ("F♯", "G♯", "A", "B", "C♯", "D", "E"),
    "G": ("G", "A", "A♯", "C", "D", "D♯", "F"),
    "G♯": ("G♯", "A♯", "B", "C♯", "D♯", "E", "F♯"),
    "A": ("A", "B", "C", "D", "E", "F", "G"),
    "A♯": ("A♯", "C", "C♯", "D♯", "F", "F♯", "G♯"),
    "B": ("B", "C♯", "D", "E", "F♯", "G", "A"),
}


@dataclass
class KeyLabel:
    """One cell of the key grid."""

    note: str
    is_selected: bool = False
    is_related: bool = False


def key_grid(selected_note: str | None, minor: bool = False) -> list[KeyLabel]:
    """
    Build the twelve-note grid for a selected root.

    Args:
        selected_note: Root note (one of NOTES) or None for no selection
        minor: Use natural minor instead of major scale membership

    Returns:
        One KeyLabel per chromatic note, in NOTES order
    """
    table = MINOR_SCALE_NOTES if minor else MAJOR_SCALE_NOTES
    related = table.get(selected_note, ()) if selected_note is not None else ()

    return [
        KeyLabel(
            note=note,
            is_selected=note == selected_note,
            is_related=note in related,
        )
        for note in NOTES
    ]


def normalize_note(note: str) -> str:
    """Accept ASCII sharps ("C#") as well as the display form ("C♯")."""
    note = note.strip().replace("#", "♯")
    return note[:1].upper() + note[1:]
