"""
Tests for the music key tables.
"""

from rhythmkey.core.keys import NOTES, MusicKey, key_grid, normalize_note


class TestMusicKey:
    def test_related_keys(self):
        assert MusicKey.C.related_keys == ["Am", "F", "Dm", "G", "Em"]
        assert MusicKey.Db.related_keys == ["Bbm", "Gb", "Ebm", "Ab", "Fm"]

    def test_labels(self):
        assert MusicKey.B.label == "B/C♭"
        assert MusicKey.Gb.label == "F♯/G♭"
        assert len(list(MusicKey)) == 12

    def test_relative_minor_comes_first(self):
        """The first related key is a minor key for every major key."""
        assert all(k.related_keys[0].endswith("m") for k in MusicKey)


class TestKeyGrid:
    def test_major_grid(self):
        grid = key_grid("C")
        assert [cell.note for cell in grid] == NOTES
        assert [cell.note for cell in grid if cell.is_selected] == ["C"]
        assert [cell.note for cell in grid if cell.is_related] == [
            "C", "D", "E", "F", "G", "A", "B"
        ]

    def test_minor_grid(self):
        grid = key_grid("A", minor=True)
        assert [cell.note for cell in grid if cell.is_related] == [
            "C", "D", "E", "F", "G", "A", "B"
        ]

    def test_no_selection(self):
        grid = key_grid(None)
        assert not any(cell.is_selected or cell.is_related for cell in grid)

    def test_unknown_note(self):
        assert not any(cell.is_related for cell in key_grid("H"))

    def test_normalize_note(self):
        assert normalize_note("f#") == "F♯"
        assert normalize_note(" C♯ ") == "C♯"
        assert normalize_note("g") == "G"
