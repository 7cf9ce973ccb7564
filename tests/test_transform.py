import sys
import unittest
from unittest import mock
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fixsrt.models import SrtEntry
from fixsrt.rewriter import compile_rule
from fixsrt.transform import (
    CollectionTooLargeError,
    apply_text_rules,
    apply_time_shift_stretch,
    should_exclude_last,
)


def _entries(*starts: int) -> list[SrtEntry]:
    return [SrtEntry(index=i + 1, start=start, end=start + 500) for i, start in enumerate(starts)]


class TextRulesTest(unittest.TestCase):
    def test_every_line_is_rewritten(self) -> None:
        entries = [
            SrtEntry(index=1, start=0, end=1, lines=["Ca va", "oui"]),
            SrtEntry(index=2, start=2, end=3, lines=["Ca"]),
            SrtEntry(index=3, start=4, end=5),
        ]
        changed = apply_text_rules(entries, [compile_rule("Ca", "Ça")])
        self.assertEqual(changed, 2)
        self.assertEqual(entries[0].lines, ["Ça va", "oui"])
        self.assertEqual(entries[1].lines, ["Ça"])
        self.assertEqual(entries[2].lines, [])


class ShiftStretchTest(unittest.TestCase):
    def test_noop_when_both_zero(self) -> None:
        entries = _entries(1000, 2000)
        apply_time_shift_stretch(entries, 0, 0)
        self.assertEqual([e.start for e in entries], [1000, 2000])

    def test_shift_only(self) -> None:
        entries = _entries(1000, 2000)
        apply_time_shift_stretch(entries, -300, 0)
        self.assertEqual([e.start for e in entries], [700, 1700])
        self.assertEqual([e.end for e in entries], [1200, 2200])

    def test_stretch_is_distributed_linearly(self) -> None:
        entries = _entries(1000, 2000, 3000)
        apply_time_shift_stretch(entries, 0, 300)
        self.assertEqual([e.start for e in entries], [1000, 2150, 3300])
        self.assertEqual([e.end for e in entries], [1500, 2650, 3800])

    def test_stretch_offsets_are_floored(self) -> None:
        entries = _entries(0, 1000, 2000, 3000)
        apply_time_shift_stretch(entries, 0, 100)
        self.assertEqual([e.start for e in entries], [0, 1033, 2066, 3100])

    def test_shift_and_stretch_combine(self) -> None:
        entries = _entries(1000, 2000, 3000)
        apply_time_shift_stretch(entries, 50, 300)
        self.assertEqual([e.start for e in entries], [1050, 2200, 3350])

    def test_excluded_last_entry_only_gets_shift(self) -> None:
        entries = _entries(1000, 2000, 3000, 500)
        apply_time_shift_stretch(entries, 10, 300)
        self.assertEqual([e.start for e in entries], [1010, 2160, 3310, 510])

    def test_stretch_needs_two_eligible_entries(self) -> None:
        entries = _entries(1000)
        apply_time_shift_stretch(entries, 5, 300)
        self.assertEqual(entries[0].start, 1005)

        entries = _entries(1000, 500)
        apply_time_shift_stretch(entries, 0, 300)
        self.assertEqual([e.start for e in entries], [1000, 500])

    def test_oversized_collection_is_left_untouched(self) -> None:
        entries = _entries(1000, 2000)
        with mock.patch("fixsrt.transform.MAX_ENTRIES", 1):
            with self.assertRaises(CollectionTooLargeError):
                apply_time_shift_stretch(entries, 100, 300)
        self.assertEqual([e.start for e in entries], [1000, 2000])
        self.assertEqual([e.end for e in entries], [1500, 2500])


class ExcludeLastTest(unittest.TestCase):
    def test_empty_and_single(self) -> None:
        self.assertFalse(should_exclude_last([]))
        self.assertFalse(should_exclude_last(_entries(10)))
        self.assertTrue(should_exclude_last(_entries(0)))
        self.assertTrue(should_exclude_last(_entries(-10)))

    def test_time_going_backwards(self) -> None:
        self.assertTrue(should_exclude_last(_entries(1000, 999)))
        self.assertFalse(should_exclude_last(_entries(1000, 1000)))

    def test_gap_over_five_hours(self) -> None:
        five_hours = 5 * 60 * 60 * 1000
        self.assertFalse(should_exclude_last(_entries(1000, 1000 + five_hours)))
        self.assertTrue(should_exclude_last(_entries(1000, 1001 + five_hours)))


if __name__ == "__main__":
    unittest.main()
