"""
Test script for settings persistence

Usage:
    python test_settings.py
"""

import json
import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sudoku16.settings import DEFAULT_SETTINGS, Settings, load_settings, save_settings
from sudoku16.techniques import DISABLED_BY_DEFAULT, SolvingTechnique

T = SolvingTechnique


def test_defaults():
    print("\n" + "="*60)
    print("TEST: Default settings")
    print("="*60)

    settings = Settings()
    print(f"  {len(settings.techniques)} of {len(SolvingTechnique)} techniques enabled")
    assert settings.is_using(T.HiddenSingle)
    assert settings.is_using(T.NestedForcingChain)
    assert not settings.is_using(T.UniqueLoop)
    assert not settings.is_using_all_techniques()
    assert settings.techniques | DISABLED_BY_DEFAULT == frozenset(SolvingTechnique)
    assert settings.puzzle_format == 4
    assert settings.to_dict() == DEFAULT_SETTINGS

    assert Settings.all_techniques().is_using_all_techniques()
    only = Settings.with_techniques([T.NakedSingle])
    assert only.is_using_all(T.NakedSingle)
    assert not only.is_using_all(T.NakedSingle, T.HiddenSingle)
    print("  [PASS] Default settings tests")


def test_roundtrip():
    print("\n" + "="*60)
    print("TEST: Save and load")
    print("="*60)

    settings = Settings.with_techniques([T.HiddenSingle, T.XWing], puzzle_format=2,
                                        lower_priority=False)
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "sudoku16.json"
        save_settings(settings, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["techniques"] == ["HiddenSingle", "XWing"]
        loaded = load_settings(path)
    assert loaded == settings
    print("  [PASS] Save and load tests")


def test_fallbacks():
    """Missing, broken and partial files still give usable settings."""
    print("\n" + "="*60)
    print("TEST: Fallbacks")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        assert load_settings(Path(tmp) / "missing.json") == Settings()

        broken = Path(tmp) / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        assert load_settings(broken) == Settings()

        listed = Path(tmp) / "list.json"
        listed.write_text("[1, 2]", encoding="utf-8")
        assert load_settings(listed) == Settings()

        partial = Path(tmp) / "partial.json"
        partial.write_text(json.dumps({"techniques": ["NakedSingle", "Bogus"]}),
                           encoding="utf-8")
        loaded = load_settings(partial)
        assert loaded.techniques == frozenset({T.NakedSingle})
        assert loaded.puzzle_format == 4 and loaded.lower_priority

    assert Settings().evolve(puzzle_format=3).puzzle_format == 3
    print("  [PASS] Fallback tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# SETTINGS TESTS")
    print("#"*60)

    tests = [
        ("Defaults", test_defaults),
        ("Save and load", test_roundtrip),
        ("Fallbacks", test_fallbacks),
    ]
    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)
    for name, passed in results:
        print(f"  {name}: [{'PASS' if passed else 'FAIL'}]")

    if all(passed for _name, passed in results):
        print("\nAll tests PASSED!")
        return 0
    print("\nSome tests FAILED!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
