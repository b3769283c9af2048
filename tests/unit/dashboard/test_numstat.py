import pytest

from gitdash.dashboard import LineStat, lookup_stat, parse_numstat, rename_target


class TestParseNumstat:
    def test_parses_counts(self) -> None:
        result = parse_numstat("3\t1\tsrc/app.py\n10\t0\tREADME.md\n")

        assert result == {
            "src/app.py": LineStat(3, 1),
            "README.md": LineStat(10, 0),
        }

    def test_binary_counts_become_zero(self) -> None:
        result = parse_numstat("-\t-\tlogo.png\n")

        assert result == {"logo.png": LineStat(0, 0)}

    def test_short_lines_are_skipped(self) -> None:
        result = parse_numstat("garbage\n1\t2\n4\t5\tok.txt\n\n")

        assert result == {"ok.txt": LineStat(4, 5)}

    def test_path_with_tab_is_kept_whole(self) -> None:
        result = parse_numstat("1\t1\tweird\tname.txt\n")

        assert result == {"weird\tname.txt": LineStat(1, 1)}

    def test_empty_output(self) -> None:
        assert parse_numstat("") == {}

    def test_renames_are_keyed_by_destination(self) -> None:
        raw = "2\t1\tsrc/{old => new}/app.py\n0\t0\tnotes.txt => docs/notes.txt\n"

        result = parse_numstat(raw)

        assert result == {
            "src/new/app.py": LineStat(2, 1),
            "docs/notes.txt": LineStat(0, 0),
        }


class TestRenameTarget:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("plain.txt", "plain.txt"),
            ("a.txt => b.txt", "b.txt"),
            ("dir/{a => b}", "dir/b"),
            ("{lib => src}/mod.py", "src/mod.py"),
            ("pkg/{ => sub}/mod.py", "pkg/sub/mod.py"),
            ("pkg/{sub => }/mod.py", "pkg/mod.py"),
        ],
    )
    def test_destination(self, raw: str, expected: str) -> None:
        assert rename_target(raw) == expected


class TestLookupStat:
    def test_exact_match(self) -> None:
        stats = {"a/b.txt": LineStat(1, 2)}

        assert lookup_stat(stats, "a/b.txt") == LineStat(1, 2)

    def test_dot_slash_prefix(self) -> None:
        stats = {"./b.txt": LineStat(3, 0)}

        assert lookup_stat(stats, "b.txt") == LineStat(3, 0)

    def test_suffix_match(self) -> None:
        stats = {"nested/dir/b.txt": LineStat(0, 4)}

        assert lookup_stat(stats, "dir/b.txt") == LineStat(0, 4)

    def test_partial_name_is_not_matched(self) -> None:
        stats = {"ab.txt": LineStat(1, 1)}

        assert lookup_stat(stats, "b.txt") is None

    def test_missing_returns_none(self) -> None:
        assert lookup_stat({}, "x") is None
