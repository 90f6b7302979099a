"""
Property-based tests for porcelain parsing and status mapping.
"""

from hypothesis import given
from hypothesis import strategies as st

from treesync.adapters.git.porcelain import parse_porcelain_status
from treesync.application.sync import StatusMapper


# Plain root-relative paths without NUL (which -z uses as the separator)
path_segment = st.text(
    alphabet=st.characters(categories=("Ll", "Lu", "Nd"), include_characters="_-. "),
    min_size=1,
    max_size=12,
).filter(lambda s: s.strip(" ") == s and s not in (".", ".."))
paths = st.lists(path_segment, min_size=1, max_size=3).map("/".join)

status_codes = st.sampled_from(["??", "A ", "M ", " M", "MM", "D ", " D", "AM", "UU", "AA"])
records = st.lists(st.tuples(status_codes, paths), max_size=20, unique_by=lambda r: r[1])


def porcelain(entries: list[tuple[str, str]]) -> str:
    return "\0".join(["## main", *[f"{code} {path}" for code, path in entries]]) + "\0"


class TestPorcelainProperties:
    @given(records)
    def test_every_record_becomes_a_file_entry(self, entries):
        raw = parse_porcelain_status(porcelain(entries))

        assert [f.path for f in raw.files] == [path for _, path in entries]

    @given(records)
    def test_untracked_and_conflicted_are_exclusive(self, entries):
        raw = parse_porcelain_status(porcelain(entries))

        for code, path in entries:
            if code == "??":
                assert path in raw.not_added
                assert path not in raw.staged
            if code in ("UU", "AA"):
                assert path in raw.conflicted
                assert path not in raw.staged

    @given(records)
    def test_categories_hold_no_duplicates(self, entries):
        raw = parse_porcelain_status(porcelain(entries))

        for category in (raw.staged, raw.not_added, raw.created, raw.modified, raw.deleted):
            assert len(category) == len(set(category))


class TestMapperProperties:
    @given(records)
    def test_is_clean_iff_no_paths(self, entries):
        status = StatusMapper.map_status(parse_porcelain_status(porcelain(entries)))

        assert status.is_clean == (len(entries) == 0)
        assert status.current_branch == "main"

    @given(records)
    def test_mapped_categories_match_raw(self, entries):
        raw = parse_porcelain_status(porcelain(entries))
        status = StatusMapper.map_status(raw)

        assert list(status.not_added) == raw.not_added
        assert list(status.staged) == raw.staged
        assert len(status.files) == len(raw.files)
