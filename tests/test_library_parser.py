"""Event-library parsing: LHE records, CSV rows, gzip and directories."""

import gzip
import io
import logging

import pytest

from darkbrem.core.errors import ConfigurationError, MalformedRowError
from darkbrem.core.library_parser import (
    is_library_file,
    parse_csv,
    parse_lhe,
    parse_library,
)
from darkbrem.models.kinematics import FourMomentum

CSV_HEADER = (
    "incident_energy,recoil_energy,recoil_px,recoil_py,recoil_pz,"
    "centerMomentum_energy,centerMomentum_px,centerMomentum_py,centerMomentum_pz\n"
)


# ── Helpers ──────────────────────────────────────────────────────────

def _particle(ptype: int, status: int, px: float, py: float, pz: float,
              e: float, m: float) -> str:
    return f"  {ptype:>5d} {status:>2d}    1    2    0    0 {px:+.8e} {py:+.8e} {pz:+.8e} {e:.8e} {m:.8e} 0. 9.\n"


def _lhe_event(
    beam: float = 4.0,
    lepton=(0.01, 0.02, 2.5, 2.50012),
    aprime=(-0.01, -0.02, 1.49, 1.4934),
    aprime_id: int = 622,
    aprime_mass: float = 0.1,
    lepton_id: int = 11,
) -> str:
    return "".join([
        "<event>\n",
        " 5      0 +1.0000000e+00 1.0e+00 7.54677100e-03 1.0e-01\n",
        _particle(lepton_id, -1, 0.0, 0.0, beam, beam, 0.000511),
        _particle(623, -1, 0.0, 0.0, 0.0, 171.3, 171.3),
        _particle(lepton_id, 1, *lepton, 0.000511),
        _particle(623, 1, 0.0, 0.0, 0.01, 171.3, 171.3),
        _particle(aprime_id, 1, *aprime, aprime_mass),
        "</event>\n",
    ])


def _lhe_file(events: list[str]) -> str:
    return "<LesHouchesEvents version=\"3.0\">\n<init>\n</init>\n" + "".join(events) + "</LesHouchesEvents>\n"


def _csv_row(values) -> str:
    return ",".join(repr(float(v)) for v in values) + "\n"


# ── LHE ──────────────────────────────────────────────────────────────

class TestParseLhe:
    def test_single_event(self):
        records = parse_lhe(io.StringIO(_lhe_file([_lhe_event()])), 622, 0.1)
        assert len(records) == 1
        rec = records[0]
        assert rec.incident_energy == pytest.approx(4.0)
        assert rec.lepton == FourMomentum(2.50012, 0.01, 0.02, 2.5)
        assert rec.center_momentum.e == pytest.approx(2.50012 + 1.4934)
        assert rec.center_momentum.px == pytest.approx(0.0)
        assert rec.center_momentum.pz == pytest.approx(3.99)

    def test_multiple_events_in_order(self):
        text = _lhe_file([_lhe_event(beam=4.0), _lhe_event(beam=8.0), _lhe_event(beam=4.0)])
        records = parse_lhe(io.StringIO(text), 622)
        assert [r.incident_energy for r in records] == [4.0, 8.0, 4.0]

    def test_muon_records(self):
        records = parse_lhe(io.StringIO(_lhe_file([_lhe_event(lepton_id=13)])), 622)
        assert len(records) == 1

    def test_other_aprime_id_skipped(self):
        records = parse_lhe(io.StringIO(_lhe_file([_lhe_event(aprime_id=625)])), 622)
        assert records == []

    def test_custom_aprime_id(self):
        records = parse_lhe(io.StringIO(_lhe_file([_lhe_event(aprime_id=625)])), 625)
        assert len(records) == 1

    def test_non_matching_lines_skipped(self):
        junk = "not a particle line\n  11 -1 0 0\n"
        records = parse_lhe(io.StringIO(junk + _lhe_event() + junk), 622)
        assert len(records) == 1

    def test_truncated_event(self):
        truncated = "".join(_lhe_event().splitlines(keepends=True)[:4])
        assert parse_lhe(io.StringIO(truncated), 622) == []

    def test_mass_mismatch_raises(self):
        with pytest.raises(ConfigurationError, match="A' mass"):
            parse_lhe(io.StringIO(_lhe_event(aprime_mass=0.2)), 622, aprime_mass_GeV=0.1)

    def test_mass_within_tolerance(self):
        records = parse_lhe(io.StringIO(_lhe_event(aprime_mass=0.10005)), 622, aprime_mass_GeV=0.1)
        assert len(records) == 1

    def test_mass_unchecked_without_configured_mass(self):
        records = parse_lhe(io.StringIO(_lhe_event(aprime_mass=0.2)), 622)
        assert len(records) == 1


# ── CSV ──────────────────────────────────────────────────────────────

class TestParseCsv:
    def test_rows(self):
        text = CSV_HEADER + _csv_row([4.0, 2.5, 0.01, 0.02, 2.49, 4.0, 0.0, 0.0, 3.9])
        records = parse_csv(io.StringIO(text))
        assert len(records) == 1
        assert records[0].incident_energy == 4.0
        assert records[0].lepton == FourMomentum(2.5, 0.01, 0.02, 2.49)
        assert records[0].center_momentum == FourMomentum(4.0, 0.0, 0.0, 3.9)

    def test_blank_lines_tolerated(self):
        row = _csv_row([4.0] + [1.0] * 8)
        text = CSV_HEADER + row + "\n" + row + "\n\n"
        assert len(parse_csv(io.StringIO(text))) == 2

    def test_header_only(self):
        assert parse_csv(io.StringIO(CSV_HEADER)) == []

    def test_eight_fields_raise(self):
        text = CSV_HEADER + _csv_row([4.0] * 9) + _csv_row([4.0] * 8)
        with pytest.raises(MalformedRowError) as excinfo:
            parse_csv(io.StringIO(text), source="lib.csv")
        assert excinfo.value.line_number == 3
        assert "lib.csv" in str(excinfo.value)

    def test_ten_fields_raise(self):
        with pytest.raises(MalformedRowError):
            parse_csv(io.StringIO(CSV_HEADER + _csv_row([4.0] * 10)))

    def test_non_numeric_raises(self):
        with pytest.raises(MalformedRowError):
            parse_csv(io.StringIO(CSV_HEADER + "4.0,a,b,c,d,e,f,g,h\n"))

    def test_malformed_row_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            parse_csv(io.StringIO(CSV_HEADER + "1,2,3\n"))


# ── Files and directories ────────────────────────────────────────────

class TestParseLibrary:
    @pytest.mark.parametrize("name, expected", [
        ("events.lhe", True),
        ("events.lhe.gz", True),
        ("lib.csv", True),
        ("lib.csv.gz", True),
        ("lib.txt", False),
        ("lib.gz", False),
        ("lhe", False),
    ])
    def test_is_library_file(self, name, expected):
        assert is_library_file(name) is expected

    def test_single_csv(self, tmp_path):
        path = tmp_path / "lib.csv"
        path.write_text(CSV_HEADER + _csv_row([4.0] + [1.0] * 8) + _csv_row([8.0] + [1.0] * 8))
        library = parse_library(path, 622)
        assert sorted(library) == [4.0, 8.0]

    def test_gzip_lhe(self, tmp_path):
        path = tmp_path / "events.lhe.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(_lhe_file([_lhe_event(), _lhe_event()]))
        library = parse_library(path, 622, 0.1)
        assert len(library[4.0]) == 2

    def test_gzip_csv(self, tmp_path):
        path = tmp_path / "lib.csv.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(CSV_HEADER + _csv_row([4.0] + [1.0] * 8))
        assert len(parse_library(path, 622)[4.0]) == 1

    def test_directory_merges_files(self, tmp_path):
        (tmp_path / "a.lhe").write_text(_lhe_file([_lhe_event(beam=4.0)]))
        (tmp_path / "b.csv").write_text(CSV_HEADER + _csv_row([4.0] + [1.0] * 8))
        (tmp_path / "notes.txt").write_text("ignored")
        sub = tmp_path / "nested"
        sub.mkdir()
        (sub / "c.lhe").write_text(_lhe_file([_lhe_event(beam=16.0)]))

        library = parse_library(tmp_path, 622, 0.1)
        assert sorted(library) == [4.0]
        assert len(library[4.0]) == 2
        # files are visited in name order
        assert library[4.0][0].lepton == FourMomentum(2.50012, 0.01, 0.02, 2.5)

    def test_empty_directory(self, tmp_path):
        assert parse_library(tmp_path, 622) == {}

    def test_missing_path(self, tmp_path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            parse_library(tmp_path / "missing", 622)

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / "lib.txt"
        path.write_text("x")
        with pytest.raises(ConfigurationError):
            parse_library(path, 622)

    def test_file_without_matches_warns(self, tmp_path, caplog):
        (tmp_path / "empty.lhe").write_text("<LesHouchesEvents>\n</LesHouchesEvents>\n")
        with caplog.at_level(logging.WARNING, logger="darkbrem.core.library_parser"):
            library = parse_library(tmp_path, 622)
        assert library == {}
        assert any("No dark brem vertices" in r.getMessage() for r in caplog.records)

    def test_malformed_csv_in_directory_is_fatal(self, tmp_path):
        (tmp_path / "a.lhe").write_text(_lhe_file([_lhe_event()]))
        (tmp_path / "b.csv").write_text(CSV_HEADER + _csv_row([4.0] * 8))
        with pytest.raises(MalformedRowError):
            parse_library(tmp_path, 622)
