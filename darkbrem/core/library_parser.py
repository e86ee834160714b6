"""Event-library parsing — LHE and CSV vertex records.

A library path may be a single file or a flat directory of files.  Accepted
file names end in ``.lhe``, ``.csv``, ``.lhe.gz`` or ``.csv.gz``; gzip files
are decompressed transparently.  Records from every file are merged into one
mapping keyed by incident energy [GeV].
"""

from __future__ import annotations

import gzip
import logging
import pathlib
from collections.abc import Iterator
from typing import TextIO

from darkbrem.constants import (
    APRIME_MASS_TOLERANCE,
    LHE_INCOMING,
    LHE_LEPTON_IDS,
    LHE_OUTGOING,
    LIBRARY_CSV_HEADER,
    LIBRARY_EXTENSIONS,
)
from darkbrem.core.errors import ConfigurationError, MalformedRowError
from darkbrem.models.kinematics import FourMomentum, OutgoingKinematics

logger = logging.getLogger(__name__)

Library = dict[float, list[OutgoingKinematics]]

# ptype, status, 4 ignored columns, px, py, pz, E, M
_LHE_MIN_FIELDS = 11


def is_library_file(path: str | pathlib.Path) -> bool:
    """True if *path* has one of the accepted library extensions."""
    name = pathlib.Path(path).name
    return name.endswith(LIBRARY_EXTENSIONS)


def open_library_file(path: str | pathlib.Path) -> TextIO:
    """Open a library file for text reading, decompressing ``.gz`` files."""
    path = pathlib.Path(path)
    if path.name.endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, encoding="utf-8")


def _parse_lhe_particle(
    line: str,
) -> tuple[int, int, float, float, float, float, float] | None:
    """(ptype, status, px, py, pz, E, M) from an LHE particle line, or None."""
    tokens = line.split()
    if len(tokens) < _LHE_MIN_FIELDS:
        return None
    try:
        ptype = int(tokens[0])
        status = int(tokens[1])
        px, py, pz, e, m = (float(t) for t in tokens[6:11])
    except ValueError:
        return None
    return ptype, status, px, py, pz, e, m


def _advance(lines: Iterator[str], count: int) -> str | None:
    """Skip *count* lines and return the last one, or None at end of input."""
    line = None
    for _ in range(count):
        line = next(lines, None)
        if line is None:
            return None
    return line


def parse_lhe(
    stream: TextIO,
    aprime_lhe_id: int,
    aprime_mass_GeV: float | None = None,
) -> list[OutgoingKinematics]:
    """Extract dark brem vertices from LHE event text.

    An incoming lepton line (PDG ID 11 or 13, status −1) opens a vertex.
    The second line after it must be the outgoing lepton (status 1) and the
    second line after that the outgoing A′ (*aprime_lhe_id*, status 1).
    Anything that does not fit this pattern is skipped and scanning resumes
    at the following line.

    Args:
        stream: Open text stream.
        aprime_lhe_id: Particle ID of the A′ in the records.
        aprime_mass_GeV: Configured A′ mass [GeV]; when given, records with a
            different mass are rejected.

    Returns:
        Vertices in file order.

    Raises:
        ConfigurationError: If an A′ record's mass differs from
            *aprime_mass_GeV* by more than 0.1 %.
    """
    records: list[OutgoingKinematics] = []
    lines = iter(stream)
    for line in lines:
        incoming = _parse_lhe_particle(line)
        if incoming is None:
            continue
        ptype, status, *_, incident_energy, _mass = incoming
        if ptype not in LHE_LEPTON_IDS or status != LHE_INCOMING:
            continue

        lepton_line = _advance(lines, 2)
        if lepton_line is None:
            break
        lepton = _parse_lhe_particle(lepton_line)
        if lepton is None or lepton[0] not in LHE_LEPTON_IDS or lepton[1] != LHE_OUTGOING:
            continue

        aprime_line = _advance(lines, 2)
        if aprime_line is None:
            break
        aprime = _parse_lhe_particle(aprime_line)
        if aprime is None or aprime[0] != aprime_lhe_id or aprime[1] != LHE_OUTGOING:
            continue

        _, _, a_px, a_py, a_pz, a_e, a_m = aprime
        if aprime_mass_GeV is not None and abs(1.0 - a_m / aprime_mass_GeV) > APRIME_MASS_TOLERANCE:
            raise ConfigurationError(
                f"An imported LHE event has a different A' mass than the model "
                f"(LHE = {a_m} GeV; model = {aprime_mass_GeV} GeV)."
            )

        _, _, e_px, e_py, e_pz, e_e, _ = lepton
        lepton_p4 = FourMomentum(e_e, e_px, e_py, e_pz)
        records.append(OutgoingKinematics(
            lepton=lepton_p4,
            center_momentum=lepton_p4 + FourMomentum(a_e, a_px, a_py, a_pz),
            incident_energy=incident_energy,
        ))
    return records


def parse_csv(stream: TextIO, source: str = "<stream>") -> list[OutgoingKinematics]:
    """Read vertices from the 9-column CSV library format.

    The first line is a header and is discarded.  Blank lines are ignored;
    every other line must hold exactly 9 numbers.

    Args:
        stream: Open text stream.
        source: Name used in error messages.

    Returns:
        Vertices in file order.

    Raises:
        MalformedRowError: If a non-blank line is not 9 numbers.
    """
    records: list[OutgoingKinematics] = []
    stream.readline()
    for line_number, line in enumerate(stream, start=2):
        text = line.strip()
        if not text:
            continue
        fields = text.split(",")
        if len(fields) != len(LIBRARY_CSV_HEADER):
            raise MalformedRowError(source, line_number, text)
        try:
            values = [float(f) for f in fields]
        except ValueError:
            raise MalformedRowError(source, line_number, text) from None
        records.append(OutgoingKinematics(
            lepton=FourMomentum(*values[1:5]),
            center_momentum=FourMomentum(*values[5:9]),
            incident_energy=values[0],
        ))
    return records


def parse_file(
    path: str | pathlib.Path,
    aprime_lhe_id: int,
    aprime_mass_GeV: float | None = None,
) -> list[OutgoingKinematics]:
    """Parse a single library file, dispatching on its extension."""
    path = pathlib.Path(path)
    try:
        with open_library_file(path) as stream:
            if path.name.endswith((".csv", ".csv.gz")):
                return parse_csv(stream, source=str(path))
            return parse_lhe(stream, aprime_lhe_id, aprime_mass_GeV)
    except OSError as exc:
        raise ConfigurationError(f"Unable to read library file {str(path)!r}: {exc}") from exc


def parse_library(
    path: str | pathlib.Path,
    aprime_lhe_id: int,
    aprime_mass_GeV: float | None = None,
) -> Library:
    """Parse a library file or flat directory of library files.

    Directory entries are visited in name order; sub-directories and files
    with other extensions are ignored.

    Args:
        path: Library file or directory.
        aprime_lhe_id: Particle ID of the A′ in LHE records.
        aprime_mass_GeV: Configured A′ mass for the LHE mass check.

    Returns:
        Mapping incident energy [GeV] → vertices in encounter order.  May be
        empty; callers decide whether that is an error.

    Raises:
        ConfigurationError: If *path* does not exist, is a file without a
            library extension, or cannot be read.
        MalformedRowError: On a malformed CSV row.
    """
    path = pathlib.Path(path)
    if path.is_dir():
        files = sorted(
            p for p in path.iterdir() if p.is_file() and is_library_file(p)
        )
    elif path.is_file():
        if not is_library_file(path):
            raise ConfigurationError(
                f"Unrecognized library file {str(path)!r}; expected one of "
                f"{', '.join(LIBRARY_EXTENSIONS)}"
            )
        files = [path]
    else:
        raise ConfigurationError(f"Library path {str(path)!r} does not exist")

    library: Library = {}
    for file_path in files:
        records = parse_file(file_path, aprime_lhe_id, aprime_mass_GeV)
        if records:
            logger.info("Parsed %d vertices from %s", len(records), file_path)
        else:
            logger.warning("No dark brem vertices found in %s", file_path)
        for record in records:
            library.setdefault(record.incident_energy, []).append(record)
    return library
