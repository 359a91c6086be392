"""
astrotrack.tle — Two-Line Element Set Parser
=============================================

Parses NORAD Two-Line Element sets into an immutable :class:`TLE` record,
validating the line-number markers and the modulo-10 checksums.  A TLE is
the element source for :class:`astrotrack.propagator.Orbit`: it supplies
the six classical elements (degrees, rev/day), the B* drag term, the epoch,
and the elapsed-time function ``minutes_since_epoch``.

Any malformed input surfaces as a single :class:`TLEFormatError`, raised
here before the propagator ever sees the data.

Reference
---------
Vallado, D.A. (2013). *Fundamentals of Astrodynamics*, 4th ed., §2.2.
Hoots, F.R. & Roehrich, R.L. (1980). SPACETRACK Report No. 3.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping

import numpy as np

from .utils import as_utc, julian_day

logger = logging.getLogger(__name__)


class TLEFormatError(ValueError):
    """Raised when TLE text is malformed or fails checksum validation."""


@dataclass(frozen=True)
class TLE:
    """Parsed Two-Line Element set.

    Angles are in degrees and mean motion in revolutions per day, exactly
    as they appear in the element set.
    """
    # ── Raw text ──
    name: str
    line1: str
    line2: str

    # ── Line 1 ──
    norad_id: int
    classification: str
    intl_year: str
    intl_launch: str
    intl_piece: str
    intl_designator: str
    epoch_year: int             # full 4-digit year
    epoch_day: float            # day of year + fraction, 1.0 = Jan 1 00:00
    ndot: float                 # 1st derivative of mean motion / 2  [rev/day²]
    nddot: float                # 2nd derivative of mean motion / 6  [rev/day³]
    bstar: float                # B* drag term [1/earth radii]
    ephemeris_type: int
    element_number: int

    # ── Line 2 ──
    inclination: float          # [deg]
    raan: float                 # [deg]
    eccentricity: float
    argp: float                 # [deg]
    mean_anomaly: float         # [deg]
    mean_motion: float          # [rev/day]
    rev_number: int

    @property
    def epoch(self) -> datetime:
        """TLE epoch as a timezone-aware UTC datetime."""
        jan1 = datetime(self.epoch_year, 1, 1, tzinfo=timezone.utc)
        return jan1 + timedelta(days=self.epoch_day - 1.0)

    @property
    def epoch_jd(self) -> float:
        """Julian Date of the TLE epoch."""
        return julian_day(self.epoch)

    def minutes_since_epoch(self, instant: datetime) -> float:
        """Minutes elapsed from the epoch to *instant* (negative before it)."""
        return (as_utc(instant) - self.epoch).total_seconds() / 60.0

    def to_string(self, include_name: bool = True) -> str:
        """Return the element set as 2- or 3-line text."""
        if include_name and self.name:
            return f"{self.name}\n{self.line1}\n{self.line2}"
        return f"{self.line1}\n{self.line2}"

    def __str__(self) -> str:
        return self.to_string()


# ════════════════════════════════════════════════════════════════════════════
#  TLE Checksum
# ════════════════════════════════════════════════════════════════════════════

def tle_checksum(line: str) -> int:
    """Compute the modulo-10 checksum for a TLE line.

    Each digit contributes its face value, '-' counts as 1,
    all other characters count as 0.  The result is sum mod 10.

    Parameters
    ----------
    line : str — a TLE line (characters 0..67; column 69 is the checksum)

    Returns
    -------
    checksum : int — single digit 0-9
    """
    s = 0
    for ch in line[:68]:
        if ch.isdigit():
            s += int(ch)
        elif ch == '-':
            s += 1
    return s % 10


def verify_checksum(line: str) -> bool:
    """Verify the modulo-10 checksum of a TLE line.

    Parameters
    ----------
    line : str — a complete TLE line (69 characters with checksum at column 69)

    Returns
    -------
    valid : bool — True if the last digit matches the computed checksum
    """
    if len(line) < 69 or not line[68].isdigit():
        return False
    return tle_checksum(line) == int(line[68])


# ════════════════════════════════════════════════════════════════════════════
#  Parsing
# ════════════════════════════════════════════════════════════════════════════

def _parse_exp_field(field: str) -> float:
    """Parse TLE assumed-decimal exponent notation.

    ``±NNNNN±E`` means ``±0.NNNNN × 10^±E``, e.g. ' 66816-4' → 6.6816e-5.
    """
    s = field.strip()
    if not s:
        return 0.0
    sign = -1.0 if s[0] == '-' else 1.0
    s = s.lstrip('+-')
    if len(s) < 3:
        raise ValueError(f"bad exponent field {field!r}")
    mantissa = float("0." + s[:-2].replace(' ', '0'))
    exponent = int(s[-2:])
    return sign * mantissa * 10.0 ** exponent


def _check_line(line: str, number: str) -> None:
    if len(line) < 69:
        raise TLEFormatError(f"line {number} is {len(line)} characters, expected 69")
    if line[0] != number:
        raise TLEFormatError(f"line {number} does not start with '{number}'")
    if not verify_checksum(line):
        raise TLEFormatError(
            f"line {number} checksum: expected {tle_checksum(line)}, got {line[68]}"
        )


def parse_tle(*lines: str) -> TLE:
    """Parse a TLE given as (line1, line2) or (name, line1, line2).

    Parameters
    ----------
    lines : str — TLE lines, optionally preceded by the title line

    Returns
    -------
    tle : TLE

    Raises
    ------
    TLEFormatError
        On a wrong number of lines, a wrong line-number marker, a checksum
        mismatch, an unparsable field, or elements outside the range the
        propagator accepts.
    """
    if len(lines) == 3:
        name, line1, line2 = lines
    elif len(lines) == 2:
        name = ""
        line1, line2 = lines
    else:
        raise TLEFormatError(f"expected 2 or 3 lines, got {len(lines)}")

    name = name.strip()
    line1 = line1.rstrip()
    line2 = line2.rstrip()
    _check_line(line1, "1")
    _check_line(line2, "2")

    try:
        yr = int(line1[18:20])
        fields = dict(
            norad_id=int(line1[2:7]),
            classification=line1[7],
            intl_year=line1[9:11].strip(),
            intl_launch=line1[11:14].strip(),
            intl_piece=line1[14:17].strip(),
            intl_designator=line1[9:17].strip(),
            epoch_year=yr + (2000 if yr < 57 else 1900),
            epoch_day=float(line1[20:32]),
            ndot=float(line1[33:43]),
            nddot=_parse_exp_field(line1[44:52]),
            bstar=_parse_exp_field(line1[53:61]),
            ephemeris_type=int(line1[62]) if line1[62].strip() else 0,
            element_number=int(line1[64:68]) if line1[64:68].strip() else 0,
            inclination=float(line2[8:16]),
            raan=float(line2[17:25]),
            eccentricity=float("0." + line2[26:33].strip()),
            argp=float(line2[34:42]),
            mean_anomaly=float(line2[43:51]),
            mean_motion=float(line2[52:63]),
            rev_number=int(line2[63:68]) if line2[63:68].strip() else 0,
        )
    except ValueError as ex:
        raise TLEFormatError(f"invalid TLE field: {ex}") from ex

    if not 0.0 <= fields["eccentricity"] < 1.0:
        raise TLEFormatError(f"eccentricity {fields['eccentricity']} outside [0, 1)")
    if not np.isfinite(fields["mean_motion"]) or fields["mean_motion"] <= 0.0:
        raise TLEFormatError(f"mean motion {fields['mean_motion']} must be positive")

    return TLE(name=name, line1=line1, line2=line2, **fields)


def parse_tle_batch(text: str) -> list[TLE]:
    """Parse multiple TLEs from a multi-line string.

    Handles both 2-line (no name) and 3-line (name + lines) formats.
    Lines that belong to neither are skipped with a warning.

    Parameters
    ----------
    text : str — concatenated TLE text

    Returns
    -------
    tles : list[TLE]
    """
    lines = [l.rstrip() for l in text.strip().splitlines() if l.strip()]
    tles = []
    i = 0
    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            tles.append(parse_tle(lines[i], lines[i + 1]))
            i += 2
        elif (i + 2 < len(lines) and lines[i + 1].startswith("1 ")
              and lines[i + 2].startswith("2 ")):
            tles.append(parse_tle(lines[i], lines[i + 1], lines[i + 2]))
            i += 3
        else:
            logger.warning("Skipping unrecognised TLE line %d: %r", i + 1, lines[i])
            i += 1
    return tles


def parse_tle_list(records: Iterable[Mapping[str, str]]) -> list[TLE]:
    """Parse TLE records given as mappings with a title and two lines.

    Each record needs ``line1`` and ``line2``; the name is read from
    ``title`` or ``name`` when present.
    """
    return [
        parse_tle(rec.get("title", rec.get("name", "")), rec["line1"], rec["line2"])
        for rec in records
    ]

