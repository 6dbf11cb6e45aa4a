"""Initial-condition helpers backed by JPL ephemerides.

Two sources are supported: the JPL Horizons HTTP API, queried once per body
and year, and local SPK kernels read with :mod:`jplephem`.  Both return
barycentric positions in AU and velocities in AU/day.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable
from urllib.error import URLError
from urllib.parse import quote, urlencode
from urllib.request import urlopen

import numpy as np
from jplephem.spk import SPK

from . import constants as C
from .exceptions import HorizonsError

logger = logging.getLogger(__name__)

START_MARKER = "$$SOE"
END_MARKER = "$$EOE"


def build_query_url(body_id: str, year: int, base_url: str = C.HORIZONS_URL) -> str:
    """Return the Horizons vector-table query for ``body_id`` at 1 January ``year``."""
    params = {
        "format": "text",
        "COMMAND": f"'{body_id}'",
        "CENTER": "'@0'",
        "CSV_FORMAT": "'YES'",
        "EPHEM_TYPE": "'VECTOR'",
        "VEC_TABLE": "'2'",
        "OUT_UNITS": "'AU-D'",
        "START_TIME": f"'{year}-01-01'",
        "STOP_TIME": f"'{year}-01-02'",
        "STEP_SIZE": "'2 d'",
    }
    query = urlencode(params, quote_via=quote, safe="'@")
    return f"{base_url}?{query}"


def parse_vectors(text: str) -> tuple[np.ndarray, np.ndarray]:
    """Extract the first position/velocity record from a Horizons CSV reply."""
    try:
        block = text.split(START_MARKER, 1)[1].split(END_MARKER, 1)[0]
    except IndexError:
        raise HorizonsError("Horizons reply has no $$SOE/$$EOE data block") from None

    lines = [line for line in block.strip().splitlines() if line.strip()]
    if not lines:
        raise HorizonsError("Horizons data block is empty")

    # JDTDB, Calendar Date, X, Y, Z, VX, VY, VZ,
    fields = lines[0].split(",")
    try:
        values = [float(f) for f in fields[2:8]]
    except ValueError as exc:
        raise HorizonsError(f"Malformed Horizons record: {lines[0]!r}") from exc
    if len(values) != 6:
        raise HorizonsError(f"Malformed Horizons record: {lines[0]!r}")
    return np.array(values[:3]), np.array(values[3:])


def fetch_body_state(
    body_id: str,
    year: int,
    *,
    base_url: str = C.HORIZONS_URL,
    timeout: float = 30.0,
) -> tuple[np.ndarray, np.ndarray]:
    """Query Horizons for one body's state on 1 January ``year``."""
    url = build_query_url(body_id, year, base_url)
    try:
        with urlopen(url, timeout=timeout) as resp:
            text = resp.read().decode("utf-8")
    except (URLError, OSError, UnicodeDecodeError) as exc:
        raise HorizonsError(f"Could not fetch body {body_id} for {year}: {exc}") from exc
    return parse_vectors(text)


def fetch_initial_conditions(
    first_year: int,
    last_year: int,
    ids: Iterable[str] = C.HORIZONS_IDS,
    *,
    base_url: str = C.HORIZONS_URL,
    timeout: float = 30.0,
) -> dict[str, list[list[float]]]:
    """Fetch ``[x, y, z, vx, vy, vz]`` rows for every body and every year.

    The returned mapping is keyed by year (as a string, matching the JSON file
    layout) and covers ``first_year`` through ``last_year`` inclusive.
    """
    if first_year >= last_year:
        raise ValueError("first_year must be smaller than last_year")
    ids = list(ids)
    data = {}
    for year in range(first_year, last_year + 1):
        logger.info("Getting year %d", year)
        rows = []
        for body_id in ids:
            pos, vel = fetch_body_state(body_id, year, base_url=base_url, timeout=timeout)
            rows.append([*pos.tolist(), *vel.tolist()])
        data[str(year)] = rows
    return data


def write_initial_conditions(data: dict, dest: str | Path = "api.json") -> Path:
    """Write fetched initial conditions as JSON and return the resolved path."""
    dest_path = Path(dest)
    if dest_path.is_dir():
        dest_path = dest_path / "api.json"
    dest_path.write_text(json.dumps(data, indent=1))
    return dest_path.resolve()


def load_ephemeris(path: str) -> SPK:
    """Load a JPL SPK ephemeris file."""
    return SPK.open(path)


def body_state(ephem: SPK, target: int, epoch: datetime) -> tuple[np.ndarray, np.ndarray]:
    """Return barycentric position in AU and velocity in AU/day."""
    jd = epoch.timestamp() / 86400.0 + 2440587.5
    pos_km, vel_km_day = ephem[0, target].compute_and_differentiate(jd)
    pos = np.asarray(pos_km, dtype=float) * 1000.0 / C.AU
    vel = np.asarray(vel_km_day, dtype=float) * 1000.0 / C.AU
    return pos, vel


def main(argv: list[str] | None = None) -> int:
    """Command line entry point for fetching initial conditions."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Fetch solar-system initial conditions from JPL Horizons"
    )
    parser.add_argument("first_year", type=int, help="First year to fetch")
    parser.add_argument("last_year", type=int, help="Last year to fetch (inclusive)")
    parser.add_argument(
        "-o",
        "--output",
        default="api.json",
        help="Destination JSON file or directory",
    )
    parser.add_argument("--url", default=C.HORIZONS_URL, help="Horizons API endpoint")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each year fetched")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    if args.first_year >= args.last_year:
        parser.error("first_year must be smaller than last_year")

    try:
        data = fetch_initial_conditions(args.first_year, args.last_year, base_url=args.url)
    except HorizonsError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    path = write_initial_conditions(data, args.output)
    print(path)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual tool
    raise SystemExit(main())
