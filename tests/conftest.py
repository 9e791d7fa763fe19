"""Shared fixtures for AisHub bridge tests."""

from pathlib import Path
from typing import Any

import pytest

from aishub_ws.ais.translator import RecordTranslator

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SELF_CONTEXT = "vessels.urn:mrn:imo:mmsi:111111111"


@pytest.fixture
def response_file() -> Path:
    """Captured AisHub response with three vessels."""
    return FIXTURES_DIR / "aishub_response.json"


@pytest.fixture
def vessel_record() -> dict[str, Any]:
    """A complete AisHub record (format 1, human readable)."""
    return {
        "MMSI": 237012345,
        "TIME": "2017-05-03 10:15:42 GMT",
        "LONGITUDE": 22.9312,
        "LATITUDE": 40.6001,
        "COG": 90,
        "SOG": 10,
        "HEADING": 180,
        "ROT": 0,
        "NAVSTAT": 0,
        "IMO": 9312345,
        "NAME": "AEGEAN STAR",
        "CALLSIGN": "SVAB2",
        "TYPE": 70,
        "A": 120,
        "B": 30,
        "C": 12,
        "D": 14,
        "DRAUGHT": 8.6,
        "DEST": "PIRAEUS",
        "ETA": "2017-05-04 06:00:00",
    }


@pytest.fixture
def translator() -> RecordTranslator:
    return RecordTranslator(self_context=SELF_CONTEXT)
