"""Tests for AisHub record translation."""

import json
import math

import pytest

from aishub_ws.ais.adapters.base import AISDataFetchError
from aishub_ws.ais.models import PathValue
from aishub_ws.ais.translator import (
    MalformedRecordError,
    RecordTranslator,
    UpstreamError,
    parse_response,
    vessel_context,
)

from tests.conftest import SELF_CONTEXT


class TestTranslate:
    """Test RecordTranslator.translate()."""

    def test_full_record(self, translator, vessel_record):
        """Every mapped field of a complete record is translated."""
        delta = translator.translate(vessel_record)

        assert delta.context == "vessels.urn:mrn:imo:mmsi:237012345"
        assert len(delta.updates) == 1

        update = delta.updates[0]
        assert update.timestamp == "2017-05-03T10:15:42Z"
        assert update.source_label == "aishub"

        assert delta.get_value("mmsi") == "237012345"
        assert delta.get_value("name") == "AEGEAN STAR"
        assert delta.get_value("callsign") == "SVAB2"
        assert delta.get_value("imo") == "9312345"
        assert delta.get_value("navigation.courseOverGroundTrue") == pytest.approx(math.pi / 2)
        assert delta.get_value("navigation.headingTrue") == pytest.approx(math.pi)
        assert delta.get_value("navigation.speedOverGround") == pytest.approx(5.14444)
        assert delta.get_value("navigation.destination.commonName") == "PIRAEUS"
        assert delta.get_value("navigation.position") == {
            "latitude": 40.6001,
            "longitude": 22.9312,
        }
        assert delta.get_value("navigation.state") == "motoring"
        assert delta.get_value("design.length") == {"overall": 150}
        assert delta.get_value("design.beam") == 26
        assert delta.get_value("design.draft") == {"maximum": 8.6}
        assert delta.get_value("design.aisShipType") == {"id": 70, "name": "Cargo ship"}
        assert delta.get_value("sensors.ais.fromBow") == 120
        assert delta.get_value("sensors.ais.fromCenter") == -1
        assert (
            delta.get_value("navigation.courseGreatCircle.activeRoute.estimatedTimeOfArrival")
            == "2017-05-04T06:00:00Z"
        )

    def test_root_values(self, translator, vessel_record):
        """Identity fields are written as root objects with an empty path."""
        delta = translator.translate(vessel_record)
        assert PathValue("", {"mmsi": "237012345"}) in delta.values
        assert PathValue("", {"imo": "9312345"}) in delta.values

    def test_values_follow_rule_order(self, translator, vessel_record):
        delta = translator.translate(vessel_record)
        paths = [v.path for v in delta.values]
        assert paths[:4] == ["", "", "", ""]
        assert paths[4] == "navigation.courseOverGroundTrue"
        assert paths[-1] == "navigation.courseGreatCircle.activeRoute.estimatedTimeOfArrival"

    def test_only_identity_for_sentinels(self, translator):
        """A record with only 'not available' values yields the MMSI alone."""
        record = {
            "MMSI": 123456789,
            "COG": 360,
            "HEADING": 511,
            "SOG": 102.4,
            "DRAUGHT": 0,
            "A": 0,
            "B": 0,
            "C": 0,
            "D": 0,
        }
        delta = translator.translate(record)

        assert delta is not None
        assert delta.values == (PathValue("", {"mmsi": "123456789"}),)
        assert delta.to_dict() == {
            "context": "vessels.urn:mrn:imo:mmsi:123456789",
            "updates": [
                {
                    "source": {"label": "aishub"},
                    "values": [{"path": "", "value": {"mmsi": "123456789"}}],
                }
            ],
        }

    def test_valid_heading_is_kept(self, translator):
        """Only the 511 sentinel removes the heading."""
        delta = translator.translate({"MMSI": 123456789, "COG": 360, "HEADING": 90})
        assert delta.get_value("navigation.headingTrue") == pytest.approx(math.pi / 2, abs=1e-9)
        assert delta.get_value("navigation.courseOverGroundTrue") is None

    def test_empty_strings_are_skipped(self, translator):
        delta = translator.translate(
            {"MMSI": 123456789, "NAME": "", "CALLSIGN": "", "DEST": "", "ETA": ""}
        )
        assert delta.values == (PathValue("", {"mmsi": "123456789"}),)

    def test_null_values_are_skipped(self, translator):
        delta = translator.translate({"MMSI": 123456789, "NAME": None})
        assert delta.get_value("name") is None

    def test_self_is_ignored(self, vessel_record):
        """The observer's own record is never reported."""
        translator = RecordTranslator(self_context="vessels.urn:mrn:imo:mmsi:237012345")
        assert translator.translate(vessel_record) is None

    def test_idempotent(self, translator, vessel_record):
        assert translator.translate(vessel_record) == translator.translate(vessel_record)

    def test_record_not_modified(self, translator, vessel_record):
        original = dict(vessel_record)
        translator.translate(vessel_record)
        assert vessel_record == original

    def test_no_time(self, translator):
        delta = translator.translate({"MMSI": 123456789})
        assert delta.updates[0].timestamp is None
        assert "timestamp" not in delta.to_dict()["updates"][0]

    def test_custom_source_label(self, vessel_record):
        translator = RecordTranslator(self_context=SELF_CONTEXT, source_label="aishub-test")
        delta = translator.translate(vessel_record)
        assert delta.to_dict()["updates"][0]["source"] == {"label": "aishub-test"}

    def test_vessel_context(self):
        assert vessel_context(244690000) == "vessels.urn:mrn:imo:mmsi:244690000"

    def test_missing_partner_dimension(self, translator):
        """A dimension without its partner offset is omitted, the rest is kept."""
        delta = translator.translate(
            {"MMSI": 244690000, "LATITUDE": 52.1, "LONGITUDE": 4.2, "NAME": "X", "A": 10, "C": 5}
        )

        assert delta.get_value("mmsi") == "244690000"
        assert delta.get_value("name") == "X"
        assert delta.get_value("navigation.position") == {"latitude": 52.1, "longitude": 4.2}
        assert delta.get_value("sensors.ais.fromBow") is None
        assert delta.get_value("design.length") is None
        assert delta.get_value("sensors.ais.fromCenter") is None
        assert delta.get_value("design.beam") is None

    def test_non_numeric_partner_dimension(self, translator):
        delta = translator.translate({"MMSI": 244690000, "A": 10, "B": "n/a", "C": 6, "D": 6})
        assert delta.get_value("design.length") is None
        assert delta.get_value("design.beam") == 12


class TestMalformedRecords:
    """Test records that cannot be translated."""

    def test_missing_mmsi(self, translator):
        with pytest.raises(MalformedRecordError):
            translator.translate({"NAME": "NO MMSI"})

    def test_not_an_object(self, translator):
        with pytest.raises(MalformedRecordError):
            translator.translate(["MMSI", 123456789])

    def test_non_string_time(self, translator):
        with pytest.raises(MalformedRecordError):
            translator.translate({"MMSI": 123456789, "TIME": 1493806542})

    def test_non_numeric_course(self, translator):
        with pytest.raises(MalformedRecordError) as exc_info:
            translator.translate({"MMSI": 123456789, "COG": "north"})
        assert exc_info.value.record == {"MMSI": 123456789, "COG": "north"}


class TestTranslateBatch:
    """Test RecordTranslator.translate_batch()."""

    def test_order_preserved(self, translator):
        records = [{"MMSI": 200000003}, {"MMSI": 200000001}, {"MMSI": 200000002}]
        deltas = translator.translate_batch(records)
        assert [d.get_value("mmsi") for d in deltas] == ["200000003", "200000001", "200000002"]

    def test_malformed_record_skipped(self, translator):
        """A bad record does not stop its siblings."""
        records = [{"MMSI": 200000001}, {"NAME": "BROKEN"}, "garbage", {"MMSI": 200000002}]
        deltas = translator.translate_batch(records)
        assert [d.get_value("mmsi") for d in deltas] == ["200000001", "200000002"]

    def test_self_dropped(self, translator):
        records = [{"MMSI": 111111111}, {"MMSI": 200000001}]
        deltas = translator.translate_batch(records)
        assert [d.context for d in deltas] == ["vessels.urn:mrn:imo:mmsi:200000001"]

    def test_empty_batch(self, translator):
        assert translator.translate_batch([]) == []

    def test_batch_keeps_vessel_with_partial_dimensions(self, translator):
        records = [{"MMSI": 244690000, "LATITUDE": 52.1, "LONGITUDE": 4.2, "NAME": "X", "A": 10}]
        deltas = translator.translate_batch(records)

        assert len(deltas) == 1
        assert deltas[0].get_value("navigation.position") == {"latitude": 52.1, "longitude": 4.2}


class TestParseResponse:
    """Test parse_response()."""

    def test_captured_response(self, response_file):
        records = parse_response(response_file.read_text())
        assert [r["MMSI"] for r in records] == [237012345, 240098765, 239111222]

    def test_error_flag(self):
        payload = json.dumps([{"ERROR": True, "ERROR_MESSAGE": "Too frequent requests!"}])
        with pytest.raises(UpstreamError, match="Too frequent requests!"):
            parse_response(payload, source="AisHub")

    def test_upstream_error_is_fetch_error(self):
        with pytest.raises(AISDataFetchError):
            parse_response([{"ERROR": True}])

    def test_invalid_json(self):
        with pytest.raises(UpstreamError):
            parse_response("<html>Service unavailable</html>")

    @pytest.mark.parametrize("payload", ["{}", "[]", "[1, []]", '[{"ERROR": false}, {}]'])
    def test_unexpected_structure(self, payload):
        with pytest.raises(UpstreamError):
            parse_response(payload)

    def test_no_records(self):
        assert parse_response('[{"ERROR": false, "RECORDS": 0}]') == []

    def test_translate_response(self, translator, response_file):
        deltas = translator.translate_response(response_file.read_bytes())
        assert len(deltas) == 3

        tender = deltas[1]
        assert tender.get_value("navigation.state") == "moored"
        assert tender.get_value("design.aisShipType") == {"id": 53, "name": "Port tender"}
        assert tender.get_value("navigation.courseOverGroundTrue") is None
        assert tender.get_value("navigation.headingTrue") is None
        assert tender.get_value("navigation.speedOverGround") == 0
        assert tender.get_value("callsign") is None

        unknown = deltas[2]
        assert unknown.get_value("navigation.speedOverGround") is None
        assert unknown.get_value("navigation.state") is None
        assert unknown.get_value("design.length") is None
        assert unknown.get_value("sensors.ais.fromCenter") is None
        assert unknown.get_value("callsign") == "SX1234"
