#!/usr/bin/env python3
"""
Update Merger Test
==================

1. delta context → MMSI 추출 및 검증
2. 경로별 field merge (navigation, identity, design, AtoN)
3. 기존 field 유지 (partial update)
4. bulk snapshot 적재 및 aged-out entry 제외
"""
from datetime import datetime, timedelta

import pytest

from ais_risk_core import process_update, load_snapshot
from ais_risk_core.tracking.merger import TargetPatch, UNSET, parse_value, parse_timestamp

from conftest import NOW, SELF_MMSI


def delta(context, *values, timestamp="2024-01-01T00:00:00Z"):
    return {
        "context": context,
        "updates": [
            {
                "timestamp": timestamp,
                "values": [{"path": p, "value": v} for p, v in values],
            }
        ],
    }


VESSEL = "vessels.urn:mrn:imo:mmsi:123456789"


class TestContextValidation:

    def test_valid_delta_creates_target(self, store):
        mmsi = process_update(
            delta(
                VESSEL,
                ("", {"name": "TEST VESSEL"}),
                ("navigation.position", {"latitude": 39.0, "longitude": -75.0}),
            ),
            store,
        )

        assert mmsi == "123456789"
        target = store.get("123456789")
        assert target.name == "TEST VESSEL"
        assert target.latitude == 39.0
        assert target.context == VESSEL

    def test_missing_context_is_rejected(self, store):
        assert process_update({"updates": []}, store) is None
        assert len(store) == 0

    @pytest.mark.parametrize("context", [
        "vessels.urn:mrn:invalid",
        "vessels.urn:mrn:imo:mmsi:12345678",
        "vessels.urn:mrn:imo:mmsi:12345678x",
        "",
    ])
    def test_malformed_mmsi_is_rejected(self, store, context):
        assert process_update(delta(context, ("navigation.speedOverGround", 3.0)), store) is None
        assert len(store) == 0

    def test_context_alone_is_enough(self, store):
        assert process_update({"context": VESSEL}, store) == "123456789"
        target = store.get("123456789")
        assert target.sog == 0
        assert target.cog == 0

    def test_unknown_paths_are_ignored(self, store):
        mmsi = process_update(delta(VESSEL, ("environment.wind.speedTrue", 12.0)), store)
        assert mmsi == "123456789"
        assert store.get(mmsi).latitude is None


class TestFieldMerge:

    def test_navigation_fields(self, store):
        process_update(
            delta(
                VESSEL,
                ("navigation.speedOverGround", 5.14),
                ("navigation.courseOverGroundTrue", 1.57),
                ("navigation.headingTrue", 1.57),
                ("navigation.rateOfTurn", 0.01),
                ("navigation.state", "motoring"),
                ("navigation.destination.commonName", "CAPE MAY"),
            ),
            store,
        )
        target = store.get("123456789")
        assert target.sog == 5.14
        assert target.cog == 1.57
        assert target.hdg == 1.57
        assert target.rot == 0.01
        assert target.status == "motoring"
        assert target.destination == "CAPE MAY"

    def test_update_keeps_other_fields(self, store):
        process_update(
            delta(VESSEL, ("", {"name": "OLD NAME"}), ("navigation.speedOverGround", 4.0)),
            store,
        )
        store.get("123456789").cpa = 250    # derived value from a previous tick

        process_update(delta(VESSEL, ("", {"name": "NEW NAME"})), store)

        target = store.get("123456789")
        assert target.name == "NEW NAME"
        assert target.sog == 4.0
        assert target.cpa == 250

    def test_position_refreshes_last_seen(self, store):
        process_update(
            delta(
                VESSEL,
                ("navigation.position", {"latitude": 0.0, "longitude": 0.0}),
                timestamp="2024-01-01T11:59:30Z",
            ),
            store,
            now=NOW,
        )
        target = store.get("123456789")
        assert target.latitude == 0.0
        assert target.longitude == 0.0
        assert target.has_position
        assert target.last_seen_date == NOW - timedelta(seconds=30)

    def test_non_position_update_keeps_last_seen(self, store):
        process_update(delta(VESSEL, ("navigation.speedOverGround", 1.0)), store, now=NOW)
        assert store.get("123456789").last_seen_date is None

    def test_identity_object(self, store):
        process_update(delta(VESSEL, ("", {"communication": {"callsignVhf": "WDC1234"}})), store)
        process_update(delta(VESSEL, ("", {"registrations": {"imo": "IMO 9074729"}})), store)

        target = store.get("123456789")
        assert target.callsign == "WDC1234"
        assert target.imo == "9074729"

    def test_design_fields(self, store):
        process_update(
            delta(
                VESSEL,
                ("design.aisShipType", {"id": 36, "name": "Sailing"}),
                ("design.length", {"overall": 12.2}),
                ("design.beam", 4.1),
                ("design.draft", {"current": 1.8}),
                ("sensors.ais.class", "B"),
            ),
            store,
        )
        target = store.get("123456789")
        assert target.type_id == 36
        assert target.type_name == "Sailing"
        assert target.length == 12.2
        assert target.beam == 4.1
        assert target.draft == 1.8
        assert target.ais_class == "B"

    def test_aton_fields(self, store):
        process_update(
            delta(
                "atons.urn:mrn:imo:mmsi:991234567",
                ("atonType", {"id": 1, "name": "Buoy"}),
                ("offPosition", True),
                ("virtual", False),
            ),
            store,
        )
        target = store.get("991234567")
        assert target.type_id == 1
        assert target.type_name == "Buoy"
        assert target.is_off_position is True
        assert target.is_virtual is False
        assert target.status == "default"
        assert target.is_aid_to_navigation

    def test_aton_type_keeps_known_status(self, store):
        process_update(
            delta(
                "atons.urn:mrn:imo:mmsi:991234567",
                ("navigation.state", "on station"),
                ("atonType", {"id": 1, "name": "Buoy"}),
            ),
            store,
        )
        assert store.get("991234567").status == "on station"

    def test_malformed_value_is_skipped(self, store):
        mmsi = process_update(
            delta(
                VESSEL,
                ("navigation.position", "not a position"),
                ("navigation.speedOverGround", 2.0),
            ),
            store,
        )
        target = store.get(mmsi)
        assert target.latitude is None
        assert target.sog == 2.0


class TestPatch:

    def test_parse_value_unknown_path(self):
        assert parse_value("foo.bar", 1, NOW) is None

    def test_unset_fields_not_applied(self, make_target):
        target = make_target(name="KEEP")
        TargetPatch(sog=7.0).apply_to(target)
        assert target.sog == 7.0
        assert target.name == "KEEP"

    def test_none_is_applied(self, make_target):
        target = make_target()
        TargetPatch(latitude=None, longitude=None).apply_to(target)
        assert not target.has_position

    def test_empty_patch(self):
        assert TargetPatch().is_empty()
        assert not TargetPatch(name=None).is_empty()
        assert TargetPatch().name is UNSET

    def test_timestamp_fallback(self):
        assert parse_timestamp("garbage", NOW) == NOW
        assert parse_timestamp(None, NOW) == NOW
        assert parse_timestamp("2024-01-01T12:00:00Z") == NOW

    def test_naive_times_are_utc(self, store):
        naive_now = datetime(2024, 1, 1, 12)
        assert parse_timestamp("2024-01-01T12:00:00", naive_now) == NOW
        assert parse_timestamp(None, naive_now) == NOW

        process_update(
            delta(VESSEL, ("navigation.position", {"latitude": 39.0, "longitude": -75.0}), timestamp=None),
            store,
            now=naive_now,
        )
        target = store.get("123456789")
        assert target.last_seen_date == NOW
        assert target.first_seen_date == NOW


class TestSnapshot:

    def vessel(self, mmsi, timestamp, **extra):
        vessel = {
            "mmsi": mmsi,
            "name": "SNAP",
            "navigation": {
                "position": {
                    "value": {"latitude": 39.1, "longitude": -75.2},
                    "timestamp": timestamp,
                },
                "speedOverGround": {"value": 3.2},
                "courseOverGroundTrue": {"value": 0.5},
            },
            "design": {"length": {"value": {"overall": 30.0}}},
        }
        vessel.update(extra)
        return vessel

    def test_load_snapshot(self, store):
        vessels = {
            "urn:mrn:imo:mmsi:123456789": self.vessel("123456789", "2024-01-01T11:55:00Z"),
        }
        loaded = load_snapshot(vessels, store, max_age_seconds=1800, now=NOW)

        assert loaded == ["123456789"]
        target = store.get("123456789")
        assert target.name == "SNAP"
        assert target.latitude == 39.1
        assert target.sog == 3.2
        assert target.length == 30.0
        assert target.ais_class == "A"
        assert target.context == "urn:mrn:imo:mmsi:123456789"

    def test_aged_out_entries_are_discarded(self, store):
        vessels = {
            "a": self.vessel("123456789", "2024-01-01T11:00:00Z"),
            "b": self.vessel("234567890", "2024-01-01T11:59:00Z"),
        }
        loaded = load_snapshot(vessels, store, max_age_seconds=1800, now=NOW)

        assert loaded == ["234567890"]
        assert "123456789" not in store

    def test_invalid_mmsi_is_skipped(self, store):
        vessels = {"bad": self.vessel("12345", "2024-01-01T11:59:00Z")}
        assert load_snapshot(vessels, store, max_age_seconds=1800, now=NOW) == []

    def test_naive_clock_is_utc(self, store):
        vessels = {
            "a": self.vessel("123456789", "2024-01-01T11:59:00Z"),
            "b": self.vessel("234567890", "2024-01-01T11:00:00Z"),
        }
        loaded = load_snapshot(vessels, store, max_age_seconds=1800, now=datetime(2024, 1, 1, 12))

        assert loaded == ["123456789"]
        assert store.get("123456789").first_seen_date == NOW

    def test_snapshot_keeps_session_fields(self, store):
        target = store.get_or_create("123456789", NOW)
        target.alarm_is_muted = True
        vessels = {"a": self.vessel("123456789", "2024-01-01T11:59:00Z")}

        load_snapshot(vessels, store, max_age_seconds=1800, now=NOW)

        assert store.get("123456789").alarm_is_muted is True


def test_store_remove_protects_self(store):
    store.get_or_create(SELF_MMSI, NOW)
    store.get_or_create("123456789", NOW)

    assert store.remove(SELF_MMSI) is False
    assert store.remove("123456789") is True
    assert store.remove("123456789") is False
    assert store.ids() == [SELF_MMSI]


def test_upsert_from_snapshot_replaces_raw_fields(store):
    store.upsert_from_snapshot("123456789", {"name": "A", "sog": 3.0}, NOW)
    store.upsert_from_snapshot("123456789", {"name": "B"}, NOW)

    target = store.get("123456789")
    assert target.name == "B"
    assert target.sog is None
