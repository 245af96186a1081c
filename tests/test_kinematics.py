#!/usr/bin/env python3
"""
Kinematics Test
===============

1. local planar projection (x=East, y=North)
2. haversine range / rhumb-line bearing
3. CPA/TCPA: head-on, parallel, diverging, horizon
4. self position 없음 → NoFixError
"""
import numpy as np
import pytest

from ais_risk_core import calculate_cpa_tcpa, compute_kinematics, NoFixError
from ais_risk_core.geometry import (
    latlon_to_planar,
    haversine_distance,
    rhumb_line_bearing,
    course_speed_to_velocity,
    clamp_latitude,
)
from ais_risk_core.tracking.kinematics import update_projection

from conftest import SELF_MMSI, OTHER_MMSI


class TestGeometry:

    def test_planar_projection(self):
        x, y = latlon_to_planar(39.0, -75.0, 39.0)
        assert y == pytest.approx(39.0 * 111120.0)
        assert x == pytest.approx(-75.0 * 111120.0 * np.cos(np.radians(39.0)))

    def test_projection_near_pole_stays_finite(self):
        x, _ = latlon_to_planar(90.0, 10.0, 90.0)
        assert np.isfinite(x)
        assert x > 0
        assert clamp_latitude(95.0) == 89.9
        assert clamp_latitude(-90.0) == -89.9

    def test_haversine(self):
        assert haversine_distance(39.0, -75.0, 39.01, -75.0) == pytest.approx(1111.95, abs=0.1)
        assert haversine_distance(39.0, -75.0, 39.0, -75.0) == 0.0

    @pytest.mark.parametrize("lat2, lon2, expected", [
        (39.01, -75.0, 0.0),
        (39.0, -74.99, 90.0),
        (38.99, -75.0, 180.0),
        (39.0, -75.01, 270.0),
    ])
    def test_rhumb_bearing_cardinal(self, lat2, lon2, expected):
        assert rhumb_line_bearing(39.0, -75.0, lat2, lon2) == pytest.approx(expected, abs=1e-6)

    def test_rhumb_bearing_across_antimeridian(self):
        # 179.9E → 179.9W is a short hop east, not most of the way round
        assert rhumb_line_bearing(0.0, 179.9, 0.0, -179.9) == pytest.approx(90.0)
        assert rhumb_line_bearing(0.0, -179.9, 0.0, 179.9) == pytest.approx(270.0)

    def test_course_to_velocity(self):
        vx, vy = course_speed_to_velocity(0.0, 5.0)
        assert (vx, vy) == pytest.approx((0.0, 5.0))
        vx, vy = course_speed_to_velocity(np.pi / 2, 5.0)
        assert (vx, vy) == pytest.approx((5.0, 0.0), abs=1e-12)


class TestCpaTcpa:

    def test_head_on(self):
        cpa, tcpa = calculate_cpa_tcpa((0, 0), (0, 5), (0, 1000), (0, -5))
        assert cpa == 0
        assert tcpa == 100

    def test_crossing_miss(self):
        # target 1000 m east heading west; own ship heading north
        cpa, tcpa = calculate_cpa_tcpa((0, 0), (0, 5), (1000, 0), (-5, 0))
        assert tcpa == 100
        assert cpa == round(np.hypot(500, 500))

    def test_parallel_tracks(self):
        assert calculate_cpa_tcpa((0, 0), (0, 5), (100, 0), (0, 5)) == (None, None)

    def test_diverging(self):
        assert calculate_cpa_tcpa((0, 0), (0, 5), (0, 1000), (0, 6)) == (None, None)

    def test_beyond_horizon(self):
        assert calculate_cpa_tcpa((0, 0), (0, 0), (0, 100000), (0, -1)) == (None, None)
        assert calculate_cpa_tcpa((0, 0), (0, 0), (0, 100000), (0, -1), max_tcpa=200000) == (0, 100000)


class TestComputeKinematics:

    def test_range_and_bearing(self, scenario):
        north = scenario(latitude=39.01)
        east = scenario("234567890", longitude=-74.99)

        compute_kinematics(scenario.store)

        assert north.range == 1112
        assert north.bearing == 0
        assert east.bearing == 90

    def test_head_on_targets(self, scenario):
        scenario.own.sog = 5.0
        target = scenario(latitude=39.05, cog=np.pi, sog=5.0)

        compute_kinematics(scenario.store)

        assert target.tcpa == 556
        assert target.cpa < 100

    def test_parallel_and_diverging(self, scenario):
        scenario.own.sog = 5.0
        parallel = scenario(longitude=-74.99, sog=5.0)
        ahead = scenario("234567890", latitude=39.01, sog=6.0)

        compute_kinematics(scenario.store)

        assert (parallel.cpa, parallel.tcpa) == (None, None)
        assert (ahead.cpa, ahead.tcpa) == (None, None)
        assert ahead.range == 1112

    def test_target_without_position(self, scenario):
        target = scenario(latitude=None, longitude=None, sog=None, cog=None)

        compute_kinematics(scenario.store)

        assert target.x is None and target.y is None
        assert (target.vx, target.vy) == (0.0, 0.0)
        assert target.range is None
        assert target.bearing is None
        assert target.cpa is None and target.tcpa is None

    def test_shared_reference_latitude(self, scenario):
        target = scenario(latitude=60.0, longitude=10.0)
        update_projection(scenario.own, scenario.own)
        update_projection(target, scenario.own)

        assert target.x == pytest.approx(10.0 * 111120.0 * np.cos(np.radians(39.0)))

    def test_no_self_target(self, store, make_target):
        store.put(make_target(OTHER_MMSI, range=500))

        with pytest.raises(NoFixError):
            compute_kinematics(store)
        assert store.get(OTHER_MMSI).range == 500

    def test_self_without_position(self, scenario):
        scenario.own.latitude = None
        target = scenario(range=500)

        with pytest.raises(NoFixError) as excinfo:
            compute_kinematics(scenario.store)
        assert excinfo.value.self_mmsi == SELF_MMSI
        assert target.range == 500

    def test_near_pole_range_and_bearing(self, scenario):
        scenario.own.latitude = 89.9
        scenario.own.longitude = 0.0
        target = scenario(latitude=89.95, longitude=120.0)

        compute_kinematics(scenario.store)

        assert target.range == 14710
        assert target.bearing == 72
        assert np.isfinite(target.x) and np.isfinite(target.y)

    def test_zero_coordinates_are_a_fix(self, scenario):
        scenario.own.latitude = 0.0
        scenario.own.longitude = 0.0
        target = scenario(latitude=0.01, longitude=0.0)

        compute_kinematics(scenario.store)

        assert target.range == 1112
