"""
AIS Risk Core - Quick Start Example

Own ship + 3 AIS targets: delta 수신, tick, 우선순위 목록 출력
"""
import logging
from datetime import datetime, timezone

from ais_risk_core import TargetTracker, default_profiles
from ais_risk_core.formatter import format_target

OWN_MMSI = "366000001"


def delta(mmsi, latitude, longitude, sog, cog, name, when):
    return {
        "context": f"vessels.urn:mrn:imo:mmsi:{mmsi}",
        "updates": [
            {
                "timestamp": when.isoformat(),
                "values": [
                    {"path": "", "value": {"name": name}},
                    {"path": "navigation.position", "value": {"latitude": latitude, "longitude": longitude}},
                    {"path": "navigation.speedOverGround", "value": sog},
                    {"path": "navigation.courseOverGroundTrue", "value": cog},
                ],
            }
        ],
    }


def main():
    logging.basicConfig(level=logging.INFO)
    now = datetime.now(timezone.utc)

    print("=" * 60)
    print("AIS Risk Core - Quick Start")
    print("=" * 60)

    # 1. 초기화 (harbor profile)
    tracker = TargetTracker(OWN_MMSI, default_profiles())

    # 2. Own ship: 5 m/s North
    tracker.apply_delta(delta(OWN_MMSI, 39.0, -75.0, 5.0, 0.0, "OWN SHIP", now), now)

    # 3. Targets
    tracker.apply_delta(delta("366123456", 39.02, -75.0, 5.0, 3.14159, "HEAD ON", now), now)
    tracker.apply_delta(delta("366234567", 39.0, -74.98, 4.0, 4.71239, "CROSSING", now), now)
    tracker.apply_delta(delta("366345678", 38.95, -75.0, 2.0, 0.0, "ASTERN", now), now)

    # 4. Recompute
    result = tracker.tick(now)
    print(f"\nTick: {result.status.value}, classified={result.classified}")

    # 5. 우선순위 목록
    print("\n[Targets, most urgent first]")
    for target in tracker.ranked():
        text = format_target(target)
        state = target.alarm_state.value.upper() if target.alarm_state else "-"
        print(
            f"{text['name']:<10} order={target.order:>6} {state:<8} "
            f"range={text['range']:<8} brg={text['bearing']:<6} "
            f"cpa={text['cpa']:<8} tcpa={text['tcpa']}"
        )

    # 6. Alarm notices
    for notice in tracker.alarm_notices():
        print(f"\n[{notice.state.upper()}] {notice.message}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
