"""The fixed satellite registry shown by the visualizer."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SatelliteClass(Enum):
    STATION = "STATION"
    GPS = "GPS"
    LEO = "LEO"
    COMM = "COMM"
    RELAY = "RELAY"


@dataclass(frozen=True)
class SatelliteSpec:
    id: str
    sat_class: SatelliteClass
    altitude: float
    inclination_deg: float
    color: tuple[int, int, int]
    launch_date: str


SATELLITE_DEFINITIONS: tuple[SatelliteSpec, ...] = (
    SatelliteSpec(
        id="ISS-ALPHA",
        sat_class=SatelliteClass.STATION,
        altitude=408_000.0,
        inclination_deg=51.6,
        color=(255, 204, 0),
        launch_date="1998-11-20",
    ),
    SatelliteSpec(
        id="CHRONOS-01",
        sat_class=SatelliteClass.GPS,
        altitude=20_200_000.0,
        inclination_deg=55.0,
        color=(0, 242, 255),
        launch_date="2014-05-18",
    ),
    SatelliteSpec(
        id="AURA-NET",
        sat_class=SatelliteClass.LEO,
        altitude=1_200_000.0,
        inclination_deg=98.0,
        color=(0, 255, 170),
        launch_date="2021-02-14",
    ),
    SatelliteSpec(
        id="STAR-LINK",
        sat_class=SatelliteClass.COMM,
        altitude=550_000.0,
        inclination_deg=53.0,
        color=(255, 255, 255),
        launch_date="2019-11-11",
    ),
    SatelliteSpec(
        id="SPECTER-9",
        sat_class=SatelliteClass.RELAY,
        altitude=15_000_000.0,
        inclination_deg=15.0,
        color=(255, 68, 0),
        launch_date="2023-08-30",
    ),
)

SATELLITE_IDS: list[str] = [spec.id for spec in SATELLITE_DEFINITIONS]
SATELLITES: dict[str, SatelliteSpec] = {spec.id: spec for spec in SATELLITE_DEFINITIONS}


__all__ = [
    "SATELLITE_DEFINITIONS",
    "SATELLITE_IDS",
    "SATELLITES",
    "SatelliteClass",
    "SatelliteSpec",
]
