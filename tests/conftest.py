import pytest


def make_approach(date, kph="65260.5699103704", km="45290298.225725659"):
    approach = {
        "close_approach_date": date,
        "close_approach_date_full": f"{date} 20:28",
        "relative_velocity": {
            "kilometers_per_second": "18.1279360862",
            "miles_per_hour": "40550.3802312521",
        },
        "miss_distance": {
            "astronomical": "0.3027469457",
            "lunar": "117.7685618773",
            "miles": "28142086.3515817342",
        },
        "orbiting_body": "Earth",
    }
    if kph is not None:
        approach["relative_velocity"]["kilometers_per_hour"] = kph
    if km is not None:
        approach["miss_distance"]["kilometers"] = km
    return approach


def make_asteroid(asteroid_id="2465633", approaches=None, d_min=0.2170475943, d_max=0.4853331752):
    return {
        "id": asteroid_id,
        "neo_reference_id": asteroid_id,
        "name": f"({asteroid_id})",
        "estimated_diameter": {
            "kilometers": {
                "estimated_diameter_min": d_min,
                "estimated_diameter_max": d_max,
            },
            "meters": {
                "estimated_diameter_min": d_min * 1000,
                "estimated_diameter_max": d_max * 1000,
            },
        },
        "is_potentially_hazardous_asteroid": True,
        "close_approach_data": approaches if approaches is not None else [make_approach("2999-01-01")],
    }


@pytest.fixture
def asteroid_factory():
    return make_asteroid


@pytest.fixture
def approach_factory():
    return make_approach
