"""Shared test data."""


def reservation(**overrides) -> dict:
    data = {
        "name": "Anwar Charles",
        "phone": "+44 7700 900111",
        "date": "2024-12-09",
        "time": "15:00",
        "guests": 3,
    }
    data.update(overrides)
    return data
