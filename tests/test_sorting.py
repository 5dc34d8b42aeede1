from __future__ import annotations

import pytest

from pyhc3.models.device import Device
from pyhc3.state.sorting import natural_key, sort_devices


def _devices() -> list[Device]:
    return [
        Device(id=10, name="Sonos 10", type="com.fibaro.player", modified=300),
        Device(id=9, name="sonos 9", type="com.fibaro.player", modified=None),
        Device(id=100, name=None, type="com.fibaro.binarySwitch", modified=200),
        Device(id=1, name="Alarm", type=None, modified=1000),
    ]


def test_natural_key_orders_digit_runs_numerically() -> None:
    assert natural_key("app2") < natural_key("app10")
    assert natural_key("App") == natural_key("app")
    assert natural_key(None) == natural_key("")


@pytest.mark.parametrize(
    ("column", "expected"),
    [
        ("id", [1, 9, 10, 100]),
        ("name", [100, 1, 9, 10]),
        ("type", [1, 100, 10, 9]),
        ("modified", [9, 100, 10, 1]),
    ],
)
def test_sort_devices_by_column(column: str, expected: list[int]) -> None:
    assert [d.id for d in sort_devices(_devices(), column)] == expected


def test_sort_devices_descending() -> None:
    assert [d.id for d in sort_devices(_devices(), "id", descending=True)] == [100, 10, 9, 1]


def test_sort_devices_rejects_unknown_column() -> None:
    with pytest.raises(ValueError):
        sort_devices(_devices(), "room")
