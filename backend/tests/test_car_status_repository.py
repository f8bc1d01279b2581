"""
Tests for the composite status query
"""
from datetime import timedelta
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from carstatus.core.exceptions import (CarNotFoundError, DataAccessError,
                                       NoStatusDataError)
from carstatus.services.car_status_repository import CarStatusRepository


def test_exists(db, teslamate, now):
    teslamate.car(1)
    repository = CarStatusRepository(db)

    assert repository.exists(1) is True
    assert repository.exists(999) is False


def test_fetch_car_without_telemetry(db, teslamate, now):
    teslamate.car(2, name="Bare")

    record = CarStatusRepository(db).fetch(2)

    assert record.car_id == 2
    assert record.name == "Bare"
    assert record.position_date is None
    assert record.state is None
    assert record.is_charging is False
    assert record.charging_state == "disconnected"
    assert record.charger_power is None
    assert record.unit_of_length is None


def test_fetch_picks_latest_position_and_state(db, teslamate, now):
    teslamate.car(1, name="Test Tesla", model="3", vin="5YJ3E1EA4JF123456")
    teslamate.position(1, date=now - timedelta(hours=2), odometer=100.0, battery_level=50)
    teslamate.position(1, date=now - timedelta(minutes=1), odometer=120.5, battery_level=80,
                       speed=30, inside_temp=21.5, is_climate_on=True, tpms_pressure_fl=2.9)
    teslamate.position(1, date=now - timedelta(hours=1), odometer=110.0, battery_level=60)
    teslamate.state(1, state="asleep", start_date=now - timedelta(days=1))
    teslamate.state(1, state="online", start_date=now - timedelta(minutes=10))

    record = CarStatusRepository(db).fetch(1)

    assert record.vin == "5YJ3E1EA4JF123456"
    assert record.odometer == 120.5
    assert record.battery_level == 80
    assert record.speed == 30
    assert record.inside_temp == 21.5
    assert record.is_climate_on is True
    assert record.tpms_pressure_fl == 2.9
    assert record.position_date == now - timedelta(minutes=1)
    assert record.state == "online"
    assert record.state_since == now - timedelta(minutes=10)


def test_fetch_ignores_other_cars(db, teslamate, now):
    teslamate.car(1)
    teslamate.car(2)
    teslamate.position(1, date=now - timedelta(hours=1), odometer=1.0)
    teslamate.position(2, date=now, odometer=2.0)
    teslamate.state(2, state="driving", start_date=now)

    record = CarStatusRepository(db).fetch(1)

    assert record.odometer == 1.0
    assert record.state is None


def test_position_ties_break_on_highest_id(db, teslamate, now):
    teslamate.car(1)
    teslamate.position(1, date=now, odometer=10.0)
    teslamate.position(1, date=now, odometer=20.0)
    repository = CarStatusRepository(db)

    first = repository.fetch(1)
    second = repository.fetch(1)

    assert first.odometer == 20.0
    assert first == second


def test_open_charging_process_with_latest_charge(db, teslamate, now):
    teslamate.car(1)
    closed = teslamate.charging_process(1, start_date=now - timedelta(days=1),
                                        end_date=now - timedelta(hours=20))
    teslamate.charge(closed.id, date=now - timedelta(hours=21), charger_power=50)
    open_process = teslamate.charging_process(1, start_date=now - timedelta(minutes=40))
    teslamate.charge(open_process.id, date=now - timedelta(minutes=20), charger_power=10,
                     charger_voltage=230, charger_phases=3, charger_actual_current=14,
                     charge_energy_added=3.1)
    teslamate.charge(open_process.id, date=now - timedelta(minutes=1), charger_power=11,
                     charger_voltage=235, charger_phases=3, charger_actual_current=16,
                     charge_energy_added=4.7)

    record = CarStatusRepository(db).fetch(1)

    assert record.is_charging is True
    assert record.charging_state == "charging"
    assert record.charger_power == 11
    assert record.charger_voltage == 235
    assert record.charger_phases == 3
    assert record.charger_actual_current == 16
    assert record.charge_energy_added == 4.7


def test_closed_charging_process_is_not_charging(db, teslamate, now):
    teslamate.car(1)
    process = teslamate.charging_process(1, start_date=now - timedelta(hours=3),
                                         end_date=now - timedelta(hours=1))
    teslamate.charge(process.id, date=now - timedelta(hours=2), charger_power=7)

    record = CarStatusRepository(db).fetch(1)

    assert record.is_charging is False
    assert record.charging_state == "disconnected"
    assert record.charger_power is None


def test_open_process_without_samples(db, teslamate, now):
    teslamate.car(1)
    teslamate.charging_process(1)

    record = CarStatusRepository(db).fetch(1)

    assert record.is_charging is True
    assert record.charger_power is None
    assert record.charge_energy_added is None


def test_unit_preferences_from_settings_row(db, teslamate, now):
    teslamate.car(1)
    teslamate.settings(unit_of_length="mi", unit_of_temperature="F", unit_of_pressure="psi")

    record = CarStatusRepository(db).fetch(1)

    assert record.unit_of_length == "mi"
    assert record.unit_of_temperature == "F"
    assert record.unit_of_pressure == "psi"


def test_get_status_record_missing_car(db):
    with pytest.raises(CarNotFoundError) as exc_info:
        CarStatusRepository(db).get_status_record(999)

    assert "999" in exc_info.value.detail
    assert exc_info.value.car_id == 999


def test_exists_wraps_database_errors():
    session = Mock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

    with pytest.raises(DataAccessError) as exc_info:
        CarStatusRepository(session).exists(1)

    assert "connection refused" in exc_info.value.detail


def test_fetch_wraps_database_errors():
    session = Mock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("statement timeout"))

    with pytest.raises(DataAccessError):
        CarStatusRepository(session).fetch(1)


def test_fetch_without_row_raises_no_data():
    session = Mock()
    session.execute.return_value.first.return_value = None

    with pytest.raises(NoStatusDataError) as exc_info:
        CarStatusRepository(session).fetch(7)

    assert "no data available for car ID 7" == exc_info.value.detail
