"""
TeslaMate tables read by the status pipeline

Only the columns the status lookup needs are mapped. The schema itself is owned
and migrated by TeslaMate; this service never writes to it.
"""
from sqlalchemy import (Boolean, Column, DateTime, Float, ForeignKey, Index,
                        Integer, Numeric, SmallInteger, String, Text)

from carstatus.core.database import Base


class Car(Base):
    """Car dimension"""
    __tablename__ = "cars"

    id = Column(SmallInteger().with_variant(Integer, "sqlite"), primary_key=True)
    eid = Column(Integer, nullable=True)
    vid = Column(Integer, nullable=True)
    vin = Column(Text, nullable=True)
    name = Column(Text, nullable=True)
    model = Column(Text, nullable=True)
    trim_badging = Column(Text, nullable=True)
    exterior_color = Column(Text, nullable=True)
    wheel_type = Column(Text, nullable=True)
    spoiler_type = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Car(id={self.id}, name='{self.name}', model='{self.model}')>"


class Position(Base):
    """Time series of positions and the telemetry sampled with them"""
    __tablename__ = "positions"

    id = Column(Integer, primary_key=True)
    car_id = Column(ForeignKey("cars.id"), nullable=False)
    date = Column(DateTime, nullable=False)
    latitude = Column(Numeric(8, 6, asdecimal=False), nullable=False)
    longitude = Column(Numeric(9, 6, asdecimal=False), nullable=False)
    speed = Column(SmallInteger, nullable=True)
    power = Column(SmallInteger, nullable=True)
    odometer = Column(Float, nullable=True)
    elevation = Column(SmallInteger, nullable=True)
    battery_level = Column(SmallInteger, nullable=True)
    usable_battery_level = Column(SmallInteger, nullable=True)
    ideal_battery_range_km = Column(Numeric(6, 2, asdecimal=False), nullable=True)
    est_battery_range_km = Column(Numeric(6, 2, asdecimal=False), nullable=True)
    rated_battery_range_km = Column(Numeric(6, 2, asdecimal=False), nullable=True)
    outside_temp = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    inside_temp = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    is_climate_on = Column(Boolean, nullable=True)
    is_preconditioning = Column(Boolean, nullable=True)
    tpms_pressure_fl = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    tpms_pressure_fr = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    tpms_pressure_rl = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    tpms_pressure_rr = Column(Numeric(4, 1, asdecimal=False), nullable=True)

    __table_args__ = (
        Index("positions_car_id_date_index", "car_id", "date"),
    )


class State(Base):
    """Lifecycle state intervals (online, asleep, offline, ...)"""
    __tablename__ = "states"

    id = Column(Integer, primary_key=True)
    car_id = Column(ForeignKey("cars.id"), nullable=False)
    state = Column(String(20), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("states_car_id_start_date_index", "car_id", "start_date"),
    )


class ChargingProcess(Base):
    """Charging sessions; end_date IS NULL means the session is still open"""
    __tablename__ = "charging_processes"

    id = Column(Integer, primary_key=True)
    car_id = Column(ForeignKey("cars.id"), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    charge_energy_added = Column(Numeric(8, 2, asdecimal=False), nullable=True)


class Charge(Base):
    """Charger samples recorded during a charging process"""
    __tablename__ = "charges"

    id = Column(Integer, primary_key=True)
    charging_process_id = Column(ForeignKey("charging_processes.id"), nullable=False)
    date = Column(DateTime, nullable=False)
    battery_level = Column(SmallInteger, nullable=True)
    charge_energy_added = Column(Numeric(8, 2, asdecimal=False), nullable=True)
    charger_actual_current = Column(SmallInteger, nullable=True)
    charger_phases = Column(SmallInteger, nullable=True)
    charger_power = Column(SmallInteger, nullable=True)
    charger_voltage = Column(SmallInteger, nullable=True)

    __table_args__ = (
        Index("charges_charging_process_id_date_index", "charging_process_id", "date"),
    )


class GlobalSettings(Base):
    """Single-row site-wide preferences"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    unit_of_length = Column(String(2), nullable=True)  # 'km' | 'mi'
    unit_of_temperature = Column(String(1), nullable=True)  # 'C' | 'F'
    unit_of_pressure = Column(String(3), nullable=True)  # 'bar' | 'psi'
