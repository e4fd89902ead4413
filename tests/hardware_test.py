import logging

import pytest
from phoenix6 import StatusCode
from rev import REVLibError

import constants
import Hardware
import Swerve
from Hardware import (
    EncoderHeadingSource,
    SimulatedHeadingSource,
    SparkMaxDriveActuator,
    SparkMaxSteerActuator,
    cancoder_config,
    check_phoenix,
    check_rev,
    default_heading_source,
    drive_motor_config,
    steer_motor_config,
)
from conftest import FakeSteer


@pytest.fixture
def driver_station_warnings(monkeypatch):
    warnings = []
    monkeypatch.setattr(Hardware.wpilib, "reportWarning",
                        lambda message, stackTrace=False: warnings.append(message))
    return warnings


def test_check_rev_ok(driver_station_warnings):
    assert check_rev(REVLibError.kOk, "Drive SparkMax 1 configure")
    assert driver_station_warnings == []


def test_check_rev_failure_is_logged(driver_station_warnings, caplog):
    with caplog.at_level(logging.WARNING, logger="Hardware"):
        assert not check_rev(REVLibError.kTimeout, "Drive SparkMax 1 configure")

    assert "Drive SparkMax 1 configure failed" in caplog.text
    assert len(driver_station_warnings) == 1


def test_check_phoenix_ok(driver_station_warnings):
    assert check_phoenix(StatusCode.OK, "CANcoder 16 configure")
    assert driver_station_warnings == []


def test_check_phoenix_failure_is_logged(driver_station_warnings, caplog):
    with caplog.at_level(logging.WARNING, logger="Hardware"):
        assert not check_phoenix(StatusCode.RX_TIMEOUT, "CANcoder 16 configure")

    assert "CANcoder 16 configure failed" in caplog.text
    assert len(driver_station_warnings) == 1


def test_encoder_heading_reads_steer_encoder():
    steer = FakeSteer()
    source = EncoderHeadingSource(steer)
    steer.position_degrees = -45.0

    source.commanded(90.0)
    source.reset(10.0)

    assert source.heading_degrees() == -45.0


def test_simulated_heading_tracks_commands_and_resets():
    source = SimulatedHeadingSource()
    assert source.heading_degrees() == 0.0

    source.commanded(90.0)
    assert source.heading_degrees() == 90.0

    source.reset(12.0)
    assert source.heading_degrees() == 12.0


def test_default_heading_source_in_simulation():
    # Tests never run on a roboRIO
    assert isinstance(default_heading_source(FakeSteer()), SimulatedHeadingSource)


def test_cancoder_reports_zero_to_one_rotation():
    """Offsets are measured over 0-360 degrees, so the sensor must not report -180 to 180."""
    assert cancoder_config().magnet_sensor.absolute_sensor_discontinuity_point == 1.0
    assert cancoder_config().magnet_sensor.magnet_offset == 0.0


def _drive_config():
    return drive_motor_config(
        True,
        Swerve.DRIVE_REV_TO_METERS,
        Swerve.DRIVE_RPM_TO_METERS_PER_SECOND,
        constants.DRIVE_CURRENT_LIMIT,
        constants.NOMINAL_VOLTAGE,
        constants.DRIVE_kP,
        constants.DRIVE_kI,
        constants.DRIVE_kD,
        constants.DRIVE_kFF,
    )


def _steer_config():
    return steer_motor_config(
        True,
        Swerve.TURN_ROTATIONS_TO_DEGREES,
        Swerve.TURN_RPM_TO_DEGREES_PER_SECOND,
        constants.STEER_CURRENT_LIMIT,
        constants.NOMINAL_VOLTAGE,
        constants.STEER_kP,
        constants.STEER_kI,
        constants.STEER_kD,
    )


# Simulated CAN IDs, kept clear of the robot's own and unique per test
def test_drive_sparkmax_configuration(driver_station_warnings):
    drive = SparkMaxDriveActuator(41, _drive_config())
    accessor = drive.motor.configAccessor

    assert drive.configured
    assert accessor.encoder.getPositionConversionFactor() == pytest.approx(Swerve.DRIVE_REV_TO_METERS)
    assert accessor.encoder.getVelocityConversionFactor() == pytest.approx(Swerve.DRIVE_RPM_TO_METERS_PER_SECOND)
    assert accessor.getInverted()
    assert accessor.getSmartCurrentLimit() == constants.DRIVE_CURRENT_LIMIT
    assert accessor.getVoltageCompensation() == pytest.approx(12.6)
    assert drive.position_meters == 0.0
    assert driver_station_warnings == []


def test_steer_sparkmax_configuration(driver_station_warnings):
    steer = SparkMaxSteerActuator(42, _steer_config())
    accessor = steer.motor.configAccessor

    assert steer.configured
    assert accessor.encoder.getPositionConversionFactor() == pytest.approx(Swerve.TURN_ROTATIONS_TO_DEGREES)
    assert accessor.encoder.getVelocityConversionFactor() == pytest.approx(Swerve.TURN_RPM_TO_DEGREES_PER_SECOND)
    assert accessor.getInverted()
    assert accessor.getSmartCurrentLimit() == 25
    assert accessor.getVoltageCompensation() == pytest.approx(12.6)
    assert driver_station_warnings == []


class _StuckEncoder:
    def getPosition(self):
        return 0.0

    def setPosition(self, position):
        return REVLibError.kTimeout


def test_steer_rezero_failure_clears_configured(driver_station_warnings):
    steer = SparkMaxSteerActuator(43, _steer_config())
    steer.encoder = _StuckEncoder()

    steer.set_position_degrees(113.555)

    assert not steer.configured
    assert len(driver_station_warnings) == 1


def test_drive_reset_failure_clears_configured(driver_station_warnings):
    drive = SparkMaxDriveActuator(44, _drive_config())
    drive.encoder = _StuckEncoder()

    drive.reset_position(0.0)

    assert not drive.configured
