# Hardware.py
"""
Hardware access for a swerve module:
 - REV SparkMax (NEO) drive and steer motors with onboard PID
 - Phoenix 6 CANcoder absolute steering encoder
 - heading sources for real and simulated execution

The swerve module only talks to the small interfaces defined here, so it can be
driven by fakes in tests. Every configuration call returns a status code; those
are checked, logged and reported to the Driver Station, but never retried.
"""

import logging
from abc import abstractmethod
from typing import Protocol

import wpilib
from wpilib import RobotBase

from phoenix6 import StatusCode
from phoenix6.configs import CANcoderConfiguration
from phoenix6.hardware import CANcoder

from rev import (
    ClosedLoopSlot,
    PersistMode,
    REVLibError,
    ResetMode,
    SparkBase,
    SparkBaseConfig,
    SparkMax,
    SparkMaxConfig,
)

logger = logging.getLogger(__name__)

_SLOTS = (
    ClosedLoopSlot.kSlot0,
    ClosedLoopSlot.kSlot1,
    ClosedLoopSlot.kSlot2,
    ClosedLoopSlot.kSlot3,
)


def _warn(message: str) -> None:
    logger.warning(message)
    wpilib.reportWarning(message, stackTrace=False)


def check_rev(result: REVLibError, what: str) -> bool:
    """Return True if a REVLib call succeeded, otherwise warn and return False."""
    if result == REVLibError.kOk:
        return True
    _warn(f"{what} failed: {result}")
    return False


def check_phoenix(status: StatusCode, what: str) -> bool:
    """Return True if a Phoenix 6 call succeeded, otherwise warn and return False."""
    if status.is_ok():
        return True
    _warn(f"{what} failed: {status}")
    return False


# ------------------------
# Interfaces
# ------------------------
class DriveActuator(Protocol):
    """Drives the wheel forward and backward. Units are already meters."""

    configured: bool

    @property
    @abstractmethod
    def position_meters(self) -> float:
        raise NotImplementedError

    @property
    @abstractmethod
    def velocity_mps(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def set_percent_output(self, percent: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_velocity(self, mps: float, slot: int) -> None:
        """Hand a velocity setpoint to the controller's onboard PID."""
        raise NotImplementedError

    @abstractmethod
    def reset_position(self, meters: float = 0.0) -> None:
        raise NotImplementedError


class SteerActuator(Protocol):
    """Turns the wheel. Position is the relative steer encoder, in degrees."""

    configured: bool

    @property
    @abstractmethod
    def position_degrees(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def set_position_degrees(self, degrees: float) -> None:
        """Overwrite the relative encoder's position register."""
        raise NotImplementedError

    @abstractmethod
    def set_angle(self, degrees: float, slot: int) -> None:
        """Hand a position setpoint to the controller's onboard PID."""
        raise NotImplementedError


class AbsoluteAngleSensor(Protocol):
    configured: bool

    @property
    @abstractmethod
    def absolute_degrees(self) -> float:
        """Mechanical angle, valid right after power-up."""
        raise NotImplementedError


class HeadingSource(Protocol):
    """Where a module gets its current steering angle from."""

    @abstractmethod
    def heading_degrees(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def commanded(self, degrees: float) -> None:
        """Called with every steering setpoint sent to the steer motor."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, degrees: float) -> None:
        """Called when the steer encoder is re-zeroed from the absolute sensor."""
        raise NotImplementedError


# ------------------------
# Heading sources
# ------------------------
class EncoderHeadingSource:
    """Reads the steer motor's relative encoder (real robot)."""

    def __init__(self, steer: SteerActuator):
        self.steer = steer

    def heading_degrees(self) -> float:
        return self.steer.position_degrees

    def commanded(self, degrees: float) -> None:
        pass

    def reset(self, degrees: float) -> None:
        pass


class SimulatedHeadingSource:
    """Assumes the steer motor reaches every setpoint instantly (simulation)."""

    def __init__(self, initial_degrees: float = 0.0):
        self.current_angle = initial_degrees

    def heading_degrees(self) -> float:
        return self.current_angle

    def commanded(self, degrees: float) -> None:
        self.current_angle = degrees

    def reset(self, degrees: float) -> None:
        self.current_angle = degrees


def default_heading_source(steer: SteerActuator) -> HeadingSource:
    if RobotBase.isReal():
        return EncoderHeadingSource(steer)
    return SimulatedHeadingSource()


# ------------------------
# REV SparkMax motors
# ------------------------
def drive_motor_config(
    inverted: bool,
    position_factor: float,
    velocity_factor: float,
    current_limit: int,
    nominal_voltage: float,
    kP: float,
    kI: float,
    kD: float,
    kFF: float,
) -> SparkMaxConfig:
    config = SparkMaxConfig()
    config.setIdleMode(SparkBaseConfig.IdleMode.kBrake)
    config.inverted(inverted)
    config.smartCurrentLimit(current_limit)
    config.voltageCompensation(nominal_voltage)
    config.encoder.positionConversionFactor(position_factor).velocityConversionFactor(velocity_factor)
    config.closedLoop.pid(kP, kI, kD)
    config.closedLoop.velocityFF(kFF)
    return config


def steer_motor_config(
    inverted: bool,
    position_factor: float,
    velocity_factor: float,
    current_limit: int,
    nominal_voltage: float,
    kP: float,
    kI: float,
    kD: float,
) -> SparkMaxConfig:
    config = SparkMaxConfig()
    config.setIdleMode(SparkBaseConfig.IdleMode.kBrake)
    config.inverted(inverted)
    config.smartCurrentLimit(current_limit)
    config.voltageCompensation(nominal_voltage)
    config.encoder.positionConversionFactor(position_factor).velocityConversionFactor(velocity_factor)
    config.closedLoop.pid(kP, kI, kD)
    return config


class SparkMaxDriveActuator:
    """NEO drive motor on a SparkMax; encoder reports meters and m/s."""

    def __init__(self, can_id: int, config: SparkMaxConfig):
        self.can_id = can_id
        self.motor = SparkMax(can_id, SparkBase.MotorType.kBrushless)
        self.configured = check_rev(
            self.motor.configure(config, ResetMode.kResetSafeParameters, PersistMode.kPersistParameters),
            f"Drive SparkMax {can_id} configure",
        )
        self.encoder = self.motor.getEncoder()
        self.controller = self.motor.getClosedLoopController()
        self.reset_position(0.0)

    @property
    def position_meters(self) -> float:
        return self.encoder.getPosition()

    @property
    def velocity_mps(self) -> float:
        return self.encoder.getVelocity()

    def set_percent_output(self, percent: float) -> None:
        self.motor.set(percent)

    def set_velocity(self, mps: float, slot: int) -> None:
        self.controller.setReference(mps, SparkBase.ControlType.kVelocity, _SLOTS[slot])

    def reset_position(self, meters: float = 0.0) -> None:
        if not check_rev(self.encoder.setPosition(meters), f"Drive SparkMax {self.can_id} setPosition"):
            self.configured = False


class SparkMaxSteerActuator:
    """NEO steer motor on a SparkMax; encoder reports degrees of module rotation."""

    def __init__(self, can_id: int, config: SparkMaxConfig):
        self.can_id = can_id
        self.motor = SparkMax(can_id, SparkBase.MotorType.kBrushless)
        self.configured = check_rev(
            self.motor.configure(config, ResetMode.kResetSafeParameters, PersistMode.kPersistParameters),
            f"Steer SparkMax {can_id} configure",
        )
        self.encoder = self.motor.getEncoder()
        self.controller = self.motor.getClosedLoopController()

    @property
    def position_degrees(self) -> float:
        return self.encoder.getPosition()

    def set_position_degrees(self, degrees: float) -> None:
        if not check_rev(self.encoder.setPosition(degrees), f"Steer SparkMax {self.can_id} setPosition"):
            self.configured = False

    def set_angle(self, degrees: float, slot: int) -> None:
        self.controller.setReference(degrees, SparkBase.ControlType.kPosition, _SLOTS[slot])


# ------------------------
# Phoenix 6 CANcoder
# ------------------------
def cancoder_config() -> CANcoderConfiguration:
    """No magnet offset (applied in software), absolute position reported as 0 to 1 rotations."""
    config = CANcoderConfiguration()
    config.magnet_sensor.absolute_sensor_discontinuity_point = 1.0
    return config


class CANcoderAngleSensor:
    def __init__(self, can_id: int, can_bus: str = "rio"):
        self.can_id = can_id
        self.cancoder = CANcoder(can_id, can_bus)
        self.configured = check_phoenix(
            self.cancoder.configurator.apply(cancoder_config()),
            f"CANcoder {can_id} configure",
        )
        self._absolute_position = self.cancoder.get_absolute_position()

    @property
    def absolute_degrees(self) -> float:
        # Phoenix 6 reports rotations
        return self._absolute_position.refresh().value * 360.0
