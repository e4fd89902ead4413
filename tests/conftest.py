import pytest
from wpimath.geometry import Translation2d
from wpimath.kinematics import SwerveDrive4Kinematics

import constants
from Hardware import SimulatedHeadingSource
from Swerve import SwerveModule


class FakeDrive:
    def __init__(self, configured=True):
        self.configured = configured
        self.position_meters = 0.0
        self.velocity_mps = 0.0
        self.percent_outputs = []
        self.velocity_setpoints = []

    def set_percent_output(self, percent):
        self.percent_outputs.append(percent)

    def set_velocity(self, mps, slot):
        self.velocity_setpoints.append((mps, slot))

    def reset_position(self, meters=0.0):
        self.position_meters = meters


class FakeSteer:
    def __init__(self, configured=True):
        self.configured = configured
        self.position_degrees = 0.0
        self.angle_setpoints = []

    def set_position_degrees(self, degrees):
        self.position_degrees = degrees

    def set_angle(self, degrees, slot):
        self.angle_setpoints.append((degrees, slot))


class FakeAngleSensor:
    def __init__(self, absolute_degrees=0.0, configured=True):
        self.configured = configured
        self.absolute_degrees = absolute_degrees


class FakeDashboard:
    def __init__(self):
        self.values = {}

    def putNumber(self, key, value):
        self.values[key] = value
        return True


@pytest.fixture
def kinematics():
    return SwerveDrive4Kinematics(
        Translation2d(0.28, 0.28),
        Translation2d(0.28, -0.28),
        Translation2d(-0.28, 0.28),
        Translation2d(-0.28, -0.28),
    )


@pytest.fixture
def drive():
    return FakeDrive()


@pytest.fixture
def steer():
    return FakeSteer()


@pytest.fixture
def sensor():
    return FakeAngleSensor()


@pytest.fixture
def dashboard():
    return FakeDashboard()


@pytest.fixture
def make_module(kinematics, drive, steer, sensor, dashboard):
    """Build module 0 on fake hardware with a simulated heading."""

    def _make(**overrides):
        kwargs = dict(
            drive=drive,
            steer=steer,
            angle_sensor=sensor,
            heading_source=SimulatedHeadingSource(),
            max_speed=4.5,
            jitter_guard=False,
            dashboard=dashboard,
        )
        kwargs.update(overrides)
        return SwerveModule(0, constants.MODULE_CONSTANTS[constants.FL], kinematics, **kwargs)

    return _make
