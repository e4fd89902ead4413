# swerve.py
"""
Swerve subsystem implementation targeting:
 - REV SparkMax (NEO) for drive and steer motors, PID running on the SparkMax
 - Phoenix 6 CANcoder for absolute steering encoder
 - Phoenix 6 Pigeon2 for gyro
 - MK4i L2 style defaults (wheel diameter & gear ratios)

Notes:
 - Replace constants.* values with your actual robot values (CAN IDs, gear ratios, offsets).
 - Call zero_modules_to_absolute() after power-up; the relative steer encoders start at zero.
 - Test on the bench at low speeds first (encoder reads, absolute zeroing) before driving.
"""

import logging
import math
from typing import List, Optional, Sequence

from commands2 import Subsystem
from phoenix6.hardware import Pigeon2
from wpilib import SmartDashboard
from wpimath.geometry import Pose2d, Rotation2d, Translation2d
from wpimath.kinematics import (
    ChassisSpeeds,
    SwerveDrive4Kinematics,
    SwerveDrive4Odometry,
    SwerveModulePosition,
    SwerveModuleState,
)
from wpimath.units import metersToFeet

import constants
from Hardware import (
    AbsoluteAngleSensor,
    CANcoderAngleSensor,
    DriveActuator,
    HeadingSource,
    SparkMaxDriveActuator,
    SparkMaxSteerActuator,
    SteerActuator,
    check_phoenix,
    default_heading_source,
    drive_motor_config,
    steer_motor_config,
)

logger = logging.getLogger(__name__)

# ------------------------
# Physics / conversion constants
# ------------------------
WHEEL_DIAMETER_M = getattr(constants, "WHEEL_DIAMETER", 0.1016)  # 4 in default
DRIVE_GEAR_RATIO = getattr(constants, "DRIVE_GEAR_RATIO", 6.75)
STEER_GEAR_RATIO = getattr(constants, "STEER_GEAR_RATIO", 150 / 7)

MAX_SPEED_MPS = getattr(constants, "MAX_SPEED_MPS", 4.5)  # tune to robot
MAX_ANGULAR_VEL = getattr(constants, "MAX_ANGULAR_VEL", math.radians(360))  # rad/s

DRIVE_REV_TO_METERS = (WHEEL_DIAMETER_M * math.pi) / DRIVE_GEAR_RATIO
DRIVE_RPM_TO_METERS_PER_SECOND = DRIVE_REV_TO_METERS / 60.0
TURN_ROTATIONS_TO_DEGREES = 360.0 / STEER_GEAR_RATIO
TURN_RPM_TO_DEGREES_PER_SECOND = TURN_ROTATIONS_TO_DEGREES / 60.0

POS_SLOT = 0
VEL_SLOT = 0

# Below this fraction of max speed the steering target counts as jitter
JITTER_SPEED_FRACTION = 0.01


# ------------------------
# Swerve Module
# ------------------------
class SwerveModule:
    """
    Single swerve module:
      - drive motor, commanded open loop (percent) or by its onboard velocity PID
      - steer motor, commanded by its onboard position PID in degrees
      - absolute angle sensor, used once to zero the relative steer encoder
    """

    def __init__(
        self,
        module_number: int,
        module_constants: constants.SwerveModuleConstants,
        kinematics: SwerveDrive4Kinematics,
        drive: Optional[DriveActuator] = None,
        steer: Optional[SteerActuator] = None,
        angle_sensor: Optional[AbsoluteAngleSensor] = None,
        heading_source: Optional[HeadingSource] = None,
        max_speed: float = MAX_SPEED_MPS,
        jitter_guard: bool = getattr(constants, "STEER_JITTER_GUARD", False),
        dashboard=SmartDashboard,
    ):
        self.module_number = module_number
        self.angle_offset = module_constants.angle_offset
        self.kinematics = kinematics
        self.max_speed = max_speed
        self.jitter_guard = jitter_guard
        self.dashboard = dashboard

        if drive is None:
            drive = SparkMaxDriveActuator(
                module_constants.drive_motor_id,
                drive_motor_config(
                    module_constants.drive_inverted,
                    DRIVE_REV_TO_METERS,
                    DRIVE_RPM_TO_METERS_PER_SECOND,
                    getattr(constants, "DRIVE_CURRENT_LIMIT", 40),
                    getattr(constants, "NOMINAL_VOLTAGE", 12.6),
                    getattr(constants, "DRIVE_kP", 0.0001),
                    getattr(constants, "DRIVE_kI", 0.0),
                    getattr(constants, "DRIVE_kD", 0.0),
                    getattr(constants, "DRIVE_kFF", 0.2),
                ),
            )
        if steer is None:
            steer = SparkMaxSteerActuator(
                module_constants.steer_motor_id,
                steer_motor_config(
                    module_constants.steer_inverted,
                    TURN_ROTATIONS_TO_DEGREES,
                    TURN_RPM_TO_DEGREES_PER_SECOND,
                    getattr(constants, "STEER_CURRENT_LIMIT", 25),
                    getattr(constants, "NOMINAL_VOLTAGE", 12.6),
                    getattr(constants, "STEER_kP", 0.01),
                    getattr(constants, "STEER_kI", 0.0),
                    getattr(constants, "STEER_kD", 0.0),
                ),
            )
        if angle_sensor is None:
            angle_sensor = CANcoderAngleSensor(module_constants.cancoder_id,
                                               getattr(constants, "CAN_BUS", "rio"))

        self.drive = drive
        self.steer = steer
        self.angle_sensor = angle_sensor
        self.heading_source = heading_source or default_heading_source(steer)

        self.last_angle = 0.0

        if not self.is_configured():
            logger.warning(f"Swerve module {module_number} ({module_constants}) did not configure cleanly")

    def is_configured(self) -> bool:
        return self.drive.configured and self.steer.configured and self.angle_sensor.configured

    # ------------------------
    # State accessors
    # ------------------------
    def getState(self) -> SwerveModuleState:
        return SwerveModuleState(self.getDriveMetersPerSecond(), self.getHeadingRotation2d())

    def getPosition(self) -> SwerveModulePosition:
        return SwerveModulePosition(self.getDriveMeters(), self.getHeadingRotation2d())

    def getHeadingDegrees(self) -> float:
        return self.heading_source.heading_degrees()

    def getHeadingRotation2d(self) -> Rotation2d:
        return Rotation2d.fromDegrees(self.getHeadingDegrees())

    def getDriveMeters(self) -> float:
        return self.drive.position_meters

    def getDriveMetersPerSecond(self) -> float:
        return self.drive.velocity_mps

    def getSwerveKinematics(self) -> SwerveDrive4Kinematics:
        return self.kinematics

    # ------------------------
    # Reset / zeroing
    # ------------------------
    def resetAngleToAbsolute(self) -> None:
        """Set steer encoder position to the absolute angle minus the calibration offset."""
        angle = self.angle_sensor.absolute_degrees - self.angle_offset
        self.steer.set_position_degrees(angle)
        self.heading_source.reset(angle)
        logger.info(f"[{self.module_number}] zeroed steer to {angle:.2f} deg")

    def resetDriveEncoder(self) -> None:
        self.drive.reset_position(0.0)

    # ------------------------
    # Command the module to a desired state
    # ------------------------
    def setDesiredState(self, desiredState: SwerveModuleState, isOpenLoop: bool) -> None:
        """
        desiredState.speed: m/s
        desiredState.angle: Rotation2d

        The state is optimized against the current heading first, so the wheel never
        turns more than 90 degrees; the caller's state is left untouched.
        """
        state = SwerveModuleState(desiredState.speed, desiredState.angle)
        state.optimize(self.getHeadingRotation2d())

        if isOpenLoop:
            self.drive.set_percent_output(state.speed / self.max_speed)
        else:
            self.drive.set_velocity(state.speed, VEL_SLOT)

        # Hold the last angle when barely moving, to keep the wheels from jittering
        angle = (self.last_angle
                 if abs(state.speed) <= self.max_speed * JITTER_SPEED_FRACTION
                 else state.angle.degrees())
        if not self.jitter_guard:  # off: always steer to the requested angle
            angle = state.angle.degrees()

        self.steer.set_angle(angle, POS_SLOT)
        self.heading_source.commanded(angle)
        self.last_angle = angle

        self.dashboard.putNumber(f"{self.module_number} Speed", metersToFeet(state.speed))
        self.dashboard.putNumber(f"{self.module_number} Angle", angle)

    def stop(self) -> None:
        """Stop driving and hold the current steering angle."""
        self.drive.set_percent_output(0.0)
        self.steer.set_angle(self.getHeadingDegrees(), POS_SLOT)


# ------------------------
# SwerveSubsystem (4 modules)
# ------------------------
class SwerveSubsystem(Subsystem):
    def __init__(self):
        super().__init__()

        # module order: FL, FR, BL, BR
        half_x = getattr(constants, "ROBOT_HALF_LENGTH", 0.28)
        half_y = getattr(constants, "ROBOT_HALF_WIDTH", 0.28)
        self.kinematics = SwerveDrive4Kinematics(
            Translation2d(half_x, half_y),
            Translation2d(half_x, -half_y),
            Translation2d(-half_x, half_y),
            Translation2d(-half_x, -half_y),
        )

        module_constants = constants.MODULE_CONSTANTS
        self.modules: List[SwerveModule] = [
            SwerveModule(number, module_constants[number], self.kinematics)
            for number in (constants.FL, constants.FR, constants.BL, constants.BR)
        ]
        self.front_left, self.front_right, self.back_left, self.back_right = self.modules

        self.gyro = Pigeon2(getattr(constants, "GYRO_PORT", 20), getattr(constants, "CAN_BUS", "rio"))

        self.zero_modules_to_absolute()

        self.odometry = SwerveDrive4Odometry(
            self.kinematics, self.get_heading(), tuple(self.get_module_positions()), Pose2d()
        )

    def periodic(self):
        self.update_odometry()

    # ------------------------
    # Utilities
    # ------------------------
    def zero_modules_to_absolute(self):
        for m in self.modules:
            m.resetAngleToAbsolute()

    def get_heading(self) -> Rotation2d:
        return Rotation2d.fromDegrees(self.gyro.get_yaw().value)

    def zero_heading(self):
        check_phoenix(self.gyro.set_yaw(0.0), "Pigeon2 set_yaw")

    def get_module_states(self) -> List[SwerveModuleState]:
        return [m.getState() for m in self.modules]

    def get_module_positions(self) -> List[SwerveModulePosition]:
        return [m.getPosition() for m in self.modules]

    def update_odometry(self):
        self.odometry.update(self.get_heading(), tuple(self.get_module_positions()))

    def get_pose(self) -> Pose2d:
        return self.odometry.getPose()

    def reset_odometry(self, pose: Pose2d):
        self.odometry.resetPosition(self.get_heading(), tuple(self.get_module_positions()), pose)

    # ------------------------
    # Driving API
    # ------------------------
    def stop(self):
        for m in self.modules:
            m.stop()

    def set_module_states(self, states: Sequence[SwerveModuleState], is_open_loop: bool = False):
        states = SwerveDrive4Kinematics.desaturateWheelSpeeds(tuple(states), MAX_SPEED_MPS)
        for module, state in zip(self.modules, states):
            module.setDesiredState(state, is_open_loop)

    def drive(self, x_speed: float, y_speed: float, rot: float,
              field_relative: bool = True, is_open_loop: bool = True):
        """
        x_speed, y_speed in meters/sec, rot in rad/sec.
        """
        if field_relative:
            chassis_speeds = ChassisSpeeds.fromFieldRelativeSpeeds(x_speed, y_speed, rot, self.get_heading())
        else:
            chassis_speeds = ChassisSpeeds(x_speed, y_speed, rot)

        self.set_module_states(self.kinematics.toSwerveModuleStates(chassis_speeds), is_open_loop)
