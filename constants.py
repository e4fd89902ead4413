"""
Robot-wide constant definitions for swerve drive configuration.
Update all placeholder values before deployment.
"""

import math

CONTROLLER_PORT = 0

MODULE_COUNT = 4

WHEEL_DIAMETER = 0.1016  # 4 inches in meters
WHEEL_CIRCUMFERENCE = math.pi * WHEEL_DIAMETER
DRIVE_GEAR_RATIO = 6.75     # MK4i L2
STEER_GEAR_RATIO = 150 / 7  # MK4i

MAX_SPEED_MPS = 4.5
MAX_ANGULAR_VEL = math.radians(360)  # rad/s

# Chassis geometry (center of robot to module, meters)
ROBOT_HALF_LENGTH = 0.28
ROBOT_HALF_WIDTH = 0.28

JOYSTICK_DEADBAND = 0.1

# Motor controller setup
DRIVE_CURRENT_LIMIT = 40  # amps
STEER_CURRENT_LIMIT = 25  # amps
NOMINAL_VOLTAGE = 12.6

DRIVE_kP = 0.0001
DRIVE_kI = 0.0
DRIVE_kD = 0.0
DRIVE_kFF = 0.2

STEER_kP = 0.01
STEER_kI = 0.0
STEER_kD = 0.0

# Hold the previous steering angle when speed is below 1% of max.
# Left off: the deployed code always steers to the requested angle.
STEER_JITTER_GUARD = False

GYRO_PORT = 20

CAN_BUS = "rio"


class SwerveModuleConstants:
    """CAN IDs and calibration for one swerve module."""

    def __init__(
        self,
        drive_motor_id: int,
        steer_motor_id: int,
        cancoder_id: int,
        angle_offset: float,
        drive_inverted: bool = True,  # MK4i drive motor is inverted
        steer_inverted: bool = True,  # MK4i steer motor is inverted
    ):
        self.drive_motor_id = drive_motor_id
        self.steer_motor_id = steer_motor_id
        self.cancoder_id = cancoder_id
        self.angle_offset = angle_offset  # degrees
        self.drive_inverted = drive_inverted
        self.steer_inverted = steer_inverted

    def __repr__(self):
        return (f"SwerveModuleConstants(drive={self.drive_motor_id}, steer={self.steer_motor_id}, "
                f"cancoder={self.cancoder_id}, offset={self.angle_offset})")


FL, FR, BL, BR = 0, 1, 2, 3

# TODO: Re-measure offsets with the wheels aligned after any module rebuild
MODULE_CONSTANTS = {
    FL: SwerveModuleConstants(1, 2, 16, angle_offset=156.445),
    FR: SwerveModuleConstants(3, 4, 17, angle_offset=30.498),
    BL: SwerveModuleConstants(5, 6, 18, angle_offset=133.418),
    BR: SwerveModuleConstants(8, 9, 19, angle_offset=99.404),
}
