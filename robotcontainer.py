import wpilib
from wpimath import applyDeadband

import constants
from Swerve import MAX_ANGULAR_VEL, MAX_SPEED_MPS, SwerveSubsystem


class RobotContainer:
    def __init__(self):

        # ----------------------------
        # Subsystems
        # ----------------------------
        self.controller = wpilib.XboxController(constants.CONTROLLER_PORT)
        self.swerve = SwerveSubsystem()

    # -----------------------------------------------------------
    # Mode Lifecycle Hooks
    # -----------------------------------------------------------
    def autonomousInit(self):
        self.swerve.zero_modules_to_absolute()

    def teleopInit(self):
        self.swerve.zero_modules_to_absolute()

    def teleopPeriodic(self, x, y, rotation):
        """Joystick axes in [-1, 1]; forward on the stick is negative Y."""
        deadband = constants.JOYSTICK_DEADBAND
        self.swerve.drive(
            -applyDeadband(y, deadband) * MAX_SPEED_MPS,
            -applyDeadband(x, deadband) * MAX_SPEED_MPS,
            -applyDeadband(rotation, deadband) * MAX_ANGULAR_VEL,
            field_relative=True,
            is_open_loop=True,
        )

    def disabledInit(self):
        self.swerve.stop()
