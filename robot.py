import logging

import commands2
from robotcontainer import RobotContainer

logging.basicConfig(level=logging.INFO)


class Robot(commands2.TimedCommandRobot):
    def __init__(self):
        super().__init__()
        self.container = RobotContainer()

    def autonomousInit(self):
        # Zero the modules before automode
        self.container.autonomousInit()

    def teleopInit(self):
        # Zero the modules again for safety
        self.container.teleopInit()

    def teleopPeriodic(self):
        controller = self.container.controller

        x = controller.getLeftX()
        y = controller.getLeftY()
        rotation = controller.getRightX()

        self.container.teleopPeriodic(x, y, rotation)

    def disabledInit(self):
        self.container.disabledInit()
