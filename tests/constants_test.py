import constants


def test_one_calibration_record_per_module():
    assert sorted(constants.MODULE_CONSTANTS) == [constants.FL, constants.FR, constants.BL, constants.BR]
    assert len(constants.MODULE_CONSTANTS) == constants.MODULE_COUNT


def test_no_duplicate_can_bus_ids():
    """
    Run through our constants and make sure they are unique
    """
    all_ids = [constants.GYRO_PORT]
    for module in constants.MODULE_CONSTANTS.values():
        all_ids += [module.drive_motor_id, module.steer_motor_id, module.cancoder_id]

    assert len(all_ids) == len(set(all_ids)), f"Duplicate IDs found: All: {all_ids}, Unique: {set(all_ids)}"


def test_angle_offsets_within_one_turn():
    for module in constants.MODULE_CONSTANTS.values():
        assert 0.0 <= module.angle_offset < 360.0
