from citysim.core.event_log import EventLog


def test_record_stamps_day():
    # Arrange
    log = EventLog()

    # Act
    entry = log.record(3, "Something happened.")

    # Assert
    assert entry == "Day 3: Something happened."
    assert log.to_list() == [entry]


def test_recent_returns_tail_in_order():
    # Arrange
    log = EventLog()
    for day in range(15):
        log.record(day, f"event {day}")

    # Act
    recent = log.recent(3)

    # Assert
    assert recent == ["Day 12: event 12", "Day 13: event 13", "Day 14: event 14"]
    assert log.recent(0) == []
    assert len(log.recent(100)) == 15


def test_matching_filters_by_substring():
    # Arrange
    log = EventLog(["Day 1: FIRE! x", "Day 2: quiet", "Day 3: GRANT! y"])

    # Act
    notable = log.matching(("FIRE", "GRANT"))

    # Assert
    assert notable == ["Day 1: FIRE! x", "Day 3: GRANT! y"]


def test_to_list_is_a_copy():
    # Arrange
    log = EventLog()
    log.record(0, "founded")

    # Act
    entries = log.to_list()
    entries.append("tampered")

    # Assert
    assert len(log) == 1
    assert log[0] == "Day 0: founded"
