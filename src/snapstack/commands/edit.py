from snapstack.session import CliSettings, commit, echo_json, open_manager, parse_record


def append(settings: CliSettings, raw_record: str) -> None:
    record = parse_record(raw_record)
    manager = open_manager(settings)
    stored = manager.append(record).unwrap()
    commit(manager, settings)
    echo_json(stored)


def insert(settings: CliSettings, index: int, raw_record: str) -> None:
    record = parse_record(raw_record)
    manager = open_manager(settings)
    stored = manager.insert(index, record).unwrap()
    commit(manager, settings)
    echo_json(stored)


def replace(settings: CliSettings, index: int, raw_record: str) -> None:
    record = parse_record(raw_record)
    manager = open_manager(settings)
    stored = manager.replace(index, record).unwrap()
    commit(manager, settings)
    echo_json(stored)


def delete(settings: CliSettings, index: int) -> None:
    manager = open_manager(settings)
    removed = manager.delete(index).unwrap()
    commit(manager, settings)
    echo_json(removed)
