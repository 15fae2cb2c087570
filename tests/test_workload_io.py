from pathlib import Path

import pytest

from scheduler_sim.errors import InvalidInputError
from scheduler_sim.models import Process
from scheduler_sim.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3,"priority":0},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 0
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1
    assert procs[1].remaining_time == 2


def test_load_json_accepts_id_and_execution_time(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":4,"arrival_time":2,"execution_time":6}]')
    procs = load_workload(p)
    assert procs == [Process(4, arrival_time=2, burst_time=6)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,3,1\n2,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[1].priority is None


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(InvalidInputError):
        load_workload(p)


@pytest.mark.parametrize(
    "body",
    [
        '{"pid": 1}',
        '[{"pid": "one", "arrival_time": 0, "burst_time": 1}]',
        '[{"pid": 1, "burst_time": 1}]',
        '[3]',
        '[{"pid": 1,',
        '[{"pid": 1, "arrival_time": 0.9, "burst_time": 2.9}]',
        '[{"pid": 1, "arrival_time": 0, "burst_time": true}]',
        '[{"pid": 1, "arrival_time": 0, "burst_time": 2, "priority": 1.5}]',
    ],
)
def test_malformed_json(tmp_path: Path, body):
    p = tmp_path / "w.json"
    p.write_text(body)
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_csv_rejects_fractional_values(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,2.9\n")
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_integral_strings_still_load(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid": "3", "arrival_time": "1", "burst_time": "4", "priority": "0"}]')
    assert load_workload(p) == [Process(3, arrival_time=1, burst_time=4, priority=0)]


@pytest.mark.parametrize("name", ["w.json", "w.csv"])
def test_invalid_utf8(tmp_path: Path, name):
    p = tmp_path / name
    p.write_bytes(b"pid,arrival_time,burst_time\n\xff\xfe,0,1\n")
    with pytest.raises(InvalidInputError):
        load_workload(p)
