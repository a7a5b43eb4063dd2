import logging
from pathlib import Path

import pytest

from bulkkmeans.core.config import RunConfig
from bulkkmeans.core.errors import ConfigurationError
from bulkkmeans.core.io import ensure_dir, load_json, load_yaml, save_json, save_yaml
from bulkkmeans.core.log import get_logger
from bulkkmeans.core.timers import Timer, timed


def test_io_roundtrip(tmp_path: Path):
    p = tmp_path / "x" / "y.json"
    ensure_dir(p.parent)
    save_json(p, {"a": 1})
    obj = load_json(p)
    assert obj["a"] == 1
    save_yaml(tmp_path / "c.yaml", {"iterations": 3})
    assert load_yaml(tmp_path / "c.yaml") == {"iterations": 3}


def test_config_from_yaml_and_overrides(tmp_path: Path):
    cfg_path = tmp_path / "run.yaml"
    save_yaml(cfg_path, {"iterations": 4, "strategy": "two_stage", "parallelism": 2})
    cfg = RunConfig.from_yaml(cfg_path)
    assert (cfg.iterations, cfg.strategy, cfg.parallelism) == (4, "two_stage", 2)
    cfg2 = cfg.merged(iterations=7, k=None)
    assert cfg2.iterations == 7 and cfg2.k is None and cfg2.strategy == "two_stage"


@pytest.mark.parametrize(
    "payload",
    [{"iterations": -1}, {"k": 0}, {"strategy": "x"}, {"emit": "both"}, {"parallelism": 0}, {"bogus": 1}],
)
def test_config_validation(payload):
    with pytest.raises(ConfigurationError):
        RunConfig.from_dict(payload)


def test_logger_and_timer(tmp_path: Path):
    log_file = tmp_path / "logs" / "run.log"
    log = get_logger("DEBUG", str(log_file))
    n = len(log.handlers)
    assert get_logger("DEBUG") is log and len(log.handlers) == n
    with timed("smoke", log) as t:
        pass
    assert isinstance(t, Timer) and t.elapsed >= 0.0
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    log.setLevel(logging.NOTSET)
