import logging

from solana_workload.logging_config import build_logging_config, setup_logging


def test_console_only_by_default():
    cfg = build_logging_config("debug")
    assert cfg["loggers"]["solana_workload"]["level"] == "DEBUG"
    assert cfg["loggers"]["solana_workload"]["handlers"] == ["console"]
    assert "file" not in cfg["handlers"]


def test_file_handler_is_shared_by_all_loggers(tmp_path):
    log_file = tmp_path / "workload.log"
    cfg = build_logging_config("INFO", log_file)
    assert cfg["handlers"]["file"]["filename"] == str(log_file)
    for name in ("solana_workload", "httpx", "httpcore"):
        assert cfg["loggers"][name]["handlers"] == ["console", "file"]


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "workload.log"
    setup_logging("INFO", log_file)
    logging.getLogger("solana_workload.test").info("hello from the workload")
    for h in logging.getLogger("solana_workload").handlers:
        h.flush()
    assert "hello from the workload" in log_file.read_text()
    logging.getLogger("httpx").info("quiet")
    assert "quiet" not in log_file.read_text()
