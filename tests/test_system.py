import logging
import os
import time

from frameplot.services.system import cleanup_old_files, ensure_temp_dir, log_mem


def test_cleanup_old_files(tmp_path):
    old = tmp_path / "old.gif"
    new = tmp_path / "new.gif"
    old.write_bytes(b"x")
    new.write_bytes(b"x")
    past = time.time() - 7200
    os.utime(old, (past, past))

    removed = cleanup_old_files(str(tmp_path), max_age_seconds=3600)

    assert removed == 1
    assert not old.exists()
    assert new.exists()


def test_cleanup_missing_dir(tmp_path):
    assert cleanup_old_files(str(tmp_path / "absent")) == 0


def test_ensure_temp_dir(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_temp_dir(str(target)) == str(target)
    assert target.is_dir()


def test_log_mem(caplog):
    with caplog.at_level(logging.DEBUG, logger="frameplot.services.system"):
        log_mem("startup")
    assert "startup - Memory usage" in caplog.text


def test_configure_logging_sets_level():
    from frameplot.core.logs import configure_logging

    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
        assert logging.getLogger("matplotlib").level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_cleanup_old_files_by_prefix(tmp_path):
    ours = tmp_path / "view1.html"
    other = tmp_path / "file1.gif"
    for path in (ours, other):
        path.write_bytes(b"x")
        past = time.time() - 7200
        os.utime(path, (past, past))

    assert cleanup_old_files(str(tmp_path), max_age_seconds=3600, prefix="view") == 1
    assert not ours.exists()
    assert other.exists()
