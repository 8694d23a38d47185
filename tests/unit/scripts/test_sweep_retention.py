from datetime import datetime, timedelta, timezone
import importlib.util
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[3]
MODULE_PATH = PROJECT_ROOT / "scripts" / "sweep_retention.py"
SPEC = importlib.util.spec_from_file_location("sweep_retention_module", MODULE_PATH)
sweep_retention = importlib.util.module_from_spec(SPEC)
assert SPEC and SPEC.loader
sys.modules["sweep_retention_module"] = sweep_retention
SPEC.loader.exec_module(sweep_retention)


class DummySettings:
    public_files_url = "/files"
    retention_window = timedelta(hours=24)


class DummyConfig:
    def __init__(self, tmp_path):
        self.session_factory = object()
        self.storage_root = tmp_path
        self.settings = DummySettings()


class DummyRepo:
    def __init__(self, session_factory):
        assert session_factory is not None


class DummySweeper:
    swept_at = None

    def __init__(self, jobs, store, retention_window):
        assert retention_window == timedelta(hours=24)

    def expired_jobs(self, reference_time):
        assert isinstance(reference_time, datetime)
        return ["expired-1", "expired-2"]

    def sweep(self, reference_time):
        DummySweeper.swept_at = reference_time
        return 4


def patch_wiring(monkeypatch, tmp_path):
    monkeypatch.setattr(sweep_retention, "load_config", lambda: DummyConfig(tmp_path))
    monkeypatch.setattr(sweep_retention, "PrintJobRepository", DummyRepo)
    monkeypatch.setattr(sweep_retention, "RetentionSweeper", DummySweeper)


def test_perform_sweep_dry_run(monkeypatch, tmp_path):
    patch_wiring(monkeypatch, tmp_path)

    summary = sweep_retention.perform_sweep(dry_run=True)

    assert summary.dry_run is True
    assert summary.jobs_removed == 2


def test_perform_sweep_executes(monkeypatch, tmp_path):
    patch_wiring(monkeypatch, tmp_path)
    reference_time = datetime(2026, 3, 3, tzinfo=timezone.utc)

    summary = sweep_retention.perform_sweep(dry_run=False, reference_time=reference_time)

    assert summary.dry_run is False
    assert summary.jobs_removed == 4
    assert DummySweeper.swept_at == reference_time


def test_main_reports_counts(monkeypatch, tmp_path, capsys):
    patch_wiring(monkeypatch, tmp_path)
    logging_calls = []
    monkeypatch.setattr(sweep_retention, "configure_logging", lambda: logging_calls.append(True))

    exit_code = sweep_retention.main(["--dry-run"])

    assert exit_code == 0
    assert "jobs_expired=2" in capsys.readouterr().out
    assert logging_calls == [True]


def test_main_handles_errors(monkeypatch, capsys):
    monkeypatch.setattr(sweep_retention, "perform_sweep", lambda **kwargs: (_ for _ in ()).throw(RuntimeError("boom")))

    exit_code = sweep_retention.main([])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert "sweep failed" in captured.err
    assert "boom" in captured.err
