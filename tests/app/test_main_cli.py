from __future__ import annotations

from datetime import UTC, datetime

import pytest

from catchwatch import main as main_module
from catchwatch.domain.landings import ReprocessingResult
from catchwatch.domain.model import LandingQuery
from catchwatch.domain.reference_cache import ReferenceCache
from tests.helpers.documents import make_cache


def test_landings_job_continues_after_cache_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[str] = []

    def failing_load() -> ReferenceCache:
        calls.append("load")
        raise RuntimeError("blob store down")

    monkeypatch.setattr(main_module, "load_reference_cache", failing_load)
    monkeypatch.setattr(
        main_module, "run_landings_and_reporting_job", lambda: calls.append("job")
    )

    main_module.main(["landings-job"])

    assert calls == ["load", "job"]
    assert "blob store down" in capsys.readouterr().err


def test_load_cache_prints_counts(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(main_module, "load_reference_cache", make_cache)

    main_module.main(["load-cache"])

    assert "vessels=1" in capsys.readouterr().out


def test_load_cache_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_load() -> ReferenceCache:
        raise RuntimeError("missing vessels")

    monkeypatch.setattr(main_module, "load_reference_cache", failing_load)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["load-cache"])

    assert excinfo.value.code == 1


def test_reprocess_passes_limit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, int | None] = {}

    def fake_batch(limit: int | None) -> ReprocessingResult:
        captured["limit"] = limit
        return ReprocessingResult(read=3, selected=1, certificates_updated=1, written=True)

    monkeypatch.setattr(main_module, "run_reprocessing_batch", fake_batch)

    main_module.main(["reprocess", "--limit", "1"])

    assert captured["limit"] == 1
    assert "selected=1" in capsys.readouterr().out


def test_missing_landings_uses_given_timestamp(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, datetime | None] = {}

    def fake_missing(now: datetime | None) -> list[LandingQuery]:
        captured["now"] = now
        return [LandingQuery("rssWA1", "2019-07-10")]

    monkeypatch.setattr(main_module, "load_reference_cache", make_cache)
    monkeypatch.setattr(main_module, "compute_missing_landings", fake_missing)

    main_module.main(["missing-landings", "--at", "2019-07-12T03:00:00+03:00"])

    assert captured["now"] == datetime(2019, 7, 12, 0, 0, tzinfo=UTC)
    assert capsys.readouterr().out == "rssWA1\t2019-07-10\n"


def test_missing_landings_invalid_timestamp(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_module, "load_reference_cache", make_cache)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["missing-landings", "--at", "not-a-date"])

    assert excinfo.value.code == 2


def test_unexpected_error_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_batch(limit: int | None) -> ReprocessingResult:
        raise RuntimeError(f"boom {limit}")

    monkeypatch.setattr(main_module, "run_reprocessing_batch", failing_batch)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["reprocess"])

    assert excinfo.value.code == 1


def test_reprocess_rejects_non_positive_limit() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["reprocess", "--limit", "0"])

    assert excinfo.value.code == 2


def test_missing_landings_reads_naive_timestamp_as_utc(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: list[datetime | None] = []

    def fake_missing(now: datetime | None) -> list[LandingQuery]:
        captured.append(now)
        return []

    monkeypatch.setattr(main_module, "load_reference_cache", make_cache)
    monkeypatch.setattr(main_module, "compute_missing_landings", fake_missing)

    main_module.main(["missing-landings", "--at", "2019-07-12T00:00:00Z"])

    assert captured == [datetime(2019, 7, 12, tzinfo=UTC)]
