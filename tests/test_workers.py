"""Tests for the command-line workers against a file-backed SQLite DB."""

import csv
from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import select

from config import get_settings
from db.connection import get_db, get_session, init_schema, reset_engine
from db.models import ClientApps, ClientPartnerAssignments, ClientPartners, Clients
from partnerledger.services._helpers import now_iso
from worker import auto_assign, export_ledger


@pytest.fixture()
def ledger_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LEDGER_CONTRIBUTING_STATUSES", raising=False)
    monkeypatch.setenv("DB_SQLITE_PATH", str(tmp_path / "ledger.db"))
    monkeypatch.setenv("PARTNER_LEDGER_EXPORT_DIR", str(tmp_path / "exports"))
    get_settings.cache_clear()
    reset_engine()
    init_schema()
    with get_session() as session:
        ts: str = now_iso()
        session.add(
            ClientPartners(
                id="p1",
                name="Alpha",
                default_split_partner=0.3,
                default_split_owner=0.7,
                created_at=ts,
            )
        )
        session.flush()
        session.add(Clients(id="c1", name="Ada", invited_by_partner_id="p1", created_at=ts))
        session.flush()
        session.add(
            ClientApps(id="a1", client_id="c1", app_id="bank", status="completed", profit_us=100.0)
        )
    yield tmp_path
    reset_engine()
    get_settings.cache_clear()


def test_auto_assign_then_export(ledger_db: Path) -> None:
    auto_assign.main([])
    with get_session() as session:
        rows = session.scalars(select(ClientPartnerAssignments)).all()
        assert [(r.client_id, r.partner_id) for r in rows] == [("c1", "p1")]

    out: Path = ledger_db / "ledger.csv"
    export_ledger.main(["--status", "due", "-o", str(out)])
    with open(out, newline="", encoding="utf-8") as f:
        rows_out = [r for r in csv.reader(f) if r and not r[0].startswith("#")]
    assert rows_out[1][1] == "Alpha"
    assert rows_out[1][4] == "30.00"


def test_partner_export_uses_export_dir(ledger_db: Path) -> None:
    auto_assign.main(["--verbose"])
    export_ledger.main(["--partner-id", "p1"])
    files: list[Path] = list((ledger_db / "exports").glob("partner_p1_*.csv"))
    assert len(files) == 1


def test_get_db_commits_on_success_and_rolls_back_on_error(ledger_db: Path) -> None:
    gen = get_db()
    session = next(gen)
    session.add(Clients(id="c-ok", name="Kept", created_at=now_iso()))
    assert next(gen, None) is None

    gen = get_db()
    session = next(gen)
    session.add(Clients(id="c-bad", name="Dropped", created_at=now_iso()))
    session.flush()
    with pytest.raises(ValueError):
        gen.throw(ValueError("boom"))

    with get_session() as check:
        ids: set[str] = set(check.scalars(select(Clients.id)).all())
    assert "c-ok" in ids
    assert "c-bad" not in ids
