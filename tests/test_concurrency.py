"""Concurrency tests against a file-backed SQLite database.

Each worker thread gets its own session, as concurrent requests would.
"""

import threading
from functools import partial
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cash_or_card.db.session import Base, configure_sqlite
from cash_or_card.models import FactKind, PaymentMethod, PaymentMethodVote, Restaurant, User
from cash_or_card.repositories import FactRepository
from cash_or_card.services.consensus import ConsensusEngine
from cash_or_card.services.moderation import ModerationGateway

WORKERS = 8


@pytest.fixture()
def file_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = configure_sqlite(
        create_engine(
            f"sqlite:///{tmp_path / 'concurrency.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(file_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=file_engine, autocommit=False, autoflush=False)


@pytest.fixture()
def seeded(session_factory: sessionmaker[Session]) -> dict[str, object]:
    """Persist a restaurant, an admin and a pool of voters; return their ids."""
    with session_factory() as db:
        admin = User(username="admin", role="admin")
        voters = [User(username=f"voter{index}") for index in range(WORKERS)]
        restaurant = Restaurant(name="Burrito Boyz", address="224 Adelaide St W")
        db.add_all([admin, restaurant, *voters])
        db.commit()
        return {
            "admin_id": admin.id,
            "restaurant_id": restaurant.id,
            "voter_ids": [voter.id for voter in voters],
        }


def _run_concurrently(
    session_factory: sessionmaker[Session],
    jobs: list[Callable[[Session], object]],
) -> list[BaseException]:
    errors: list[BaseException] = []
    barrier = threading.Barrier(len(jobs))

    def _worker(job: Callable[[Session], object]) -> None:
        db = session_factory()
        try:
            barrier.wait()
            job(db)
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=_worker, args=(job,)) for job in jobs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return errors


def _upvote(fact_id: int, voter_id: int, db: Session) -> None:
    ConsensusEngine(db).vote(FactKind.PAYMENT_METHOD, fact_id, voter_id, "upvote")


def _submit_cash_claim(restaurant_id: int, user_id: int, db: Session) -> None:
    ConsensusEngine(db).submit(
        restaurant_id,
        FactKind.PAYMENT_METHOD,
        {"payment_type": "cash", "is_accepted": True},
        user_id,
    )


def _approve(fact_id: int, admin_id: int, db: Session) -> None:
    ModerationGateway(db).approve(FactKind.PAYMENT_METHOD, fact_id, admin_id)


def test_concurrent_votes_are_each_counted_once(
    session_factory: sessionmaker[Session],
    seeded: dict[str, object],
) -> None:
    voter_ids: list[int] = seeded["voter_ids"]  # type: ignore[assignment]
    with session_factory() as db:
        fact = ConsensusEngine(db).submit(
            seeded["restaurant_id"],  # type: ignore[arg-type]
            FactKind.PAYMENT_METHOD,
            {"payment_type": "visa", "is_accepted": True},
            voter_ids[0],
        )
        fact_id = fact.id

    jobs = [partial(_upvote, fact_id, voter_id) for voter_id in voter_ids[1:]]
    errors = _run_concurrently(session_factory, jobs)

    assert errors == []
    with session_factory() as db:
        stored = db.get(PaymentMethod, fact_id)
        ledger_rows = db.execute(
            select(func.count()).select_from(PaymentMethodVote).where(PaymentMethodVote.fact_id == fact_id)
        ).scalar_one()
        assert stored.upvotes == WORKERS
        assert stored.downvotes == 0
        assert ledger_rows == WORKERS


def test_concurrent_submissions_share_one_pending_proposal(
    session_factory: sessionmaker[Session],
    seeded: dict[str, object],
) -> None:
    restaurant_id: int = seeded["restaurant_id"]  # type: ignore[assignment]
    jobs = [
        partial(_submit_cash_claim, restaurant_id, voter_id)
        for voter_id in seeded["voter_ids"]  # type: ignore[attr-defined]
    ]
    errors = _run_concurrently(session_factory, jobs)

    assert errors == []
    with session_factory() as db:
        rows = list(db.execute(select(PaymentMethod)).scalars())
        assert len(rows) == 1
        assert (rows[0].upvotes, rows[0].downvotes) == (1, 0)


def test_concurrent_approvals_leave_one_verified_fact(
    session_factory: sessionmaker[Session],
    seeded: dict[str, object],
) -> None:
    restaurant_id: int = seeded["restaurant_id"]  # type: ignore[assignment]
    admin_id: int = seeded["admin_id"]  # type: ignore[assignment]
    with session_factory() as db:
        repo = FactRepository(db)
        proposal_ids = [
            repo.create(
                FactKind.PAYMENT_METHOD,
                restaurant_id=restaurant_id,
                payment_type="debit",
                is_accepted=index % 2 == 0,
                is_verified=False,
            ).id
            for index in range(4)
        ]
        db.commit()

    jobs = [partial(_approve, fact_id, admin_id) for fact_id in proposal_ids]
    errors = _run_concurrently(session_factory, jobs)

    assert errors == []
    with session_factory() as db:
        rows = list(
            db.execute(
                select(PaymentMethod).where(
                    PaymentMethod.restaurant_id == restaurant_id,
                    PaymentMethod.payment_type == "debit",
                )
            ).scalars()
        )
        assert len(rows) == 1
        assert rows[0].is_verified is True
        assert rows[0].id in proposal_ids
