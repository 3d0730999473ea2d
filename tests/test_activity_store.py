import asyncio
from datetime import datetime

from fieldlog.models.activity import ActivityCreate, ActivityType
from fieldlog.services.activity_store import SqlActivityStore


def _run(session_maker, action):
    async def _inner():
        async with session_maker() as db:
            return await action(SqlActivityStore(db))

    return asyncio.run(_inner())


def test_sql_store_reads(session_maker, server, other_server, make_activity):
    first = make_activity(server, type="training", date=datetime(2024, 1, 10))
    second = make_activity(server, type="support", date=datetime(2024, 2, 10))
    third = make_activity(other_server, type="training", date=datetime(2024, 3, 10))

    everything = _run(session_maker, lambda store: store.all())
    owned = _run(session_maker, lambda store: store.by_owner(server.id))
    trainings = _run(session_maker, lambda store: store.by_type(ActivityType.TRAINING))
    february = _run(
        session_maker,
        lambda store: store.by_date_range(datetime(2024, 2, 1), datetime(2024, 2, 29, 23, 59, 59)),
    )

    # Newest date first
    assert [a.id for a in everything] == [third.id, second.id, first.id]
    assert {a.id for a in owned} == {first.id, second.id}
    assert {a.id for a in trainings} == {first.id, third.id}
    assert [a.id for a in february] == [second.id]


def test_sql_store_write_cycle(session_maker, server):
    data = ActivityCreate(
        type=ActivityType.INTERVIEW,
        description="Entrevista com secretário de saúde",
        date=datetime(2024, 4, 2, 14, 0),
        municipalities=["Caruaru"],
    )

    created = _run(session_maker, lambda store: store.create(data, owner_id=server.id))

    assert created.id is not None
    assert created.type == "interview"
    assert created.userId == server.id
    assert created.municipalities == ["Caruaru"]

    async def _update(store):
        activity = await store.get(created.id)
        return await store.update(activity, {"observations": "Sem pendências"})

    updated = _run(session_maker, _update)
    assert updated.observations == "Sem pendências"

    async def _delete(store):
        activity = await store.get(created.id)
        await store.delete(activity)
        return await store.get(created.id)

    assert _run(session_maker, _delete) is None


def test_sql_store_keeps_naive_utc_timestamps(session_maker, server):
    data = ActivityCreate(
        type=ActivityType.TRAVEL,
        description="Viagem para reunião regional",
        date=datetime(2024, 5, 6, 8, 30),
    )

    created = _run(session_maker, lambda store: store.create(data, owner_id=server.id))
    reloaded = _run(session_maker, lambda store: store.get(created.id))

    assert reloaded.date == datetime(2024, 5, 6, 8, 30)
    assert reloaded.date.tzinfo is None
    assert reloaded.createdAt.tzinfo is None
