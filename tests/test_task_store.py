# tests/test_task_store.py

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from todo_core.errors import InvalidInput, NotFound
from todo_core.tasks.task_models import Task
from todo_core.tasks.task_store import TaskStore


@pytest.mark.asyncio
async def test_create_emits_newest_first(store: TaskStore) -> None:
    sub = store.observe_all()
    assert await anext(sub) == ()

    a = await store.create("A")
    b = await store.create("B")

    assert await anext(sub) == (a,)
    assert await anext(sub) == (b, a)
    assert b.id > a.id
    sub.close()


@pytest.mark.asyncio
async def test_create_round_trip(store: TaskStore) -> None:
    created = await store.create("Buy milk")

    first = await anext(store.observe_all())
    assert first[0] == created
    assert first[0].title == "Buy milk"
    assert first[0].done is False
    assert created.id > 0


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "   ", "\n\t"])
async def test_create_rejects_blank_title(store: TaskStore, title: str) -> None:
    sub = store.observe_all()
    await anext(sub)

    with pytest.raises(InvalidInput):
        await store.create(title)

    assert store.snapshot() == []
    assert sub.pending() == 0


@pytest.mark.asyncio
async def test_update_replaces_fields_and_leaves_others(store: TaskStore) -> None:
    a = await store.create("A")
    b = await store.create("B")

    await store.update(Task(id=a.id, title="A2", done=True))

    rows = store.snapshot()
    assert rows == [b, Task(id=a.id, title="A2", done=True)]
    assert await store.get(a.id) == Task(id=a.id, title="A2", done=True)


@pytest.mark.asyncio
async def test_update_missing_id_raises_not_found(store: TaskStore) -> None:
    a = await store.create("A")
    await store.delete(a)

    with pytest.raises(NotFound) as exc_info:
        await store.update(a.toggled())
    assert exc_info.value.task_id == a.id
    assert store.snapshot() == []


@pytest.mark.asyncio
async def test_update_rejects_blank_title(store: TaskStore) -> None:
    a = await store.create("A")
    with pytest.raises(InvalidInput):
        await store.update(a.renamed("  "))
    assert store.snapshot() == [a]


@pytest.mark.asyncio
async def test_delete_absent_is_noop(store: TaskStore) -> None:
    a = await store.create("A")
    sub = store.observe_all()
    assert await anext(sub) == (a,)

    await store.delete(Task(id=a.id + 100, title="ghost"))

    assert store.snapshot() == [a]
    assert sub.pending() == 0

    await store.delete(a)
    await store.delete(a)
    assert await anext(sub) == ()
    assert sub.pending() == 0


@pytest.mark.asyncio
async def test_ids_are_not_reused(store: TaskStore) -> None:
    a = await store.create("A")
    b = await store.create("B")
    await store.delete(b)

    c = await store.create("C")
    assert c.id > b.id > a.id


@pytest.mark.asyncio
async def test_persists_across_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    first = TaskStore(db)
    a = await first.create("A")
    b = await first.create("B")
    await first.update(a.toggled())
    await first.delete(b)
    first.close()

    second = TaskStore(db)
    assert second.snapshot() == [Task(id=a.id, title="A", done=True)]
    assert second.count_tasks() == 1

    c = await second.create("C")
    assert c.id > b.id
    second.close()


@pytest.mark.asyncio
async def test_concurrent_updates_on_different_ids_all_land(store: TaskStore) -> None:
    tasks = [await store.create(f"t{i}") for i in range(5)]

    await asyncio.gather(*(store.update(t.toggled()) for t in tasks))

    assert all(t.done for t in store.snapshot())
    assert len(store.snapshot()) == 5


@pytest.mark.asyncio
async def test_same_id_updates_apply_in_issue_order(store: TaskStore) -> None:
    a = await store.create("v0")

    await asyncio.gather(*(store.update(a.renamed(f"v{i}")) for i in range(1, 6)))

    assert (await store.get(a.id)).title == "v5"


@pytest.mark.asyncio
async def test_emissions_follow_mutation_order(store: TaskStore) -> None:
    sub = store.observe_all()
    await anext(sub)

    created = await asyncio.gather(*(store.create(f"t{i}") for i in range(4)))

    sizes = [len(await anext(sub)) for _ in created]
    assert sizes == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_close_ends_subscriptions_and_blocks_writes(store: TaskStore) -> None:
    sub = store.observe_all()
    store.close()

    assert [v async for v in sub] == [()]
    with pytest.raises(RuntimeError):
        await store.create("late")


@pytest.mark.asyncio
async def test_get_missing_raises(store: TaskStore) -> None:
    with pytest.raises(NotFound):
        await store.get(42)


@pytest.mark.asyncio
async def test_subscribers_cannot_alter_each_others_view(store: TaskStore) -> None:
    a = await store.create("A")
    first = store.observe_all()
    second = store.observe_all()

    rows = await anext(first)
    with pytest.raises(AttributeError):
        rows.clear()  # type: ignore[attr-defined]
    view = list(rows)
    view.clear()

    assert await anext(second) == (a,)
    assert store.snapshot() == [a]
    assert await anext(store.observe_all()) == (a,)


@pytest.mark.asyncio
async def test_mutation_queued_before_close_does_not_commit(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(db)
    a = await store.create("A")

    running = asyncio.create_task(store.update(a.renamed("first")))
    queued = asyncio.create_task(store.update(a.renamed("second")))
    await asyncio.sleep(0)
    store.close()

    await running
    with pytest.raises(RuntimeError):
        await queued

    reopened = TaskStore(db)
    assert reopened.snapshot() == [a.renamed("first")]
    reopened.close()


@pytest.mark.asyncio
async def test_titles_are_stored_as_given(store: TaskStore) -> None:
    a = await store.create("  padded ")
    assert a.title == "  padded "

    await store.update(a.renamed(" x "))
    assert store.snapshot() == [a.renamed(" x ")]
    assert (await store.get(a.id)).title == " x "


@pytest.mark.asyncio
async def test_ready_log_reports_row_count(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    db = tmp_path / "tasks.sqlite3"
    first = TaskStore(db)
    await first.create("A")
    await first.create("B")
    first.close()

    with caplog.at_level(logging.INFO, logger="todo_core.tasks.task_store"):
        TaskStore(db).close()
    assert "total=2" in caplog.text
