"""TodoService：create / list / remove / toggle 状态机"""

import asyncio

import pytest

from app.todo.schemas import TodoStatus
from app.todo.store import TodoStoreError
from tests.helpers import VISITOR


async def test_create_then_list_contains_new_active_item(service):
    outcome = await service.create(VISITOR, "Buy milk")

    assert outcome.ok
    assert outcome.item.text == "Buy milk"
    assert outcome.item.completed is False

    todos = await service.list(VISITOR)
    assert todos == [outcome.item]


async def test_create_assigns_unique_ids(service):
    a = await service.create(VISITOR, "a")
    b = await service.create(VISITOR, "b")

    assert a.item.id != b.item.id


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
async def test_create_blank_text_is_noop(service, text):
    await service.create(VISITOR, "existing")
    before = await service.list(VISITOR)

    outcome = await service.create(VISITOR, text)

    assert outcome.status is TodoStatus.INVALID_INPUT
    assert outcome.item is None
    assert await service.list(VISITOR) == before


async def test_create_without_identity_is_noop(service, fake_redis):
    outcome = await service.create(None, "orphan")

    assert outcome.status is TodoStatus.MISSING_IDENTITY
    assert fake_redis.lists == {}


async def test_list_without_identity_is_empty(service):
    assert await service.list(None) == []
    assert await service.list("") == []


async def test_remove_deletes_only_matching_item(service):
    keep = (await service.create(VISITOR, "keep")).item
    drop = (await service.create(VISITOR, "drop")).item

    outcome = await service.remove(VISITOR, drop.id)

    assert outcome.ok
    assert outcome.item == drop
    assert await service.list(VISITOR) == [keep]


async def test_remove_unknown_id_leaves_collection_unchanged(service):
    await service.create(VISITOR, "a")
    await service.create(VISITOR, "b")
    before = await service.list(VISITOR)

    outcome = await service.remove(VISITOR, "no-such-id")

    assert outcome.status is TodoStatus.NOT_FOUND
    assert await service.list(VISITOR) == before


async def test_remove_missing_preconditions_are_noops(service):
    item = (await service.create(VISITOR, "a")).item

    assert (await service.remove(None, item.id)).status is TodoStatus.MISSING_IDENTITY
    assert (await service.remove(VISITOR, "")).status is TodoStatus.INVALID_INPUT
    assert await service.list(VISITOR) == [item]


async def test_toggle_flips_completed_and_moves_item_to_end(service):
    first = (await service.create(VISITOR, "first")).item
    second = (await service.create(VISITOR, "second")).item

    outcome = await service.toggle(VISITOR, first.id)

    assert outcome.ok
    assert outcome.item.completed is True
    todos = await service.list(VISITOR)
    assert [t.id for t in todos] == [second.id, first.id]
    assert todos[-1].text == "first"
    assert todos[-1].completed is True


async def test_toggle_twice_restores_completed(service):
    item = (await service.create(VISITOR, "twice")).item

    await service.toggle(VISITOR, item.id)
    await service.toggle(VISITOR, item.id)

    todos = await service.list(VISITOR)
    assert todos == [item]


async def test_toggle_unknown_id_is_noop(service):
    await service.create(VISITOR, "a")
    before = await service.list(VISITOR)

    outcome = await service.toggle(VISITOR, "ghost")

    assert outcome.status is TodoStatus.NOT_FOUND
    assert await service.list(VISITOR) == before


async def test_toggle_without_identity_is_noop(service):
    outcome = await service.toggle(None, "whatever")

    assert outcome.status is TodoStatus.MISSING_IDENTITY


async def test_store_failure_propagates(service, fake_redis):
    item = (await service.create(VISITOR, "a")).item
    fake_redis.down = True

    with pytest.raises(TodoStoreError):
        await service.list(VISITOR)
    with pytest.raises(TodoStoreError):
        await service.toggle(VISITOR, item.id)
    with pytest.raises(TodoStoreError):
        await service.create(VISITOR, "b")


async def test_toggle_write_failure_keeps_item(service, fake_redis, monkeypatch):
    """toggle 读成功、写失败：抛 TodoStoreError，且原条目仍在列表中"""
    keep = (await service.create(VISITOR, "keep")).item
    target = (await service.create(VISITOR, "target")).item
    original_lrange = fake_redis.lrange

    async def lrange_then_go_down(*args):
        result = await original_lrange(*args)
        fake_redis.down = True
        return result

    monkeypatch.setattr(fake_redis, "lrange", lrange_then_go_down)

    with pytest.raises(TodoStoreError):
        await service.toggle(VISITOR, target.id)

    monkeypatch.setattr(fake_redis, "lrange", original_lrange)
    fake_redis.down = False
    assert await service.list(VISITOR) == [keep, target]


async def test_concurrent_toggles_for_one_visitor_do_not_lose_updates(service):
    items = [(await service.create(VISITOR, f"item {i}")).item for i in range(5)]

    await asyncio.gather(*(service.toggle(VISITOR, item.id) for item in items))

    todos = await service.list(VISITOR)
    assert len(todos) == 5
    assert all(t.completed for t in todos)
    assert {t.id for t in todos} == {item.id for item in items}


async def test_concurrent_remove_and_create_keep_both_effects(service):
    doomed = (await service.create(VISITOR, "doomed")).item

    _, created = await asyncio.gather(
        service.remove(VISITOR, doomed.id),
        service.create(VISITOR, "newcomer"),
    )

    assert await service.list(VISITOR) == [created.item]
