import pytest

from uringecho.op import OpType
from uringecho.op_pool import (
    MAX_CLIENT_ID,
    MAX_CLIENTS,
    POOL_IDX_MASK,
    OpPool,
    clear_in_use,
    extract_client_id,
    extract_in_use,
    extract_pool_idx,
    make_pool_id,
)


class _FakeConnection:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_make_pool_id_zero_is_only_in_use_bit():
    assert make_pool_id(0, 0) == 1


@pytest.mark.parametrize("client_id, pool_idx", [(0, 0), (5, 3), (MAX_CLIENT_ID, POOL_IDX_MASK)])
def test_pool_id_round_trip(client_id, pool_idx):
    pool_id = make_pool_id(client_id, pool_idx)
    assert extract_client_id(pool_id) == client_id
    assert extract_pool_idx(pool_id) == pool_idx
    assert extract_in_use(pool_id) is True
    assert pool_id < 2**64


def test_clear_in_use_keeps_other_fields():
    pool_id = make_pool_id(12, 34)
    cleared = clear_in_use(pool_id)
    assert extract_in_use(cleared) is False
    assert extract_client_id(cleared) == 12
    assert extract_pool_idx(cleared) == 34


def test_pool_idx_is_masked():
    pool_id = make_pool_id(0, POOL_IDX_MASK + 1 + 5)
    assert extract_pool_idx(pool_id) == 5


def test_client_id_wraps_at_bit_width():
    pool_id = make_pool_id(MAX_CLIENT_ID + 1, 0)
    assert extract_client_id(pool_id) == 0


@pytest.mark.parametrize("max_clients", [0, MAX_CLIENTS + 1])
def test_invalid_max_clients(max_clients):
    with pytest.raises(ValueError):
        OpPool(max_clients)


def test_pick_free_allocates_sequentially():
    pool = OpPool(3)
    ops = [pool.pick_free() for _ in range(3)]
    assert [extract_pool_idx(op.pool_id) for op in ops] == [0, 1, 2]
    assert [extract_client_id(op.pool_id) for op in ops] == [0, 1, 2]
    assert all(extract_in_use(op.pool_id) for op in ops)
    assert all(op.type is OpType.ACCEPT for op in ops)


def test_pick_free_exhausted_returns_none():
    pool = OpPool(2)
    assert pool.pick_free() is not None
    assert pool.pick_free() is not None
    assert pool.pick_free() is None


def test_get_returns_slot_op():
    pool = OpPool(4)
    op = pool.pick_free()
    assert pool.get(op.pool_id) is op
    assert pool.get(make_pool_id(0, 3)) is None


def test_put_recycles_slot_with_new_client_id():
    pool = OpPool(1)
    op = pool.pick_free()
    conn = _FakeConnection()
    op.connection = conn
    old_id = op.pool_id
    assert pool.put(op, old_id) is True
    assert conn.closed is True
    assert extract_in_use(op.pool_id) is False
    reused = pool.pick_free()
    assert reused is op
    assert extract_pool_idx(reused.pool_id) == extract_pool_idx(old_id)
    assert extract_client_id(reused.pool_id) == extract_client_id(old_id) + 1
    assert pool.pick_free() is None


def test_put_with_stale_id_is_ignored():
    pool = OpPool(1)
    op = pool.pick_free()
    conn = _FakeConnection()
    op.connection = conn
    stale = make_pool_id(extract_client_id(op.pool_id) + 7, 0)
    assert pool.put(op, stale) is False
    assert conn.closed is False
    assert extract_in_use(op.pool_id) is True
    assert pool.pick_free() is None


def test_put_twice_only_frees_once():
    pool = OpPool(2)
    op = pool.pick_free()
    pool.pick_free()
    pool_id = op.pool_id
    assert pool.put(op, pool_id) is True
    assert pool.put(op, pool_id) is False
    assert pool.pick_free() is op
    assert pool.pick_free() is None