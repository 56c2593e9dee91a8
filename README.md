# uringecho

A small TCP echo server, a client that floods it with numbered
messages, and a handful of pooled data structures:

- `uringecho.cid_set.CidSet`: an open-addressing hash set of 64-bit client
  ids, with a batched iterator `CidIter` (`next_batch(batch_size)`).
- `uringecho.groups.Groups`: a map from group id to a `CidSet` of members.
- `uringecho.slab.Slab`: a pool of reusable fixed-size `bytearray` buffers.
- `uringecho.client_map.ClientMap`: `ClientInfo` records keyed by client id,
  recycling deleted records through a free list.
- `uringecho.op_pool.OpPool`: a bounded pool of per-connection `Op` records,
  each identified by a packed pool id (client id, pool index, in-use bit),
  with `make_pool_id`, `extract_client_id`, `extract_pool_idx`,
  `extract_in_use` and `clear_in_use` to build and take apart such ids.
- `uringecho.utils`: `pack_int` / `read_int_from_buffer` for 32-bit
  big-endian integers, plus `is_prime`, `closest_prime` and `round_up_pow_2`.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
uringecho-server
uringecho-server --port 9000
```

The server listens on all interfaces (port 8080 unless `--port` is
given), prints `Server is running`, and serves up to 1024 clients at
once; further connections are closed straight away. For each client it
logs the connection, every whole 4-byte big-endian integer it receives,
and the disconnection, and echoes every chunk of bytes back unchanged.

From Python, `uringecho.server.EchoServer(port, pool)` can be started with
`await server.start()` (port 0 picks a free port, stored in `server.port`)
and stopped with `await server.close()`; `run_server(port)` runs one until
interrupted.

## Running the client

```
uringecho-client 127.0.0.1 8080
uringecho-client 127.0.0.1 8080 --num_messages=5000
uringecho-client 127.0.0.1 8080 --num_messages 5000
```

The server address must be an IPv4 address. The client connects, sends
the numbers `0 .. num_messages-1` as 4-byte big-endian integers in
batches of 100, waits for each batch's echo, and prints every number it
gets back. It does this five times, each over a fresh connection.
`num_messages` defaults to 1000 and may be at most 10,000,000.

From Python, `uringecho.client.run_client(host, port, num_messages)` does a
single round and returns the list of integers received.

## Using the data structures

```python
from uringecho.cid_set import CidSet
from uringecho.groups import Groups
from uringecho.slab import Slab

ids = CidSet()
for cid in range(8):
    ids.insert(cid)
assert 3 in ids and len(ids) == 8 and ids.capacity == 16

groups = Groups(1024)
groups.insert(0, 42)
members = groups.get(0).next_batch(20)   # [42]
assert groups.get(100) is None

slab = Slab(1024, 2)
buf = slab.get()
slab.put(buf)
```

## What it does not do

The server only echoes: it decodes incoming integers for its log but
has no request protocol beyond that. `Groups`, `ClientMap` and `Slab`
are standalone structures; the server does not use them, so there is
no group messaging, no per-user state and no buffer sharing between
connections.