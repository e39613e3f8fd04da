"""
Process-local locks that make each ledger operation indivisible.

Two kinds of lock:

  - One asyncio.Lock per identity. Held for the whole of an operation on
    that identity's account: lookup, validation, mutation and commit. Two
    requests for the same identity therefore never interleave, and a reader
    inside the lock always sees the previous writer's committed state.

  - One log lock. Held while the TransactionLog allocates the next id and
    the unit of work commits, so ids are handed out in commit order with no
    duplicates or gaps.

Lock order is always identity lock first, then log lock. Nothing ever takes
them the other way round, so they cannot deadlock.

Waiting is plain `await lock.acquire()`: a blocked request simply suspends
until the holder commits. There is no timeout.

Identity locks are created on first use and never dropped, so the registry
holds at most one lock per distinct identity that has called the API. An
idle lock is a few hundred bytes.

These locks only coordinate coroutines inside ONE process. Running several
API workers against one database would need database-level serialization.
"""

import asyncio


class LedgerLocks:
    def __init__(self) -> None:
        self._identity_locks: dict[str, asyncio.Lock] = {}
        self.log_lock = asyncio.Lock()

    def for_identity(self, identity: str) -> asyncio.Lock:
        # No await between lookup and insert, so this is atomic on the event loop
        lock = self._identity_locks.get(identity)
        if lock is None:
            lock = self._identity_locks[identity] = asyncio.Lock()
        return lock


# Shared by every request in this process (see dependencies.get_ledger_locks)
ledger_locks = LedgerLocks()
