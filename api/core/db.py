"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the two connection pools the service reads from:
- LEDGER:  the authoritative store (current ledger state, one row per entry)
- HISTORY: the indexed store (query-optimized account/signer/trust line rows)

FastAPI initializes both on startup and closes them on shutdown
(see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

LEDGER = "ledger"
HISTORY = "history"

_DATABASE_URL_ENV = {
    LEDGER: "LEDGER_DATABASE_URL",
    HISTORY: "HISTORY_DATABASE_URL",
}

_pools: dict[str, asyncpg.Pool] = {}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url(store: str) -> str:
    env_name = _DATABASE_URL_ENV[store]
    url = os.environ.get(env_name, "").strip()
    if not url:
        raise RuntimeError(f"{env_name} is not set.")
    return _sanitize_database_url(url)


async def init_pools() -> None:
    for store in (LEDGER, HISTORY):
        if store in _pools:
            continue
        _pools[store] = await asyncpg.create_pool(
            dsn=database_url(store),
            min_size=_env_int("DB_POOL_MIN_SIZE", 1),
            max_size=_env_int("DB_POOL_MAX_SIZE", 5),
            command_timeout=_env_int("DB_COMMAND_TIMEOUT_S", 30),
        )


async def close_pools() -> None:
    while _pools:
        _, p = _pools.popitem()
        await p.close()


def pool(store: str) -> asyncpg.Pool:
    p = _pools.get(store)
    if p is None:
        raise RuntimeError(f"DB pool '{store}' is not initialized. Call init_pools() on startup.")
    return p


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(store: str, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query against `store` and return a single row as a dict (or None).
    """
    row = await pool(store).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(store: str, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query against `store` and return all rows as a list of dicts.
    """
    rows = await pool(store).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]
