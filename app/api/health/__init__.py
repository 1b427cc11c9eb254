import asyncio
import shutil
import time

import psutil
from sqlalchemy import inspect, text

from app.db.main import async_engine

REQUIRED_TABLES = ("booking_ledger", "client_bookings", "bank_accounts")


def _missing_tables(sync_conn) -> list[str]:
    existing = set(inspect(sync_conn).get_table_names())
    return [name for name in REQUIRED_TABLES if name not in existing]


async def check_database() -> dict:
    started = time.perf_counter()
    try:
        async with asyncio.timeout(2):
            async with async_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                missing = await conn.run_sync(_missing_tables)
    except Exception:
        return {"status": "down"}
    return {
        "status": "up" if not missing else "degraded",
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        "missing_tables": missing,
    }


def check_disk() -> dict:
    total, used, free = shutil.disk_usage("/")
    return {
        "free_gb": round(free / (1024 ** 3), 2),
        "usage_percent": round((used / total) * 100, 2),
    }


def check_memory() -> dict:
    mem = psutil.virtual_memory()
    return {
        "available_gb": round(mem.available / (1024 ** 3), 2),
        "usage_percent": mem.percent,
    }
