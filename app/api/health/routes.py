from fastapi import APIRouter

from app.api.health import check_database, check_disk, check_memory
from app.core.config import Config

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    database = await check_database()

    return {
        "status": "ok" if database["status"] == "up" else "degraded",
        "environment": Config.APP_ENV,
        "checks": {
            "database": database,
            "disk": check_disk(),
            "memory": check_memory(),
        },
    }
