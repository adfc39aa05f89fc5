import aiofiles
from fastapi import APIRouter, Query

router = APIRouter(prefix="/api/v1")

MAX_LOG_LINES = 200


# --- System API ---
@router.get("/system/logs")
async def tail_logs(lines: int = Query(50, ge=1, le=MAX_LOG_LINES)):
    """Last `lines` lines of the service log file."""
    from core.logger import LOG_FILE

    try:
        async with aiofiles.open(LOG_FILE, "r") as f:
            content = await f.readlines()
    except OSError as e:
        return {"error": str(e)}
    return {"logs": content[-lines:], "file": LOG_FILE}
