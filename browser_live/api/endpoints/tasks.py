"""
Task status endpoint for the live-view widget.

The widget polls this endpoint directly, independently of the assistant's
tool-call channel. Each request makes exactly one status query against
Browser Use Cloud; nothing is cached between requests.
"""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...errors import BrowserUseAPIError
from ...services import TaskCoordinator
from ..dependencies import get_task_coordinator

logger = structlog.get_logger()

router = APIRouter()


@router.get(
    "/task/{task_id}",
    tags=["Tasks"],
    summary="Get browser task status",
    responses={
        200: {"description": "Normalized task snapshot"},
        400: {"description": "Empty task id"},
        500: {"description": "Provider or transport failure"},
    },
)
async def get_task_status(
    task_id: str,
    coordinator: TaskCoordinator = Depends(get_task_coordinator),
) -> JSONResponse:
    """
    Get the current status of a browser task.

    Returns:
        200: {"done": bool, "isSuccess": bool | null, "taskOutput": str | null,
              "totalSteps": int}
        500: {"error": str}

    Example:
        GET /api/task/t1
    """
    if not task_id.strip():
        return JSONResponse(status_code=400, content={"error": "task_id is required"})

    try:
        snapshot = await coordinator.check_task(task_id)
    except BrowserUseAPIError as e:
        logger.error("Task status query failed", task_id=task_id, error=e.message)
        return JSONResponse(status_code=500, content={"error": e.message})
    except Exception as e:
        logger.error(
            "Unexpected error querying task status", task_id=task_id, error=str(e)
        )
        return JSONResponse(status_code=500, content={"error": str(e) or "Internal error"})

    return JSONResponse(status_code=200, content=snapshot.to_dict())
