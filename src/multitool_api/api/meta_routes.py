"""Version and health endpoints."""
import os
import subprocess
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from multitool_api.config import settings

BUILD_TIMESTAMP = datetime.now().isoformat()


def get_git_info():
    """Get git commit hash and timestamp if available."""
    try:
        result = subprocess.run(
            ["git", "log", "-1", "--format=%H|%ci", "--date=iso"],
            cwd=os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0 and result.stdout.strip():
            commit, date = result.stdout.strip().split("|", 1)
            return {
                "commit": commit,
                "commit_short": commit[:7],
                "commit_date": date,
            }
    except (OSError, subprocess.SubprocessError, ValueError):
        return None
    return None


GIT_INFO = get_git_info()

router = APIRouter()


@router.get("/version")
async def get_version():
    """Get API version and build information."""
    version_info = {
        "service": "multitool-api",
        "environment": settings.ENVIRONMENT,
        "build_timestamp": BUILD_TIMESTAMP,
    }
    if GIT_INFO:
        version_info.update(
            {
                "git_commit": GIT_INFO["commit"],
                "git_commit_short": GIT_INFO["commit_short"],
                "git_commit_date": GIT_INFO["commit_date"],
            }
        )
    return JSONResponse(version_info)


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}
