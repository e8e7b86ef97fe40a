"""
dependencies/security.py

Teacher routes (/v1/teacher/...) are called by the portal's server side with a
shared service token. Students never reach these routes.
"""

import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import settings

# auto_error=False: a missing/odd header gets our own 401 body instead of FastAPI's 403
teacher_bearer = HTTPBearer(auto_error=False, description="Portal service token for teacher routes")


def _reject(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_teacher_access(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(teacher_bearer),
):
    expected = settings.PORTAL_INTERNAL_TOKEN
    if not expected:
        # teacher routes stay closed until a token is configured
        raise HTTPException(status_code=500, detail="Teacher route token not configured")

    if credentials is None:
        raise _reject("Teacher routes need a Bearer token")

    if not hmac.compare_digest(credentials.credentials.strip().encode(), expected.encode()):
        raise _reject("Invalid teacher route token")

    return {"client": "teacher-portal"}
