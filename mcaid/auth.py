"""
Request identity resolution.
The acting user is taken from the X-User-Id header; token verification
belongs to the upstream gateway.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .database import get_db
from .models import User

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the acting user from the X-User-Id header"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    try:
        user_id = int(x_user_id)
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header") from e

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Unknown user id in X-User-Id header: {user_id}")
        raise HTTPException(status_code=401, detail="User not found")
    return user


def require_role(*roles: str):
    """Dependency factory restricting an endpoint to the given roles"""

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"⚠️ User {current_user.id} with role {current_user.role} denied, requires {roles}"
            )
            raise HTTPException(status_code=403, detail="Not allowed for your role")
        return current_user

    return checker
