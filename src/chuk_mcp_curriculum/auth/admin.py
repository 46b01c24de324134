"""
Admin check - who may edit the curriculum.

A user is an admin when admins/{uid} exists with role 'admin'. The
identity provider that produces the uid is outside this package.
"""

from __future__ import annotations

import logging

from chuk_mcp_curriculum.constants import ADMIN_ROLE, ADMINS
from chuk_mcp_curriculum.errors import StoreError
from chuk_mcp_curriculum.store.documents import DocumentStore

logger = logging.getLogger(__name__)


async def is_admin(store: DocumentStore, uid: str | None) -> bool:
    """
    Check whether a user may edit the curriculum.

    Access is denied when there is no uid, no role document, a different
    role, or the role document cannot be read.
    """
    if not uid:
        return False

    try:
        snapshot = await store.get(ADMINS, uid)
    except (StoreError, OSError):
        logger.warning(f"Admin lookup failed for {uid}; denying access", exc_info=True)
        return False

    return snapshot is not None and snapshot.data.get("role") == ADMIN_ROLE
