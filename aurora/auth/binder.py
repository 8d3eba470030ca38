"""
Persist verified identities.

Every successful login upserts the user and recomputes the role from the
handle, so a handle change (or a change of SUPER_ADMIN_HANDLE) takes
effect on that identity's next login, in either direction.
"""

from .models import User, VerifiedIdentity
from ..stores.document_store import DocumentStore
from ..utils.logger import get_logger

logger = get_logger(__name__)


def role_for_handle(handle: str, super_admin_handle: str) -> str:
    if super_admin_handle and handle.lower() == super_admin_handle.lower():
        return "admin"
    return "user"


class IdentityBinder:
    def __init__(self, store: DocumentStore, super_admin_handle: str):
        self.store = store
        self.super_admin_handle = super_admin_handle

    def bind(self, identity: VerifiedIdentity) -> User:
        """Insert or refresh the user record; returns it with the current role."""
        role = role_for_handle(identity.handle, self.super_admin_handle)
        with self.store.transaction() as snapshot:
            users = snapshot["users"]
            record = next((u for u in users if u.get("id") == identity.id), None)
            if record is None:
                record = User(
                    id=identity.id,
                    display_name=identity.display_name,
                    handle=identity.handle,
                    role=role,
                ).to_record()
                users.append(record)
                logger.info("User created", user_id=identity.id, role=role)
            else:
                previous_role = record.get("role")
                record["first_name"] = identity.display_name
                record["username"] = identity.handle
                record["role"] = role
                if previous_role != role:
                    logger.info("User role changed", user_id=identity.id, old_role=previous_role, new_role=role)

        return User.model_validate(record)
