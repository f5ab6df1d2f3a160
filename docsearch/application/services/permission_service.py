"""Document view permission: batch filter over result ids."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from docsearch.domain.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class PermissionService:
    """Allow-by-default permission filter.

    No policy is enforced unless explicit denials are configured
    (principal -> document ids). Denials are how callers and tests exercise
    the filtering path.
    """

    def __init__(self, denied: Mapping[str, Iterable[str]] | None = None) -> None:
        self._denied: dict[str, set[str]] = {
            principal: set(ids) for principal, ids in (denied or {}).items()
        }

    def deny(self, principal: str, document_id: str) -> None:
        self._denied.setdefault(principal, set()).add(document_id)

    def can_view(self, document_id: str, principal: str) -> bool:
        return document_id not in self._denied.get(principal, ())

    async def filter_allowed(self, document_ids: list[str], principal: str) -> list[str]:
        """Return the ids principal may view, in input order."""
        denied = self._denied.get(principal)
        if not denied:
            return list(document_ids)
        allowed = [doc_id for doc_id in document_ids if doc_id not in denied]
        if len(allowed) != len(document_ids):
            logger.debug(
                "Permission filter dropped %d of %d documents for %s",
                len(document_ids) - len(allowed),
                len(document_ids),
                principal,
            )
        return allowed

    async def ensure_can_view(self, document_id: str, principal: str) -> None:
        """Raise PermissionDeniedError if principal may not view the document."""
        if not self.can_view(document_id, principal):
            raise PermissionDeniedError(resource="document", action="view")
