"""
Outbound Parameter Resolver - decides the value of one declared request slot.

Sources are tried in priority order, first satisfied wins:
1. Explicit caller input matching the slot's profile id
2. Credential store field named by a credential source hint
3. Literal value from a literal source hint
4. Nothing: ABSENT
"""

import logging
from typing import Any, Dict, Optional

from superdriver.schema.models import CredentialHint, LiteralHint, ParameterDecl
from superdriver.security.credentials import CredentialStore

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a slot no source could fill"""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class ParameterResolver:
    """Resolves parameter and body property values"""

    def resolve(
        self,
        decl: ParameterDecl,
        inputs: Dict[str, Any],
        credentials: Optional[CredentialStore] = None,
    ) -> Any:
        """
        Resolve the value of a declared parameter

        Args:
            decl: Parameter or body property declaration
            inputs: Caller input keyed by fully qualified profile id
            credentials: Credential store (optional)

        Returns:
            The value, or ABSENT when no source applies
        """
        if decl.semantic_id and decl.semantic_id in inputs:
            return inputs[decl.semantic_id]

        hint = decl.source_hint

        if isinstance(hint, CredentialHint):
            if credentials is not None:
                value = credentials.get(hint.source.scheme, hint.source.field)
                if value is not None:
                    return value
            logger.debug(f"No credential '{hint.source.value}' for parameter '{decl.name}'")

        elif isinstance(hint, LiteralHint):
            return hint.value

        return ABSENT
