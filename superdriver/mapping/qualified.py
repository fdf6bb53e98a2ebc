"""Qualified profile identifiers: {profileId}#{affordanceId}[/{parameterId}]."""
from typing import Any, Dict, Optional


def qualify(profile_id: str, affordance_id: str, parameter_id: Optional[str] = None) -> str:
    """Build a fully qualified profile id"""
    qualified = f"{profile_id}#{affordance_id}"
    if parameter_id is not None:
        qualified = f"{qualified}/{parameter_id}"
    return qualified


def qualify_inputs(profile_id: str, affordance_id: str, inputs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Qualify every key of a caller's semantic input map"""
    return {
        qualify(profile_id, affordance_id, name): value
        for name, value in (inputs or {}).items()
    }


def unqualify(profile_id: str, qualified_id: str) -> Optional[str]:
    """Strip the profile prefix, or None if the id belongs to another profile"""
    prefix = f"{profile_id}#"
    if qualified_id and qualified_id.startswith(prefix):
        return qualified_id[len(prefix):]
    return None
