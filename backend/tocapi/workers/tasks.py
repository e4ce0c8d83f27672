"""ARQ background tasks."""
from typing import Any, Dict

from tocapi.utils.logger import logger


async def purge_expired_reset_tokens(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    Delete password reset codes that have expired.

    Args:
        ctx: ARQ context holding the open ServiceContainer

    Returns:
        Dict with success status and number of tokens removed
    """
    try:
        removed = ctx["container"].password_reset.purge_expired_tokens()
        return {"success": True, "removed": removed}
    except Exception as e:
        logger.error(f"Failed to purge expired reset tokens: {e}", exc_info=True)
        return {"success": False, "error": str(e)}
