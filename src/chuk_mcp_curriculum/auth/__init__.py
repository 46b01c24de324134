"""Editor authorization."""

from chuk_mcp_curriculum.auth.admin import is_admin

__all__ = ["is_admin"]
