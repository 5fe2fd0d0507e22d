"""An MCP server over streamable HTTP with a shared counter, resources and prompts."""

__version__ = "0.1.0"
__all__ = ["__version__"]