"""Status check tool."""

from ..config import find_config_file, get_config
from ..executor import check_claude_available


def check_status() -> dict:
    """Check the status of the MCP server and its dependencies.

    Returns information about:
    - Whether claude CLI is available
    - Whether the configuration is loaded, and from where
    - The configured default model
    """
    # Check config
    try:
        config = get_config()
        config_loaded = True
        config_error = None
        config_file = find_config_file()
        model = config.model
        claude_path = config.claude_path
    except Exception as e:
        config_loaded = False
        config_error = str(e)
        config_file = None
        model = None
        claude_path = None

    # Check claude
    cli_available, cli_message = check_claude_available(claude_path)

    return {
        "claude_available": cli_available,
        "claude_message": cli_message,
        "config_loaded": config_loaded,
        "config_error": config_error,
        "config_file": str(config_file) if config_file else None,
        "model": model,
    }
