"""Copy MCP client configurations between gists, URLs and local files."""

__version__ = "0.1.0"
