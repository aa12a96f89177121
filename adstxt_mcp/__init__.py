"""MCP server exposing the Ads.txt Manager API as agent tools."""

__version__ = "0.1.0"
