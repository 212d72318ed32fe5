#!/usr/bin/env python3
import os
import sys

print(
    f"[mcp] cdp={os.environ.get('MCP_CDP_HOST', '127.0.0.1')}:{os.environ.get('MCP_CDP_PORT', 'auto')} | "
    f"streaming={os.environ.get('MCP_STREAMING_ENDPOINT', 'off')} | "
    f"allowlist={os.environ.get('MCP_ALLOW_HOSTS', '*')}",
    file=sys.stderr,
)

from mcp_servers.cdp_bridge.main import main  # noqa: E402

if __name__ == "__main__":
    main()
