#!/usr/bin/env python
"""Start the Extension Update Service."""

import os
import sys
from pathlib import Path

# Change to script directory so relative paths work correctly
script_dir = Path(__file__).parent.resolve()
os.chdir(script_dir)

# Add src to path
src_path = script_dir / "src"
sys.path.insert(0, str(src_path))

if __name__ == "__main__":
    import uvicorn
    from update_svc.main import load_config

    config = load_config()
    uvicorn.run(
        "update_svc.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
    )
