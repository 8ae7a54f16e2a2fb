import logging
import os

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    port = int(os.environ.get("NVB_PORT", "8000"))
    print("Starting Visualization Bridge API...")
    print(f"Snapshot stream at: http://localhost:{port}/api/v1/stream")

    uvicorn.run(
        "bridge.api.server:app",
        host=os.environ.get("NVB_HOST", "0.0.0.0"),
        port=port,
        log_level="info",
    )
