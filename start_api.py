#!/usr/bin/env python3
"""
Startup script for the Pinboard Ranking API.
Expects the package to be installed (``pip install -e .``).
"""

import uvicorn

if __name__ == "__main__":
    print("Starting Pinboard Ranking API...")
    print("API Documentation: http://localhost:8000/docs")
    print("Health Check: http://localhost:8000/health")
    print("\nPress CTRL+C to stop\n")

    uvicorn.run(
        "pinboard.api.pin_api:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
