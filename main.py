#!/usr/bin/env python3
"""
Plate Layout Randomizer
Entry point that serves the web API
"""

import os

import uvicorn


def main():
    """Launch the API server"""
    uvicorn.run(
        "backend.main:app",
        host=os.environ.get("PLATE_LAYOUT_HOST", "127.0.0.1"),
        port=int(os.environ.get("PLATE_LAYOUT_PORT", "8000")),
    )


if __name__ == '__main__':
    main()
