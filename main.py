#!/usr/bin/env python3
"""
file-analyzer

A FastAPI application that answers questions about an uploaded PDF using only
the PDF's own text, optionally expands topics with general AI knowledge, and
exports the session as a text file.

To start the server:
    python main.py
"""

import sys
from pathlib import Path

# add src to python path so we can import the package without installing it
sys.path.insert(0, str(Path(__file__).parent / "src"))

# start the fastapi server when this file is run
if __name__ == "__main__":
    import uvicorn
    # run the api app on port 8000 with auto-reload for development
    uvicorn.run("file_analyzer.api:app", host="0.0.0.0", port=8000, reload=True)
