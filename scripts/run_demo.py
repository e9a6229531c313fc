"""
Quick demo script: run CaseCoach locally.

Usage:
    python scripts/run_demo.py
"""

import uvicorn

from casecoach.config import Settings


def main():
    settings = Settings.from_env()
    print("=" * 60)
    print("  CaseCoach — Case Interview Practice")
    print("=" * 60)
    print()
    print(f"Starting server at http://localhost:{settings.port}")
    print("Send requests with an X-User-Id header (X-User-Role: admin for case edits).")
    print()
    print(f"API docs: http://localhost:{settings.port}/docs")
    print("Press Ctrl+C to stop.")
    print()

    uvicorn.run(
        "casecoach.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )


if __name__ == "__main__":
    main()
