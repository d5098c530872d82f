#!/usr/bin/env python3
"""
Cleanhood Rewards Runner
========================

Run the rewards API or its Celery worker.

Usage:
    python run_app.py                    # Development server with auto-reload
    python run_app.py --mode prod        # Production mode
    python run_app.py --mode worker      # Celery worker with the ledger audit beat
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import subprocess
import sys

def check_environment():
    """Report on the local configuration"""
    print("\nChecking environment...")

    if os.path.exists(".env"):
        print(".env file found")
    else:
        print(".env file not found, using defaults")

    if os.path.exists("cleanhood.db"):
        print("Database file found")
    else:
        print("Database file not found (will be created on startup)")

def run_api(host="0.0.0.0", port=8000, reload=True, workers=1):
    """Run the FastAPI application"""
    print(f"\nStarting Cleanhood Rewards API on {host}:{port}")
    print(f"API Docs: http://{host}:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    try:
        uvicorn.run(
            "cleanhood.main:app",
            host=host,
            port=port,
            reload=reload,
            workers=None if reload else workers,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")

def run_worker():
    """Run a Celery worker with an embedded beat scheduler"""
    print("\nStarting Celery worker...")
    try:
        subprocess.run(
            [sys.executable, "-m", "celery", "-A", "cleanhood.core.celery_app", "worker", "-B", "--loglevel=info"],
            check=True,
        )
    except KeyboardInterrupt:
        print("\nWorker stopped by user")

def main():
    parser = argparse.ArgumentParser(
        description="Cleanhood Rewards Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        choices=["dev", "prod", "worker"],
        default="dev",
        help="Run mode (default: dev)"
    )
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument("--workers", type=int, default=4, help="Worker processes in prod mode")

    args = parser.parse_args()

    check_environment()

    if args.mode == "worker":
        run_worker()
    else:
        run_api(args.host, args.port, reload=args.mode == "dev", workers=args.workers)
    return 0

if __name__ == "__main__":
    sys.exit(main())
