#!/usr/bin/env python3
"""
Wishlist Hub Backend Runner
===========================

Run the API server or load demo data.

Usage:
    python run_app.py                    # Run the app (default, with auto-reload)
    python run_app.py --mode prod        # Production mode
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
    python run_app.py --seed             # Reset the database and load demo data
"""

import argparse
import asyncio
import os
import sys

def print_banner():
    """Print application banner"""
    banner = """
╔═══════════════════════════════════════════════════════╗
║                  🎁 Wishlist Hub Backend               ║
║           Collaborative wishlists in realtime         ║
╚═══════════════════════════════════════════════════════╝
    """
    print(banner)

def check_environment():
    """Report on the local environment"""
    print("\n🔍 Checking environment...")

    if not os.path.isdir("app"):
        print("❌ app package not found. Please run from the project root.")
        return False

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using defaults")

    return True

def run_seed():
    """Reset the database and insert the demo accounts"""
    from app.core.logging import setup_logging
    from app.core.database import close_db
    from app.core.seed import DEMO_PASSWORD, DEMO_USERS, seed_demo_data

    setup_logging()

    async def _seed():
        try:
            return await seed_demo_data()
        finally:
            await close_db()

    summary = asyncio.run(_seed())

    print(f"\n🌱 Seeded {summary['users']} users and {summary['wishlists']} wishlists")
    print("\nDemo accounts:")
    for user in DEMO_USERS:
        print(f"  Email: {user['email']}, Password: {DEMO_PASSWORD}")

def run_main_app(host="0.0.0.0", port=8000, reload=True):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting Wishlist Hub on {host}:{port}")
    print(f"📖 API Docs: http://localhost:{port}/api/docs")
    print(f"🔌 Realtime: ws://localhost:{port}/api/v1/ws/wishlists?token=<token>")
    print("\n" + "="*50)

    import uvicorn
    try:
        uvicorn.run(
            "app.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")

def main():
    parser = argparse.ArgumentParser(
        description="Wishlist Hub Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_app.py                      # Development server on port 8000
  python run_app.py --mode prod          # Production mode
  python run_app.py --port 8001          # Custom port
  python run_app.py --seed               # Load demo data
        """
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Reset the database, load demo data and exit"
    )

    args = parser.parse_args()

    print_banner()

    if not check_environment():
        return 1

    if args.seed:
        run_seed()
        return 0

    reload = not args.no_reload and args.mode != "prod"
    run_main_app(args.host, args.port, reload)

    return 0

if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ Unexpected error: {e}")
        sys.exit(1)
