#!/usr/bin/env python3
"""
Cafe Map Backend - Run Script
This script starts the FastAPI backend server
"""

import os
import sys
import subprocess
import socket
from pathlib import Path
from urllib.parse import urlparse

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def check_port_open(host, port):
    """Check if a port is open"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def main():
    print_colored("🚀 Starting Cafe Map Backend...", "blue")

    # Check if we're in the backend directory
    check_file_exists("cafe_map/main.py", "cafe_map/main.py not found. Please run this script from the backend directory.")

    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  No .env file found, using defaults (local storage, Kyiv bounding box).", "yellow")

    from cafe_map.core.config import settings

    # Only MongoDB mode needs a running database
    if settings.STORAGE_MODE == "mongodb":
        print_colored("🔍 Checking MongoDB connection...", "blue")
        mongo = urlparse(settings.MONGO_URI)
        host, port = mongo.hostname or "localhost", mongo.port or 27017
        if not check_port_open(host, port):
            print_colored(f"⚠️  Warning: MongoDB doesn't appear to be running on {host}:{port}", "yellow")
            print("Please start MongoDB first:")
            print("  - Using Docker: docker run -d -p 27017:27017 mongo:7.0")
            print("  - Or set STORAGE_MODE=local in .env")
            print()
            response = input("Continue anyway? (y/N): ").strip().lower()
            if response != 'y':
                sys.exit(1)
    else:
        print_colored(f"📁 Storing cafe statuses under {os.path.abspath(settings.DATA_DIR)}", "blue")

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 API Health check: http://localhost:8000/health")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "cafe_map.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
