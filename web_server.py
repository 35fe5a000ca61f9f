"""Web server entry point for the dress shop storefront API"""

import os
import socket

import uvicorn

# Load environment variables from .env file BEFORE importing anything else
from dotenv import load_dotenv
load_dotenv()

from web.main import create_app


def _port_in_use(host: str, port: int) -> bool:
    """Return True if the given port is already in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


def _get_available_port(host: str, preferred: int, max_tries: int = 10) -> int:
    """Return preferred port if free, otherwise the first free port in [preferred, preferred+max_tries)."""
    for p in range(preferred, preferred + max_tries):
        if not _port_in_use(host, p):
            return p
    raise RuntimeError(
        f"None of the ports {preferred}-{preferred + max_tries - 1} are available. "
        "Stop the process using the port or set WEB_PORT to a different number."
    )


def main() -> None:
    host = os.getenv("WEB_HOST", "0.0.0.0")
    preferred_port = int(os.getenv("WEB_PORT", "8000"))
    port = _get_available_port(host, preferred_port)
    if port != preferred_port:
        print(f"Port {preferred_port} is in use; using port {port} instead.")

    app = create_app()
    print("Starting DressShop API...")
    print(f"Local server will be available at: http://localhost:{port}")
    if not os.getenv("ADMIN_PASSWORD"):
        print("Admin login: user 'admin' with the default password; set ADMIN_PASSWORD to change it.")
    print()

    try:
        uvicorn.run(app, host=host, port=port, reload=False)
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
