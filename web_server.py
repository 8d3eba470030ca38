"""Web server entry point for the Aurora support desk"""

import socket

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file BEFORE building settings
load_dotenv()

from aurora.app import AuroraApp
from aurora_web.main import create_app


def _port_in_use(host: str, port: int) -> bool:
    """Return True if the given port is already in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


def main() -> None:
    aurora = AuroraApp().initialize()
    web = aurora.settings.web
    if _port_in_use(web.host, web.port):
        raise SystemExit(f"Port {web.port} is already in use. Stop that process or set PORT.")

    print(f"Aurora support desk listening on http://localhost:{web.port}")
    # One worker: the store's write lock only serializes writers inside a process
    uvicorn.run(create_app(aurora), host=web.host, port=web.port, workers=1)


if __name__ == "__main__":
    main()
