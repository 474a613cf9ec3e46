#!/usr/bin/env python3
"""Launch the location engine API with uvicorn, honoring the PORT environment variable."""

import os
import sys
import subprocess

APP_MODULE = "location_engine.main"
DEFAULT_PORT = 8000


def _resolve_port() -> int:
    raw = os.environ.get("PORT", str(DEFAULT_PORT))
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: PORT={raw!r} is not a number, falling back to {DEFAULT_PORT}", file=sys.stderr)
        return DEFAULT_PORT


def _prepare_import_path() -> str:
    """Put ./src first on both sys.path and PYTHONPATH (the uvicorn child inherits the latter)."""
    src_path = os.path.join(os.getcwd(), "src")
    if not os.path.isdir(src_path):
        print(f"Warning: no src directory under {os.getcwd()}", file=sys.stderr)
        src_path = os.getcwd()
    existing = os.environ.get("PYTHONPATH")
    os.environ["PYTHONPATH"] = os.pathsep.join(filter(None, [src_path, existing]))
    sys.path.insert(0, src_path)
    return src_path


def main() -> int:
    port = _resolve_port()
    _prepare_import_path()

    # Import check before handing off to uvicorn
    try:
        __import__(APP_MODULE)
    except Exception as e:
        print(f"❌ Cannot import {APP_MODULE} ({type(e).__name__}): {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        return 1

    cmd = [
        sys.executable, "-m", "uvicorn", f"{APP_MODULE}:app",
        "--host", "0.0.0.0",
        "--port", str(port),
        "--proxy-headers",
        "--forwarded-allow-ips", "*",
    ]
    print(f"🚀 Serving {APP_MODULE}:app on port {port} (PYTHONPATH={os.environ['PYTHONPATH']})", file=sys.stderr)
    try:
        code = subprocess.call(cmd)
    except KeyboardInterrupt:
        print("⚠️ Server interrupted by user", file=sys.stderr)
        return 0
    if code != 0:
        print(f"❌ Uvicorn exited with code {code}", file=sys.stderr)
    return code


if __name__ == "__main__":
    sys.exit(main())
