# Minimal entrypoint: build the Flask app once and run it when invoked as a script.
"""Flask application entry point."""

from board import create_app
from board_config import get_host, get_port, is_debug

app = create_app()


def main():
    """Start the development server on ``PORT`` (default 3000)."""
    port = get_port()
    print(f"Server is running on http://localhost:{port}")
    app.run(host=get_host(), port=port, debug=is_debug())


if __name__ == "__main__":
    main()
