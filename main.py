"""Contract Quality Engine - Entry Point.

Usage:
    python main.py quality score metrics.yaml --config engine.yaml
    python main.py quality trend records.yaml
    python main.py bench analyze session.yaml --history history.yaml
    python main.py bench summary history.yaml --contract c-1
    python main.py audit summary audit.yaml
    python main.py audit export audit.yaml --failures-only
"""

from quality_engine.cli import create_app

app = create_app()


if __name__ == "__main__":
    app()
