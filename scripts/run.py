# scripts/run.py
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from tenantlic.app.cli import main

if __name__ == "__main__":
    sys.exit(main())
