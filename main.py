"""pestr — run locally with: python main.py PES THREADS [options], or the installed `pestr` command."""
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env so PESTR_CPUS_PER_NODE and other overrides are set when running python main.py
load_dotenv(Path(__file__).resolve().parent / ".env")

from pestr.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
