# scripts/run.py
import pathlib, sys

# run from a source checkout without installing
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from xtenant.cli.main import main

if __name__ == "__main__":
    main()
