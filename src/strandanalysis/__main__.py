"""Command-line interface."""
from strandanalysis.main import main

if __name__ == "__main__":
    main(prog_name="strandanalysis")
