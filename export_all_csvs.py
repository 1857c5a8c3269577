"""
Convenience wrapper to run the play-by-play walkthrough from the project root.
Usage:
    python export_all_csvs.py
Optional:
    Set HOOPS_DATA_DIR to write the CSV somewhere other than ./Data.
"""

from scripts.export_all_csvs import main

if __name__ == "__main__":
    main()
