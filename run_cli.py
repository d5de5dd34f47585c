"""
Run the Alivio migraine tracker CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    log        Log a crisis (pain, medication, period)
    rest       One-tap rest entry
    edit       Change fields of a logged crisis
    delete     Delete a crisis
    list       Most recent crises
    day        Entries of one day (--filter All|Pain|Medication|Period|Rest)
    calendar   Month view with day markers
    stats      Rolling 30-day statistics
    insights   Top symptom, most effective medication, usual location
    profile    Show the profile
    onboard    Create or replace the profile
    export     Write a backup JSON file
    import     Replace all data with a backup JSON file
    clear      Delete all data

Examples:
    python run_cli.py onboard
    python run_cli.py log -i 7 -s Nausea -l Temporal -m "Ibuprofen:400mg:Total"
    python run_cli.py calendar 2024 5
    python run_cli.py export -o backup.json

Environment variables (all optional):
    DB_PATH             SQLite database file path (default: alivio.db)
    RECENT_WINDOW_DAYS  Window of the rolling statistics (default: 30)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()
