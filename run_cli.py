"""
Run the Contact CRM Assistant CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    init       Create the contacts database schema
    ask        One-shot prompt to the assistant
    chat       Interactive session (each line is an independent turn)
    contacts   List contacts, optionally filtered by name/email
    add        Create a contact directly
    delete     Delete a contact by id

Examples:
    python run_cli.py ask "I met Sam Lee, sam@x.com, yesterday, great chat about Q3 plans"
    python run_cli.py ask "who did I talk to about Q3?"
    python run_cli.py contacts -q sam

Environment variables: see run_api.py.
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()
