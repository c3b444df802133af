# app.py
"""
Entrypoint de l'application.

Usage:
  python app.py init-data donnees.json
  python app.py dashboard --data donnees.json
  python app.py analyse --group-by dranef
  python app.py besoins import besoins.xlsx --data donnees.json
  python app.py tui --data donnees.json
"""

from semences.adapters.cli import main

if __name__ == "__main__":
    main()
