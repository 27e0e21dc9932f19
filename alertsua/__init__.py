"""
alertsua — terminal air-raid alert dashboard for the regions of Ukraine.

Entry point: python -m alertsua

Provides:
- Status string codec and the shared region store (state)
- Embedded country outline and location registry (geo)
- alerts.in.ua HTTP client and the DataPort collaborator (ingest)
- SQLite region / status history storage (storage)
- Action bus, controller loop and rich terminal components (tui)
"""

__version__ = "0.3.0"
