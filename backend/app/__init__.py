"""Fleet Inventory HTTP API."""
