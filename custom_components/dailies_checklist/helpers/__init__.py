"""Home Assistant-bound helper modules for Dailies Checklist."""
