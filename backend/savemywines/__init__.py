"""SaveMyWines backend: label scanning and a per-device wine collection."""
