"""Protected domain resources: scope table, entity stores, resolution and lifecycle."""
