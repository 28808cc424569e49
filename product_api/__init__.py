"""Product CRUD API."""
