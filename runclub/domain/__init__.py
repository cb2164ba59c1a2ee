"""Entity types, validation rules and errors shared across the backend."""
