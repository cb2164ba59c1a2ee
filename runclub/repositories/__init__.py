"""
Persistence adapters.

Record stores (JSON file, key-value, SQL) persist whole collections; the
route/event repositories implement CRUD on top of whichever store the app
factory selected. Registrations always live in the relational database.
"""
