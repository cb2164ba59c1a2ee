"""Run club website backend: routes, events and registrations."""

__version__ = "0.1.0"
