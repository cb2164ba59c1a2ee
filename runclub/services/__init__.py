"""
Use cases that sit between routers and repositories (registration intake,
registration export).
"""
