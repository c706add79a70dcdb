"""chirps/ -- Short posts ("chirps"): content filtering and persistence.

Layer rule: chirps/ imports only stdlib, third-party libraries, and core/.
Authentication is the caller's job -- every write takes an already
authenticated author id.
"""
