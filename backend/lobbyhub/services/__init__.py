"""Domain services: players, catalog, lobbies and sessions.

Route handlers check request shape and delegate here. Services do the
read-modify-write against the database and raise ``lobbyhub.errors``
exceptions when an operation is not allowed.
"""
