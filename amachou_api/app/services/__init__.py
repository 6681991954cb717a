"""
Service layer.

Services encapsulate persistence and search for a domain so that API
handlers only validate input and shape responses.
"""
