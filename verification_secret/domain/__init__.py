"""Pure domain utilities: client secret grammar and schema types.

Free of any transport concerns so they can be unit-tested and reused by
whatever session layer builds requests from a client secret.
"""
__all__ = ["client_secret"]
