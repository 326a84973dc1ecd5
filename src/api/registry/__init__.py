"""Registry bounded context.

Fetches GraphQL schemas from a remote schema registry and serves them to
language tooling through the schema provider interface.
"""
