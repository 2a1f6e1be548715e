"""
Endpoint modules.

Every public module here that exposes a ``router`` (an APIRouter) is mounted
under the API prefix at startup; adding a module is enough to publish it.
"""
