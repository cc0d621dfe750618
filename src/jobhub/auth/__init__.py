"""Authentication and authorization.

Learn: Identity is delegated to Clerk. The browser sends a Clerk session
JWT; we verify it, take its `sub` (the Clerk user id) and bridge it to
a local User row:

1. tokens → verify the session JWT, extract the external id
2. resolver → find-or-create the local User (profile fetched from Clerk)
3. gate → admin checks (stored role OR allow-list, promoting on drift)
   and ownership checks for deletes

dependencies wires all three into FastAPI's Depends().
"""
