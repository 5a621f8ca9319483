"""orgs/ -- Organizations, join-secret membership, and organization settings.

Layer rule: orgs/ imports from core/ and auth/ only.
It does NOT import from api/.
"""
