"""contacts/ -- Contact records and their persistence.

Layer rule: contacts/ imports only stdlib, third-party libraries, and core/.
Authorization lives in auth/ownership.py; api/ combines the two.
"""
