"""
Cryptographic primitives used to sign transactions.
"""
