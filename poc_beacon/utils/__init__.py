"""
poc_beacon.utils
----------------
Byte, hashing and clock helpers used by the beacon derivation.
"""
