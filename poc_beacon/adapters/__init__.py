"""
poc_beacon.adapters
-------------------
Boundary collaborators that consume a derived beacon.
"""
