"""
LoRa datarate tags.

Values are the numeric tags used on the wire by the report collaborator, so
``int(DataRate.SF9BW125)`` is exactly what ends up in a beacon report.
"""

from __future__ import annotations

import enum


class DataRate(enum.IntEnum):
    SF12BW125 = 0
    SF11BW125 = 1
    SF10BW125 = 2
    SF9BW125 = 3
    SF8BW125 = 4
    SF7BW125 = 5
    SF12BW250 = 6
    SF11BW250 = 7
    SF10BW250 = 8
    SF9BW250 = 9
    SF8BW250 = 10
    SF7BW250 = 11
    SF12BW500 = 12
    SF11BW500 = 13
    SF10BW500 = 14
    SF9BW500 = 15
    SF8BW500 = 16
    SF7BW500 = 17


__all__ = ["DataRate"]
