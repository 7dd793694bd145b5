"""IATA airport code to ISO alpha-2 country mapping (extend as needed)."""

from types import MappingProxyType


# Placeholder for a country that could not be resolved
UNKNOWN_COUNTRY = "unknown"

IATA_TO_COUNTRY = MappingProxyType({
    # Middle East
    "TLV": "IL",

    # Europe
    "LHR": "GB",
    "AMS": "NL",
    "FRA": "DE",
    "MAD": "ES",
    "CDG": "FR",
    "DUB": "IE",

    # North America
    "JFK": "US",
    "SFO": "US",
    "ORD": "US",
    "BOS": "US",
    "MIA": "US",
    "LAX": "US",
    "SEA": "US",
    "YVR": "CA",

    # Asia Pacific
    "HKG": "HK",
    "NRT": "JP",
    "SYD": "AU",
    "SZX": "CN",
})
