"""Hotellook city ids for supported destinations, keyed by IATA code."""

HOTEL_CITY_IDS: dict[str, int] = {
    # Europe
    "AMS": 12679, "BCN": 10947, "BER": 10677, "BRU": 10499,
    "CDG": 12053, "PAR": 12053, "CPH": 11005, "DBV": 10729,
    "EDI": 12641, "FCO": 12898, "ROM": 12898, "FRA": 12356,
    "LHR": 12640, "LON": 12640, "LIS": 12836, "MAD": 12934,
    "MXP": 12874, "MIL": 12874, "MUC": 12679, "NCE": 12602,
    "OPO": 12837, "OSL": 11103, "PRG": 11100, "VCE": 12973,
    "VIE": 10946, "ZRH": 13014,
    # Greece & Turkey
    "ATH": 10943, "IST": 12758, "JTR": 10909,
    # Africa & Middle East
    "CAI": 10725, "CMN": 10699, "DXB": 11181, "RAK": 12892,
    # Americas
    "AUA": 10436, "CUN": 10735, "CUR": 10734, "HAV": 10745,
    "JFK": 13046, "NYC": 13046, "LAX": 12829, "LAS": 12835,
    "MIA": 12897,
    # Asia
    "BKK": 10497, "DPS": 11151, "HKT": 10786, "KUL": 12806,
    "NRT": 13024, "TYO": 13024, "SIN": 13170,
}

# City names → metro IATA code used by the Hotellook table
HOTEL_CITY_CODES: dict[str, str] = {
    "amsterdam": "AMS", "barcelona": "BCN", "berlin": "BER", "brussels": "BRU",
    "paris": "PAR", "copenhagen": "CPH", "dubrovnik": "DBV", "edinburgh": "EDI",
    "rome": "ROM", "frankfurt": "FRA", "london": "LON", "lisbon": "LIS",
    "madrid": "MAD", "milan": "MIL", "munich": "MUC", "nice": "NCE",
    "porto": "OPO", "oslo": "OSL", "prague": "PRG", "venice": "VCE",
    "vienna": "VIE", "zurich": "ZRH",
    "athens": "ATH", "istanbul": "IST", "santorini": "JTR",
    "cairo": "CAI", "casablanca": "CMN", "dubai": "DXB", "marrakech": "RAK",
    "aruba": "AUA", "oranjestad": "AUA", "cancun": "CUN", "curacao": "CUR",
    "willemstad": "CUR", "havana": "HAV", "new york": "NYC",
    "los angeles": "LAX", "las vegas": "LAS", "miami": "MIA",
    "bangkok": "BKK", "bali": "DPS", "phuket": "HKT", "kuala lumpur": "KUL",
    "tokyo": "TYO", "singapore": "SIN",
}


def city_id_from_iata(code: str | None) -> int | None:
    if not code:
        return None
    return HOTEL_CITY_IDS.get(code.strip().upper())


def city_id_from_name(name: str | None) -> int | None:
    if not name:
        return None
    return city_id_from_iata(HOTEL_CITY_CODES.get(name.strip().lower()))
