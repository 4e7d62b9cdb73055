"""Location name utilities: city and country names to airport codes."""

# City → primary airport
CITY_IATA_CODES: dict[str, str] = {
    # Netherlands & Belgium
    "amsterdam": "AMS", "eindhoven": "EIN", "rotterdam": "RTM",
    "brussels": "BRU", "antwerp": "ANR",
    # France
    "paris": "CDG", "nice": "NCE", "lyon": "LYS", "marseille": "MRS",
    # United Kingdom
    "london": "LHR", "manchester": "MAN", "edinburgh": "EDI",
    # Spain
    "barcelona": "BCN", "madrid": "MAD", "seville": "SVQ", "valencia": "VLC",
    # Italy
    "rome": "FCO", "milan": "MXP", "venice": "VCE", "florence": "FLR",
    # Greece
    "athens": "ATH", "santorini": "JTR", "mykonos": "JMK", "crete": "HER",
    # Germany
    "berlin": "BER", "munich": "MUC", "frankfurt": "FRA",
    # Other European
    "istanbul": "IST", "lisbon": "LIS", "porto": "OPO", "vienna": "VIE",
    "prague": "PRG", "budapest": "BUD", "copenhagen": "CPH", "stockholm": "ARN",
    "oslo": "OSL", "helsinki": "HEL", "reykjavik": "KEF", "zurich": "ZRH",
    "geneva": "GVA", "dubrovnik": "DBV", "split": "SPU",
    # Africa & Middle East
    "marrakech": "RAK", "casablanca": "CMN", "cairo": "CAI",
    "dubai": "DXB", "abu dhabi": "AUH",
    # Americas
    "new york": "JFK", "los angeles": "LAX", "miami": "MIA", "las vegas": "LAS",
    "cancun": "CUN", "havana": "HAV", "oranjestad": "AUA", "willemstad": "CUR",
    # Asia
    "bangkok": "BKK", "phuket": "HKT", "bali": "DPS", "tokyo": "NRT",
    "singapore": "SIN", "kuala lumpur": "KUL",
}

# Country (English and Dutch names) → main destination airport
COUNTRY_IATA_CODES: dict[str, str] = {
    "spain": "BCN", "spanje": "BCN",
    "france": "CDG", "frankrijk": "CDG",
    "italy": "FCO", "italië": "FCO",
    "greece": "ATH", "griekenland": "ATH",
    "turkey": "IST", "turkije": "IST",
    "portugal": "LIS",
    "germany": "BER", "duitsland": "BER",
    "united kingdom": "LHR", "verenigd koninkrijk": "LHR",
    "netherlands": "AMS", "nederland": "AMS",
    "belgium": "BRU", "belgië": "BRU",
    "morocco": "RAK", "marokko": "RAK",
    "egypt": "CAI", "egypte": "CAI",
    "tunisia": "TUN", "tunesië": "TUN",
    "united arab emirates": "DXB", "verenigde arabische emiraten": "DXB",
    "aruba": "AUA",
    "curaçao": "CUR", "curacao": "CUR",
    "united states": "JFK", "verenigde staten": "JFK",
    "mexico": "CUN",
    "cuba": "HAV",
    "thailand": "BKK",
    "indonesia": "DPS", "indonesië": "DPS",
    "japan": "NRT",
    "singapore": "SIN",
    "malaysia": "KUL", "maleisië": "KUL",
    "austria": "VIE", "oostenrijk": "VIE",
    "switzerland": "ZRH", "zwitserland": "ZRH",
    "croatia": "DBV", "kroatië": "DBV",
    "czech republic": "PRG", "tsjechië": "PRG",
    "poland": "WAW", "polen": "WAW",
    "hungary": "BUD", "hongarije": "BUD",
    "denmark": "CPH", "denemarken": "CPH",
    "sweden": "ARN", "zweden": "ARN",
    "norway": "OSL", "noorwegen": "OSL",
    "finland": "HEL",
    "iceland": "KEF", "ijsland": "KEF",
}


def iata_code_for(location_name: str | None) -> str | None:
    """Translate a city or country name to an airport code.

    City names win over country names. Returns ``None`` for unknown names.
    """
    if not location_name:
        return None
    normalized = location_name.strip().lower()
    return CITY_IATA_CODES.get(normalized) or COUNTRY_IATA_CODES.get(normalized)
