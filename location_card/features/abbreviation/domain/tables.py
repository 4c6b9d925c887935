"""住所略語の辞書"""

# 州名
STATE_ABBREVIATIONS = {
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT", "Delaware": "DE",
    "Florida": "FL", "Georgia": "GA", "Hawaii": "HI", "Idaho": "ID",
    "Illinois": "IL", "Indiana": "IN", "Iowa": "IA", "Kansas": "KS",
    "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME", "Maryland": "MD",
    "Massachusetts": "MA", "Michigan": "MI", "Minnesota": "MN", "Mississippi": "MS",
    "Missouri": "MO", "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM", "New York": "NY",
    "North Carolina": "NC", "North Dakota": "ND", "Ohio": "OH", "Oklahoma": "OK",
    "Oregon": "OR", "Pennsylvania": "PA", "Rhode Island": "RI", "South Carolina": "SC",
    "South Dakota": "SD", "Tennessee": "TN", "Texas": "TX", "Utah": "UT",
    "Vermont": "VT", "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY",
}

# 方角
DIRECTION_ABBREVIATIONS = {
    "North": "N", "South": "S", "East": "E", "West": "W",
    "Northeast": "NE", "Northwest": "NW", "Southeast": "SE", "Southwest": "SW",
}

# 道路種別
ROAD_TYPE_ABBREVIATIONS = {
    "Street": "St", "Road": "Rd", "Avenue": "Ave", "Boulevard": "Blvd",
    "Drive": "Dr", "Lane": "Ln", "Court": "Ct", "Place": "Pl",
    "Highway": "Hwy", "Parkway": "Pkwy", "Square": "Sq",
}

# 国名（ISO 3166-1 alpha-2）
COUNTRY_ABBREVIATIONS = {
    "United States": "US", "United States of America": "USA",
    "Canada": "CA", "Mexico": "MX",
    "United Kingdom": "UK", "Great Britain": "GB",
    "France": "FR", "Germany": "DE", "Italy": "IT", "Spain": "ES",
    "Japan": "JP", "China": "CN", "India": "IN", "Brazil": "BR",
    "Australia": "AU", "New Zealand": "NZ",
    "Russia": "RU", "South Africa": "ZA",
    "Argentina": "AR", "South Korea": "KR", "Israel": "IL",
    "Netherlands": "NL", "Belgium": "BE", "Switzerland": "CH",
    "Sweden": "SE", "Norway": "NO", "Denmark": "DK", "Finland": "FI",
    "Ireland": "IE", "Portugal": "PT", "Greece": "GR",
    "Poland": "PL", "Czech Republic": "CZ", "Austria": "AT",
    "Singapore": "SG", "United Arab Emirates": "AE",
    "Saudi Arabia": "SA", "Turkey": "TR", "Egypt": "EG",
    "Malaysia": "MY", "Indonesia": "ID", "Thailand": "TH",
    "Philippines": "PH", "Vietnam": "VN",
}

# 検索順（先に一致した辞書を採用）
ABBREVIATION_TABLES = (
    STATE_ABBREVIATIONS,
    DIRECTION_ABBREVIATIONS,
    ROAD_TYPE_ABBREVIATIONS,
    COUNTRY_ABBREVIATIONS,
)
