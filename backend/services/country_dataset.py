"""
Static country dataset used for local suggestions and nearest-country labels.

Coordinates are approximate geographic centers; they are what the camera flies to.
"""
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterable, List, Optional

from domain.errors import NearestLookupEmpty
from domain.models import Location
from services.geo import haversine_km

logger = logging.getLogger(__name__)

MAX_LOCAL_RESULTS = 10

# code: (name, capital, lat, lng)
COUNTRY_TABLE = {
    "US": ("United States", "Washington D.C.", 37.0902, -95.7129),
    "GB": ("United Kingdom", "London", 55.3781, -3.4360),
    "FR": ("France", "Paris", 46.2276, 2.2137),
    "DE": ("Germany", "Berlin", 51.1657, 10.4515),
    "IT": ("Italy", "Rome", 41.8719, 12.5674),
    "ES": ("Spain", "Madrid", 40.4637, -3.7492),
    "CA": ("Canada", "Ottawa", 56.1304, -106.3468),
    "AU": ("Australia", "Canberra", -25.2744, 133.7751),
    "JP": ("Japan", "Tokyo", 36.2048, 138.2529),
    "CN": ("China", "Beijing", 35.8617, 104.1954),
    "IN": ("India", "New Delhi", 20.5937, 78.9629),
    "BR": ("Brazil", "Brasília", -14.2350, -51.9253),
    "RU": ("Russia", "Moscow", 61.5240, 105.3188),
    "MX": ("Mexico", "Mexico City", 23.6345, -102.5528),
    "ZA": ("South Africa", "Pretoria", -30.5595, 22.9375),
    "EG": ("Egypt", "Cairo", 26.8206, 30.8025),
    "NG": ("Nigeria", "Abuja", 9.0820, 8.6753),
    "KE": ("Kenya", "Nairobi", -0.0236, 37.9062),
    "AR": ("Argentina", "Buenos Aires", -38.4161, -63.6167),
    "CL": ("Chile", "Santiago", -35.6751, -71.5430),
    "PE": ("Peru", "Lima", -9.1900, -75.0152),
    "CO": ("Colombia", "Bogotá", 4.5709, -74.2973),
    "VE": ("Venezuela", "Caracas", 6.4238, -66.5897),
    "TH": ("Thailand", "Bangkok", 15.8700, 100.9925),
    "VN": ("Vietnam", "Hanoi", 14.0583, 108.2772),
    "PH": ("Philippines", "Manila", 12.8797, 121.7740),
    "ID": ("Indonesia", "Jakarta", -0.7893, 113.9213),
    "MY": ("Malaysia", "Kuala Lumpur", 4.2105, 101.9758),
    "SG": ("Singapore", "Singapore", 1.3521, 103.8198),
    "NZ": ("New Zealand", "Wellington", -40.9006, 174.8860),
    "NO": ("Norway", "Oslo", 60.4720, 8.4689),
    "SE": ("Sweden", "Stockholm", 60.1282, 18.6435),
    "FI": ("Finland", "Helsinki", 61.9241, 25.7482),
    "DK": ("Denmark", "Copenhagen", 56.2639, 9.5018),
    "NL": ("Netherlands", "Amsterdam", 52.1326, 5.2913),
    "BE": ("Belgium", "Brussels", 50.5039, 4.4699),
    "CH": ("Switzerland", "Bern", 46.8182, 8.2275),
    "AT": ("Austria", "Vienna", 47.5162, 14.5501),
    "PL": ("Poland", "Warsaw", 51.9194, 19.1451),
    "CZ": ("Czech Republic", "Prague", 49.8175, 15.4730),
    "GR": ("Greece", "Athens", 39.0742, 21.8243),
    "PT": ("Portugal", "Lisbon", 39.3999, -8.2245),
    "TR": ("Turkey", "Ankara", 38.9637, 35.2433),
    "SA": ("Saudi Arabia", "Riyadh", 23.8859, 45.0792),
    "AE": ("United Arab Emirates", "Abu Dhabi", 23.4241, 53.8478),
    "IL": ("Israel", "Jerusalem", 31.0461, 34.8516),
    "KR": ("South Korea", "Seoul", 35.9078, 127.7669),
    "TW": ("Taiwan", "Taipei", 23.6978, 120.9605),
    "HK": ("Hong Kong", "City of Victoria", 22.3193, 114.1694),
    "IE": ("Ireland", "Dublin", 53.4129, -8.2439),
    "IS": ("Iceland", "Reykjavik", 64.9631, -19.0208),
    "UA": ("Ukraine", "Kyiv", 48.3794, 31.1656),
    "RO": ("Romania", "Bucharest", 45.9432, 24.9668),
    "HU": ("Hungary", "Budapest", 47.1625, 19.5033),
    "BG": ("Bulgaria", "Sofia", 42.7339, 25.4858),
    "HR": ("Croatia", "Zagreb", 45.1, 15.2),
    "RS": ("Serbia", "Belgrade", 44.0165, 21.0059),
    "SK": ("Slovakia", "Bratislava", 48.6690, 19.6990),
    "SI": ("Slovenia", "Ljubljana", 46.1512, 14.9955),
    "LT": ("Lithuania", "Vilnius", 55.1694, 23.8813),
    "LV": ("Latvia", "Riga", 56.8796, 24.6032),
    "EE": ("Estonia", "Tallinn", 58.5953, 25.0136),
    "BY": ("Belarus", "Minsk", 53.7098, 27.9534),
    "IM": ("Isle of Man", "Douglas", 54.2361, -4.5481),
    "GI": ("Gibraltar", "Gibraltar", 36.1408, -5.3536),
    "VA": ("Vatican City", "Vatican City", 41.9029, 12.4534),
    "SM": ("San Marino", "City of San Marino", 43.9424, 12.4578),
    "MC": ("Monaco", "Monaco", 43.7384, 7.4246),
    "LI": ("Liechtenstein", "Vaduz", 47.1660, 9.5554),
    "AD": ("Andorra", "Andorra la Vella", 42.5063, 1.5218),
}


@dataclass(frozen=True)
class NearestMatch:
    location: Location
    distance_km: float


def collation_key(name: str) -> str:
    """Accent-insensitive, case-folded key so 'Åland' sorts next to 'Aland'."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def default_locations() -> List[Location]:
    return [
        Location(name=name, code=code, latitude=lat, longitude=lng, capital=capital)
        for code, (name, capital, lat, lng) in COUNTRY_TABLE.items()
    ]


class CountryDataset:
    def __init__(self, locations: Optional[Iterable[Location]] = None):
        self._countries: List[Location] = list(
            default_locations() if locations is None else locations
        )

    def __len__(self) -> int:
        return len(self._countries)

    def search_countries(self, query: str, limit: int = MAX_LOCAL_RESULTS) -> List[Location]:
        """
        Case-insensitive substring search over names and codes.

        Names starting with the query come first; ties are ordered by name.
        """
        if not query or not query.strip():
            return []

        term = query.strip().casefold()
        matches = [
            c for c in self._countries
            if term in c.name.casefold() or term in c.code.casefold()
        ]
        matches.sort(
            key=lambda c: (not c.name.casefold().startswith(term), collation_key(c.name), c.name)
        )
        return matches[:limit]

    def get_country_by_code(self, code: str) -> Optional[Location]:
        if not code:
            return None
        wanted = code.strip().upper()
        for country in self._countries:
            if country.code.upper() == wanted:
                return country
        return None

    def nearest_match(self, latitude: float, longitude: float) -> NearestMatch:
        """Find the country whose center is closest (great-circle) to the coordinates."""
        if not self._countries:
            raise NearestLookupEmpty("country dataset is empty")

        nearest: Optional[Location] = None
        best_dist = float("inf")
        for country in self._countries:
            d = haversine_km(latitude, longitude, country.latitude, country.longitude)
            if d < best_dist:
                best_dist = d
                nearest = country
        assert nearest is not None
        return NearestMatch(location=nearest, distance_km=best_dist)

    def get_nearest_country(self, latitude: float, longitude: float) -> Optional[Location]:
        try:
            return self.nearest_match(latitude, longitude).location
        except NearestLookupEmpty:
            logger.debug("Nearest lookup on empty dataset for lat=%s lng=%s", latitude, longitude)
            return None

    def all_countries(self) -> List[Location]:
        return list(self._countries)


_default_dataset: Optional[CountryDataset] = None


def get_default_dataset() -> CountryDataset:
    global _default_dataset
    if _default_dataset is None:
        _default_dataset = CountryDataset()
    return _default_dataset
