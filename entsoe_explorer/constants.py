"""
ENTSO-E document types, EIC area codes and XML vocabulary.

Document types map to the process type the API expects alongside them
(A01 = day ahead, A16 = realised).
"""

# Placeholder for textual metadata missing from a document.
# It is a valid value downstream, not an absence marker.
UNKNOWN = "Unknown"

# Display value for date/time when a point's instant can't be reconstructed
MISSING_DISPLAY = "-"

# Document type code -> (label, process type)
DOCUMENT_TYPES = {
    "A44": ("Price Data", "A01"),
    "A65": ("System Total Load", "A16"),
    "A69": ("Generation Forecast", "A01"),
    "A70": ("Load Forecast Margin", "A01"),
    "A71": ("Generation Forecast Wind/Solar", "A01"),
    "A72": ("Reservoir Filling Information", "A16"),
    "A73": ("Actual Generation Per Unit", "A16"),
    "A74": ("Wind and Solar Forecast", "A01"),
    "A75": ("Actual Generation Per Type", "A16"),
    "A76": ("Load Unavailability", "A16"),
    "A77": ("Production Unavailability", "A16"),
    "A78": ("Transmission Unavailability", "A16"),
    "A79": ("Offshore Grid Unavailability", "A16"),
    "A80": ("Generation Unavailability", "A16"),
}

DOC_TYPE_PRICES = "A44"

# Bidding zones / control areas offered for queries
AREA_CODES = {
    "10YFR-RTE------C": "France (FR)",
    "10Y1001A1001A83F": "Germany (DE)",
    "10YES-REE------0": "Spain (ES)",
    "10YIT-GRTN-----B": "Italy (IT)",
    "10YGB----------A": "United Kingdom (GB)",
    "10YNL----------L": "Netherlands (NL)",
    "10YBE----------2": "Belgium (BE)",
    "10YPT-REN------W": "Portugal (PT)",
    "10YCH-SWISSGRIDZ": "Switzerland (CH)",
    "10YAT-APG------L": "Austria (AT)",
}

DEFAULT_DOMAIN = "10YFR-RTE------C"  # France

# Root elements of the four supported document schemas
ROOT_PUBLICATION = "Publication_MarketDocument"
ROOT_GL = "GL_MarketDocument"
ROOT_UNAVAILABILITY = "Unavailability_MarketDocument"
ROOT_BALANCING = "Balancing_MarketDocument"
ROOT_BALANCING_LEGACY = "BalancingMarketDocument"

# Returned by the API instead of data (e.g. "No matching data found")
ROOT_ACKNOWLEDGEMENT = "Acknowledgement_MarketDocument"

# Elements that form repeating groups. They are decoded as lists even when
# a document carries a single instance.
REPEATING_ELEMENTS = (
    "TimeSeries",
    "Period",
    "Available_Period",
    "Point",
    "MktPSRType",
    "Reason",
)

# ISO 8601 resolution code -> minutes between consecutive points
RESOLUTION_MINUTES = {
    "PT15M": 15,
    "PT30M": 30,
    "PT60M": 60,
    "PT1H": 60,
}
