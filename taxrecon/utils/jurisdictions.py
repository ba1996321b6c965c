"""Indian state and union territory codes (ISO 3166-2:IN subdivision suffixes)."""
from __future__ import annotations

INDIA_COUNTRY_CODE = "IN"
INDIA_COUNTRY_NAME = "India"

INDIAN_STATES: dict[str, str] = {
    "AN": "Andaman and Nicobar Islands",
    "AP": "Andhra Pradesh",
    "AR": "Arunachal Pradesh",
    "AS": "Assam",
    "BR": "Bihar",
    "CH": "Chandigarh",
    "CT": "Chhattisgarh",
    "DH": "Dadra and Nagar Haveli and Daman and Diu",
    "DL": "Delhi",
    "GA": "Goa",
    "GJ": "Gujarat",
    "HP": "Himachal Pradesh",
    "HR": "Haryana",
    "JH": "Jharkhand",
    "JK": "Jammu and Kashmir",
    "KA": "Karnataka",
    "KL": "Kerala",
    "LA": "Ladakh",
    "LD": "Lakshadweep",
    "MH": "Maharashtra",
    "ML": "Meghalaya",
    "MN": "Manipur",
    "MP": "Madhya Pradesh",
    "MZ": "Mizoram",
    "NL": "Nagaland",
    "OR": "Odisha",
    "PB": "Punjab",
    "PY": "Puducherry",
    "RJ": "Rajasthan",
    "SK": "Sikkim",
    "TG": "Telangana",
    "TN": "Tamil Nadu",
    "TR": "Tripura",
    "UP": "Uttar Pradesh",
    "UT": "Uttarakhand",
    "WB": "West Bengal",
}

# Older or alternate codes still produced by some geo-IP providers
_ALIASES: dict[str, str] = {
    "CG": "CT",
    "OD": "OR",
    "TS": "TG",
    "UK": "UT",
    "DN": "DH",
    "DD": "DH",
    "ORISSA": "OR",
    "PONDICHERRY": "PY",
    "UTTARANCHAL": "UT",
    "NCT OF DELHI": "DL",
}

_NAME_TO_CODE: dict[str, str] = {name.upper(): code for code, name in INDIAN_STATES.items()}


def normalize_indian_state(value: str | None) -> str | None:
    """Return the two-letter code for a state code or name, or None if unrecognised.

    Accepts "MH", "mh", "IN-MH" and "Maharashtra". Numeric strings, blanks and
    unknown names yield None.
    """
    if value is None:
        return None
    candidate = value.strip().upper()
    if not candidate:
        return None
    if candidate.startswith("IN-"):
        candidate = candidate[3:]
    if candidate in INDIAN_STATES:
        return candidate
    if candidate in _ALIASES:
        return _ALIASES[candidate]
    return _NAME_TO_CODE.get(candidate)
