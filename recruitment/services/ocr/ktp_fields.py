"""
KTP field normalization and form mapping.

``normalize_ocr_fields`` runs as soon as OCR output arrives and collapses the
provider's aliases (Indonesian labels, older English names) into one
canonical key set. ``map_ktp_to_form`` turns canonical fields into onboarding
form values. Missing or unreadable parts are skipped, never raised.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

# canonical key -> accepted provider keys, in priority order
FIELD_ALIASES: Dict[str, tuple] = {
    "id_number": ("id_number", "nik", "no_ktp", "ktp_number"),
    "full_name": ("full_name", "nama", "name"),
    "place_of_birth": ("place_of_birth", "birth_place", "tempat_lahir"),
    "date_of_birth": ("date_of_birth", "birth_date", "tanggal_lahir", "tgl_lahir"),
    "gender": ("gender", "jenis_kelamin", "sex"),
    "address": ("address", "alamat", "street"),
    "rt_rw": ("rt_rw", "ktp_rt_rw", "rtrw"),
    "village": ("village", "kel_desa", "kelurahan", "desa"),
    "sub_district": ("sub_district", "kecamatan", "ktp_sub_district"),
    "city": ("city", "kabupaten_kota", "kota", "kabupaten", "regency"),
    "province": ("province", "provinsi"),
    "religion": ("religion", "agama"),
    "marital_status": ("marital_status", "status_perkawinan", "status_kawin"),
    "occupation": ("occupation", "pekerjaan"),
    "nationality": ("nationality", "kewarganegaraan"),
}

# "JAKARTA, 17-08-1990" style combined birth field
COMBINED_BIRTH_KEYS = ("birth_place_date", "tempat_tgl_lahir", "ttl")

GENDERS = {
    "LAKI-LAKI": "male",
    "LAKI LAKI": "male",
    "LAKI": "male",
    "PRIA": "male",
    "MALE": "male",
    "PEREMPUAN": "female",
    "WANITA": "female",
    "FEMALE": "female",
}

MARITAL_STATUSES = {
    "BELUM KAWIN": "single",
    "KAWIN": "married",
    "CERAI HIDUP": "divorced",
    "CERAI MATI": "widowed",
    "SINGLE": "single",
    "MARRIED": "married",
    "DIVORCED": "divorced",
    "WIDOWED": "widowed",
}

DATE_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y", "%Y-%m-%d")

_RT_RW_IN_ADDRESS = re.compile(r"\bRT\s*/?\s*RW\s*[:.]?\s*(\d{1,3}\s*/\s*\d{1,3})", re.IGNORECASE)


def _clean(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = " ".join(str(value).split())
    return text or None


def normalize_ocr_fields(raw: Mapping[str, Any]) -> Dict[str, str]:
    """Collapse raw OCR keys into the canonical KTP field set."""
    lowered = {str(key).strip().lower(): value for key, value in (raw or {}).items()}
    canonical: Dict[str, str] = {}

    for name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            value = _clean(lowered.get(alias))
            if value:
                canonical[name] = value
                break

    if "place_of_birth" not in canonical or "date_of_birth" not in canonical:
        for key in COMBINED_BIRTH_KEYS:
            combined = _clean(lowered.get(key))
            if not combined or "," not in combined:
                continue
            place, _, born = combined.partition(",")
            if place.strip():
                canonical.setdefault("place_of_birth", place.strip())
            if born.strip():
                canonical.setdefault("date_of_birth", born.strip())
            break

    address = canonical.get("address")
    if address and "rt_rw" not in canonical:
        match = _RT_RW_IN_ADDRESS.search(address)
        if match:
            canonical["rt_rw"] = re.sub(r"\s+", "", match.group(1))
            stripped = _RT_RW_IN_ADDRESS.sub("", address).strip(" ,")
            if stripped:
                canonical["address"] = stripped

    return canonical


def parse_ktp_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    text = value.strip().split("T")[0]
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_gender(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return GENDERS.get(value.strip().upper())


def normalize_marital_status(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    key = value.strip().upper().rstrip(".")
    return MARITAL_STATUSES.get(key, value.strip().lower())


def map_ktp_to_form(fields: Mapping[str, str]) -> Dict[str, Any]:
    """Map canonical KTP fields to onboarding form columns, skipping what is absent."""
    mapped: Dict[str, Any] = {
        "id_number": re.sub(r"\D", "", fields.get("id_number") or "") or None,
        "address": fields.get("address"),
        "ktp_rt_rw": fields.get("rt_rw"),
        "ktp_village": fields.get("village"),
        "ktp_sub_district": fields.get("sub_district"),
        "ktp_city": fields.get("city"),
        "ktp_province": fields.get("province"),
        "place_of_birth": fields.get("place_of_birth"),
        "date_of_birth": parse_ktp_date(fields.get("date_of_birth")),
        "gender": normalize_gender(fields.get("gender")),
        "religion": fields["religion"].title() if fields.get("religion") else None,
        "marital_status": normalize_marital_status(fields.get("marital_status")),
    }
    return {key: value for key, value in mapped.items() if value is not None}
