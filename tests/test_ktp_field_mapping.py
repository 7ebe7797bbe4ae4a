from datetime import date

import pytest

from conftest import KTP_FIELDS
from recruitment.services.confidence_gate import GateOutcome, evaluate_confidence
from recruitment.services.ocr.http_extractor import HttpOcrExtractor
from recruitment.services.ocr.ktp_fields import map_ktp_to_form, normalize_ocr_fields


@pytest.mark.unit
def test_indonesian_labels_map_to_form_fields():
    form = map_ktp_to_form(normalize_ocr_fields(KTP_FIELDS))

    assert form == {
        "id_number": "3201234567890001",
        "address": "JL. MAWAR NO. 5",
        "ktp_rt_rw": "003/007",
        "ktp_village": "SUKAMAJU",
        "ktp_sub_district": "CIBINONG",
        "ktp_city": "KABUPATEN BOGOR",
        "ktp_province": "JAWA BARAT",
        "place_of_birth": "BOGOR",
        "date_of_birth": date(1990, 8, 17),
        "gender": "male",
        "religion": "Islam",
        "marital_status": "single",
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("LAKI-LAKI", "male"),
        ("pria", "male"),
        ("PEREMPUAN", "female"),
        ("Wanita", "female"),
        ("UNKNOWN", None),
    ],
)
def test_gender_normalization(raw, expected):
    form = map_ktp_to_form(normalize_ocr_fields({"jenis_kelamin": raw}))
    assert form.get("gender") == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("BELUM KAWIN", "single"),
        ("KAWIN", "married"),
        ("CERAI HIDUP", "divorced"),
        ("CERAI MATI", "widowed"),
    ],
)
def test_marital_status_normalization(raw, expected):
    assert map_ktp_to_form({"marital_status": raw})["marital_status"] == expected


@pytest.mark.unit
def test_partial_output_leaves_other_fields_out():
    form = map_ktp_to_form(normalize_ocr_fields({"nik": "3201 2345 6789 0001", "alamat": "  "}))
    assert form == {"id_number": "3201234567890001"}


@pytest.mark.unit
def test_empty_and_garbage_output_does_not_raise():
    assert map_ktp_to_form(normalize_ocr_fields({})) == {}
    assert map_ktp_to_form(normalize_ocr_fields(None)) == {}
    assert map_ktp_to_form(normalize_ocr_fields({"tanggal_lahir": "17 Agustus", "alamat": {"line": 1}})) == {}


@pytest.mark.unit
def test_first_alias_wins_and_english_names_are_accepted():
    fields = normalize_ocr_fields({"id_number": "111", "nik": "222", "Name": "SITI"})
    assert fields["id_number"] == "111"
    assert fields["full_name"] == "SITI"


@pytest.mark.unit
def test_combined_birth_field_is_split():
    fields = normalize_ocr_fields({"tempat_tgl_lahir": "JAKARTA, 01-02-1995"})
    form = map_ktp_to_form(fields)
    assert form["place_of_birth"] == "JAKARTA"
    assert form["date_of_birth"] == date(1995, 2, 1)


@pytest.mark.unit
def test_rt_rw_is_pulled_out_of_a_composite_address():
    fields = normalize_ocr_fields({"alamat": "JL. MELATI 9 RT/RW 004/011"})
    assert fields["rt_rw"] == "004/011"
    assert fields["address"] == "JL. MELATI 9"


@pytest.mark.unit
@pytest.mark.parametrize(
    "confidence, outcome, needs_review",
    [
        (0.0, GateOutcome.REJECT, False),
        (0.49999, GateOutcome.REJECT, False),
        (0.5, GateOutcome.REVIEW, True),
        (0.59999, GateOutcome.REVIEW, True),
        (0.6, GateOutcome.ACCEPT, False),
        (1.0, GateOutcome.ACCEPT, False),
    ],
)
def test_confidence_gate_intervals(confidence, outcome, needs_review):
    decision = evaluate_confidence(confidence)
    assert decision.outcome is outcome
    assert decision.needs_review is needs_review
    assert decision.prefill is (outcome is not GateOutcome.REJECT)


@pytest.mark.unit
@pytest.mark.parametrize("confidence", [float("nan"), float("inf"), -0.1, 1.5, 87.0])
def test_unusable_confidence_is_rejected(confidence):
    decision = evaluate_confidence(confidence)

    assert decision.outcome is GateOutcome.REJECT
    assert decision.prefill is False
    assert decision.confidence == 0.0


@pytest.mark.unit
@pytest.mark.parametrize("raw", [float("nan"), "nan", "high", None])
def test_ocr_response_confidence_falls_back_to_zero(raw):
    extraction = HttpOcrExtractor._parse({"fields": {"nik": "3201234567890001"}, "confidence": raw})

    assert extraction.confidence == 0.0
    assert extraction.fields == {"nik": "3201234567890001"}
