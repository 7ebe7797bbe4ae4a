"""
Declaration checklist template and submit-time validation.

Everything here is pure: no database access, no clock.
"""

from typing import Dict, List, Optional

from recruitment.errors import MissingAcknowledgements
from recruitment.schemas.onboarding import ChecklistItem, DeclarationChecklist

FINAL_DECLARATION_ID = "final"

_KETENTUAN = [
    (
        "k1",
        "Bersedia melengkapi Dokumen Persyaratan Administrasi Kontrak maksimal 7 (tujuh) hari "
        "kalender sejak dinyatakan diterima :",
        [
            "a. Curriculum Vitae",
            "b. Kartu Tanda Penduduk",
            "c. Kartu Keluarga",
            "d. Nomor Pokok Wajib Pajak",
            "e. Rekening Bank Rakyat Indonesia (Wajib sudah ada maksimal pada penggajian kedua)",
            "f. Surat Keterangan Sehat dari Puskesmas atau Bukti Vaksin",
            "g. SKCK Aktif (Wajib aktif selama bekerja)",
            "h. Ijazah pendidikan terakhir",
            "i. Transkrip Nilai",
            "j. Surat Domisili",
        ],
    ),
    (
        "k2",
        "Memberikan keterangan yang sejujurnya mengenai status, kondisi dan hal apapun tentang "
        "diri saya selama bekerja.",
        [],
    ),
    ("k3", "Bersedia melakukan training di daerah sesuai dengan permintaan client (apabila ada).", []),
    (
        "k4",
        "Tidak melakukan kekerasan, kecurangan, penipuan dan/atau pemalsuan dalam bentuk apapun "
        "selama bekerja, Tidak menerima pekerjaan dan/atau bekerja secara bersamaan dengan Pihak "
        "lain dan/atau Perusahaan lain baik secara langsung maupun tidak langsung.",
        [],
    ),
    ("k5", "Tidak melakukan pinjam meminjam uang ke sesama karyawan dan/atau pihak ketiga.", []),
    (
        "k6",
        "Tidak bertukar dan menjaga informasi yang bersifat Kerahasiaan Data baik milik Pribadi "
        "ataupun Perusahaan dengan siapapun.",
        [],
    ),
    (
        "k7",
        "Paklaring akan diberikan minimal 1 bulan dari tanggal terakhir bekerja dan/atau sudah :",
        [
            "a. Menyelesaikan kelengkapan administrasi yang sudah disetujui atasan",
            "b. Mengembalikan Asset Inventarisasi maksimal H-7 pembayaran gaji",
            "c. Memberikan absensi terakhir yang sudah disetujui atasan",
        ],
    ),
    (
        "k8",
        "Prosedur Resign diwajibkan mengajukan pemberitahuan secara tertulis 30 (tiga puluh) hari "
        "sebelum tanggal efektif pengunduran diri, menyelesaikan exit clearence, dan mengembalikan "
        "perlengkapan dan peralatan kerja serta barang-barang milik Perusahaan.",
        [],
    ),
    ("k9", "Slip Gaji akan dikirim maksimal 14 hari kerja dari tanggal penerimaan gaji.", []),
    ("k10", "Mentaati setiap prosedur dan peraturan tertulis mapun tidak tertulis yang ada di Perusahaan.", []),
    ("k11", "Selalu berkomitmen menjaga nama baik Perusahaan, Client, dan/atau Pihak lainnya.", []),
    (
        "k12",
        "Membebaskan Perusahaan dari segala kerugian dan tuntutan apapun terhadap pelanggaran yang "
        "dilakukan oleh karyawan.",
        [],
    ),
]

_SANKSI = [
    (
        "s1",
        "Mengembalikan dan memberikan ganti rugi terhadap seluruh pembayaran yang telah diberikan "
        "Perusahaan kepada saya (apabila ada).",
    ),
    (
        "s2",
        "Perusahaan berhak tidak membayarkan apapun apabila karyawan melanggar Perjanjian Kerja, "
        "Peraturan Perusahaan, dan Peraturan lainnya.",
    ),
    (
        "s3",
        "Hak Karyawan akan dibayarkan saat keseluruhan dokumen Administrasi Kontrak Kerja dilengkapi "
        "oleh Karyawan dan dinyatakan lengkap.",
    ),
    (
        "s4",
        "Jika karyawan resign tidak sesuai prosedur dan/atau diberhentikan karena pelanggaran "
        "penipuan, pemalsuan, pencurian, double job, tindakan perdata ataupun pidana dan/atau "
        "lainnya yang diatur lebih lanjut dalam Perjanjian Kerja, Peraturan Perusahaan, dan "
        "Peraturan lainnya, maka paklaring dan sisa haknya dalam bentuk apapun tidak dapat diberikan.",
    ),
    (
        "s5",
        "Jika karyawan belum mengembalikan asset inventarisasi sesuai waktu yang sudah ditentukan, "
        "maka sisa haknya belum dapat dibayarkan dan/atau akan dibayarkan pada penggajian periode "
        "selanjutnya.",
    ),
    (
        "s6",
        "Sanksi atas pelangaran-pelanggaran lebih lanjut dimuat dalam Perjanjian Kerja, Peraturan "
        "Perusahaan, dan Peraturan lainnya.",
    ),
]

_FINAL_TEXT = (
    "Dengan menyetujui ini, saya menyatakan telah menerima seluruh informasi dan/atau penjelasan, "
    "dan saya mengerti, memahami dan berjanji akan mentaati seluruh peraturan milik Perusahaan. "
    "Pernyataan ini saya nyatakan dengan secara sadar, sehat, dan tanpa paksaan dari pihak manapun. "
    "Surat On Boarding ini telah saya setujui, maka saya tidak akan melakukan tuntutan dalam hal "
    "apapun dikemudian hari."
)


def default_declaration_checklist() -> DeclarationChecklist:
    """Fresh checklist with every item unchecked."""
    return DeclarationChecklist(
        ketentuan=[
            ChecklistItem(id=item_id, text=text, sub_items=list(sub_items))
            for item_id, text, sub_items in _KETENTUAN
        ],
        sanksi=[ChecklistItem(id=item_id, text=text) for item_id, text in _SANKSI],
        final_declaration=ChecklistItem(id=FINAL_DECLARATION_ID, text=_FINAL_TEXT),
    )


def merge_with_template(
    submitted: Optional[DeclarationChecklist],
    template: Optional[DeclarationChecklist] = None,
) -> DeclarationChecklist:
    """
    Carry the submitted ``checked`` flags onto the template by item id.

    Items, texts and order always come from the template, so a client cannot
    drop an item to skip it. Unknown ids in the submission are ignored.
    """
    template = template or default_declaration_checklist()
    if submitted is None:
        return template

    checked: Dict[str, bool] = {
        item.id: item.checked for item in list(submitted.ketentuan) + list(submitted.sanksi)
    }

    def _apply(items: List[ChecklistItem]) -> List[ChecklistItem]:
        return [item.model_copy(update={"checked": checked.get(item.id, False)}) for item in items]

    return DeclarationChecklist(
        ketentuan=_apply(template.ketentuan),
        sanksi=_apply(template.sanksi),
        final_declaration=template.final_declaration.model_copy(
            update={"checked": submitted.final_declaration.checked}
        ),
    )


def find_unacknowledged(checklist: DeclarationChecklist) -> List[str]:
    """Ids of unchecked items in display order: ketentuan, sanksi, then the final declaration."""
    missing = [item.id for item in checklist.ketentuan if not item.checked]
    missing.extend(item.id for item in checklist.sanksi if not item.checked)
    if not checklist.final_declaration.checked:
        missing.append(checklist.final_declaration.id)
    return missing


def validate_for_submission(checklist: DeclarationChecklist) -> DeclarationChecklist:
    """Return the checklist unchanged, or raise ``MissingAcknowledgements`` naming every open item."""
    missing = find_unacknowledged(checklist)
    if missing:
        raise MissingAcknowledgements(missing)
    return checklist
