"""
Name Rule Tables

Account names share vocabulary across types: "Beban Perlengkapan" is an
expense while "Perlengkapan" is an asset, "Pendapatan Penjualan" is revenue
while "Modal Pemilik" is equity. Each type's vocabulary lives in one
RuleTable, and one generic matcher evaluates every table the same way:

1. Rejecting prefixes veto the table outright
2. A leading prefix token matches
3. A specific phrase matches (equality, equality-or-prefix, or containment)
4. A general keyword matches, unless an exclusion term is also present

All vocabulary is upper case. Trailing spaces inside exclusion terms are
significant ("MODAL " does not match "MODAL" at the end of a name).
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from keutrack.models.classification import AccountType


def normalize_name(value: Any) -> str:
    """Upper-case, trimmed form of an account name; empty for None."""
    if value is None:
        return ""
    return str(value).strip().upper()


def starts_with_token(name: str, token: str) -> bool:
    """True if `token` is the whole first word of `name`."""
    return name == token or name.startswith(token + " ")


class MatchMode(str, Enum):
    """How specific phrases are compared against a name."""
    EQUALS = "equals"
    EQUALS_OR_STARTS_WITH = "equals_or_starts_with"
    CONTAINS = "contains"


class MatchReason(str, Enum):
    """Which part of a table produced a match."""
    PREFIX = "prefix"
    SPECIFIC = "specific"
    KEYWORD = "keyword"


class RuleTable(BaseModel):
    """Vocabulary that identifies one account type by name."""

    model_config = ConfigDict(frozen=True)

    account_type: AccountType
    rejecting_prefixes: tuple[str, ...] = ()
    prefix_tokens: tuple[str, ...] = ()
    specific_phrases: tuple[str, ...] = ()
    specific_mode: MatchMode = MatchMode.CONTAINS
    keywords: tuple[str, ...] = ()
    exclusions: tuple[str, ...] = ()

    def _matches_specific(self, name: str, phrase: str) -> bool:
        if self.specific_mode == MatchMode.EQUALS:
            return name == phrase
        if self.specific_mode == MatchMode.EQUALS_OR_STARTS_WITH:
            return name.startswith(phrase)
        return phrase in name

    def is_rejected(self, name: str) -> bool:
        return any(starts_with_token(name, token) for token in self.rejecting_prefixes)

    def has_exclusion(self, name: str) -> bool:
        return any(term in name for term in self.exclusions)

    def match_reason(self, name: Any) -> Optional[MatchReason]:
        """Why `name` belongs to this table's type, or None if it does not."""
        name = normalize_name(name)
        if not name or self.is_rejected(name):
            return None

        if any(starts_with_token(name, token) for token in self.prefix_tokens):
            return MatchReason.PREFIX

        if any(self._matches_specific(name, phrase) for phrase in self.specific_phrases):
            return MatchReason.SPECIFIC

        if any(keyword in name for keyword in self.keywords) and not self.has_exclusion(name):
            return MatchReason.KEYWORD

        return None

    def matches(self, name: Any) -> bool:
        return self.match_reason(name) is not None


# =============================================================================
# VOCABULARY TABLES (SAK EMKM, Indonesian)
# =============================================================================

# Expense markers. Also the asset table's rejecting prefixes.
EXPENSE_PREFIXES = ("BEBAN", "BIAYA")

EXPENSE_RULES = RuleTable(
    account_type=AccountType.EXPENSE,
    prefix_tokens=EXPENSE_PREFIXES,
    specific_phrases=(
        "BEBAN GAJI", "BEBAN LISTRIK", "BEBAN AIR", "BEBAN SEWA",
        "BEBAN PERLENGKAPAN", "BEBAN TELEPON", "BEBAN INTERNET",
        "BIAYA GAJI", "BIAYA LISTRIK", "BIAYA OPERASIONAL",
    ),
    specific_mode=MatchMode.CONTAINS,
    keywords=(
        "UPAH", "GAJI KARYAWAN", "HONORARIUM",
        "HARGA POKOK", "ONGKOS", "TRANSPORT",
        "MAKAN MINUM", "OPERASIONAL", "EXPENSE",
        "ADMINISTRASI", "MARKETING", "PROMOSI",
        "PENYUSUTAN", "PAJAK PENGHASILAN", "BUNGA PINJAMAN",
    ),
    # Asset vocabulary that happens to contain an expense keyword
    exclusions=(
        "PIUTANG", "PERSEDIAAN", "KAS", "BANK", "TANAH", "BANGUNAN",
        "PERALATAN", "KENDARAAN", "MESIN", "INVENTARIS",
    ),
)

REVENUE_RULES = RuleTable(
    account_type=AccountType.REVENUE,
    prefix_tokens=("PENDAPATAN", "PENJUALAN"),
    specific_phrases=(
        "PENDAPATAN JASA", "PENDAPATAN PENJUALAN", "PENDAPATAN USAHA",
        "PENJUALAN BARANG", "PENJUALAN JASA",
        "HASIL PENJUALAN", "OMZET PENJUALAN",
    ),
    specific_mode=MatchMode.EQUALS_OR_STARTS_WITH,
    keywords=(
        "JASA KONSULTASI", "KOMISI PENJUALAN",
        "BUNGA DITERIMA", "DIVIDEN DITERIMA", "ROYALTI DITERIMA",
        "SEWA DITERIMA", "REVENUE", "INCOME OPERASIONAL",
        "LABA PENJUALAN ASET",
    ),
    exclusions=(
        "MODAL ", "SAHAM ", "INVESTASI PEMILIK", "SETORAN MODAL",
        "LABA DITAHAN", "CADANGAN ",
    ),
)

ASSET_RULES = RuleTable(
    account_type=AccountType.ASSET,
    rejecting_prefixes=EXPENSE_PREFIXES,
    specific_phrases=(
        "PERLENGKAPAN",  # Not "BEBAN PERLENGKAPAN"
        "KAS", "KAS KECIL", "KAS BESAR",
        "BANK BCA", "BANK MANDIRI", "BANK BRI", "REKENING BANK",
        "PIUTANG USAHA", "PIUTANG DAGANG",
        "PERSEDIAAN BARANG", "STOK BARANG",
        "TANAH DAN BANGUNAN", "GEDUNG KANTOR",
        "KENDARAAN OPERASIONAL", "MOTOR DINAS",
        "PERALATAN KANTOR", "KOMPUTER", "PRINTER",
    ),
    specific_mode=MatchMode.EQUALS,
    keywords=(
        "TUNAI", "CASH", "GIRO", "DEPOSITO",
        "TAGIHAN", "DEBITUR", "BARANG DAGANGAN",
        "TANAH", "BANGUNAN", "GEDUNG", "KENDARAAN", "MESIN",
        "INVENTARIS", "SUPPLIES",
        "DIBAYAR DIMUKA", "MASIH HARUS DITERIMA",
        "AKUMULASI PENYUSUTAN", "INVESTASI JANGKA PANJANG",
        "HAK PATEN", "GOODWILL", "LISENSI", "ASET TAKBERWUJUD",
    ),
    exclusions=(
        "BEBAN ", "BIAYA ", "UPAH", "GAJI", "SEWA GEDUNG", "LISTRIK", "AIR",
    ),
)

LIABILITY_RULES = RuleTable(
    account_type=AccountType.LIABILITY,
    keywords=(
        "UTANG", "HUTANG", "KREDIT", "PINJAMAN", "KREDITUR",
        "LIABILITAS", "KEWAJIBAN", "CICILAN",
        "BEBAN YANG MASIH HARUS DIBAYAR", "MASIH HARUS DIBAYAR",
        "PENDAPATAN DITERIMA DIMUKA", "DITERIMA DIMUKA",
        "OBLIGASI", "HIPOTIK", "HIPOTEK",
    ),
)

EQUITY_RULES = RuleTable(
    account_type=AccountType.EQUITY,
    specific_phrases=(
        "MODAL PEMILIK", "MODAL SAHAM", "MODAL DISETOR",
        "LABA DITAHAN", "CADANGAN", "PRIVE",
        "INVESTASI PEMILIK", "SETORAN MODAL",
    ),
    specific_mode=MatchMode.CONTAINS,
    keywords=("MODAL", "SAHAM", "EKUITAS", "CADANGAN", "PRIVE"),
    exclusions=("PENDAPATAN", "PENJUALAN", "JASA", "KOMISI"),
)
