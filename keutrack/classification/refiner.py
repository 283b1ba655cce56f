"""Asset subcategory refinement."""

from typing import Any

from keutrack.classification.rules import normalize_name
from keutrack.models.classification import AccountCategory

# Checked in order, first match wins
ASSET_CATEGORY_TERMS: tuple[tuple[AccountCategory, tuple[str, ...]], ...] = (
    (AccountCategory.CASH, ("KAS", "TUNAI", "CASH")),
    (AccountCategory.BANK, ("BANK", "REKENING", "GIRO")),
    (AccountCategory.RECEIVABLE, ("PIUTANG", "TAGIHAN")),
    (AccountCategory.INVENTORY, ("PERSEDIAAN", "STOK", "BARANG")),
    (AccountCategory.SUPPLIES, ("PERLENGKAPAN", "SUPPLIES")),
)


def refine_asset_category(name: Any) -> AccountCategory:
    """Subcategory of an asset account, from its name."""
    account_name = normalize_name(name)
    for category, terms in ASSET_CATEGORY_TERMS:
        if any(term in account_name for term in terms):
            return category
    return AccountCategory.ASSET
