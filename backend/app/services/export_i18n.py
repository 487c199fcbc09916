"""Label table for balance exports (en/my)."""
from __future__ import annotations

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "generated": "Generated",
        "currency": "Currency",
        "totals": "TOTALS",
        "total_receivables": "Total Receivables",
        "total_paid": "Total Paid",
        "outstanding": "Outstanding",
        "collection_rate": "Collection Rate",
        "customer": "Customer",
        "customers": "Customers",
        "city": "City",
        "cities": "Cities",
        "customer_balances": "Customer Balances",
        "city_balances": "City Balances",
    },
    "my": {
        "generated": "ထုတ်ယူသည့်နေ့",
        "currency": "ငွေကြေး",
        "totals": "စုစုပေါင်း",
        "total_receivables": "ရရန်ငွေ စုစုပေါင်း",
        "total_paid": "ပေးချေပြီးငွေ",
        "outstanding": "ကျန်ငွေ",
        "collection_rate": "ကောက်ခံမှုနှုန်း",
        "customer": "ဖောက်သည်",
        "customers": "ဖောက်သည်များ",
        "city": "မြို့",
        "cities": "မြို့များ",
        "customer_balances": "ဖောက်သည် လက်ကျန်ငွေများ",
        "city_balances": "မြို့အလိုက် လက်ကျန်ငွေများ",
    },
}


def t(lang: str, key: str) -> str:
    """Get translated label. Falls back to English."""
    return TRANSLATIONS.get(lang, TRANSLATIONS["en"]).get(
        key, TRANSLATIONS["en"].get(key, key)
    )
