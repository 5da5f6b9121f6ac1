import pandas as pd

from . import settings
from .schemas import (
    Confidence,
    InventoryItem,
    ParseStats,
    POStats,
    PurchaseOrder,
    SpecialOrder,
    SpecialOrderStatus,
)


def _special_order_frame(special_orders: list[SpecialOrder]) -> pd.DataFrame:
    return pd.DataFrame(
        [so.model_dump(mode="json") for so in special_orders],
        columns=list(SpecialOrder.model_fields.keys()),
    )


def calculate_stats(items: list[InventoryItem], special_orders: list[SpecialOrder]) -> ParseStats:
    """Item-side aggregates, recomputed from scratch on every parse."""
    if not items:
        return ParseStats(special_order_count=len(special_orders))

    df = pd.DataFrame([item.model_dump(mode="json") for item in items])

    # Days-of-supply is nullable; coerce so missing values become NaN and
    # drop out of every threshold comparison.
    days = pd.to_numeric(df["days_of_supply"], errors="coerce")
    high = df["confidence"] == Confidence.HIGH.value
    medium = df["confidence"] == Confidence.MEDIUM.value
    low = df["confidence"] == Confidence.LOW.value

    return ParseStats(
        total_items=len(df),
        high_confidence_count=int(high.sum()),
        medium_confidence_count=int(medium.sum()),
        low_confidence_count=int(low.sum()),
        attention_count=int((high & (days <= settings.ATTENTION_DAYS_SUPPLY)).sum()),
        critical_count=int((high & (days <= settings.CRITICAL_DAYS_SUPPLY)).sum()),
        watch_list_count=int((medium & (days <= settings.ATTENTION_DAYS_SUPPLY)).sum()),
        needs_review_count=int((low | days.isna()).sum()),
        vendor_count=int(df["vendor_id"].nunique()),
        special_order_count=len(special_orders),
    )


def calculate_po_stats(
    purchase_orders: list[PurchaseOrder], special_orders: list[SpecialOrder]
) -> POStats:
    """PO-side aggregates, including the "Action Required" urgent counts."""
    so_df = _special_order_frame(special_orders)
    so_counts = {
        "special_order_count": len(so_df),
        "ready_count": int((so_df["status"] == SpecialOrderStatus.READY.value).sum()),
        "doq_count": int((so_df["status"] == SpecialOrderStatus.DOQ.value).sum()),
        "pending_count": int((so_df["status"] == SpecialOrderStatus.ORDER.value).sum()),
    }

    if not purchase_orders:
        return POStats(**so_counts)

    df = pd.DataFrame([po.model_dump(mode="json") for po in purchase_orders])

    days = df["days_until_due"].astype(int)
    urgent = df["is_urgent"].astype(bool)
    missing_edi = df["urgent_reasons"].apply(lambda reasons: settings.NO_EDI_REASON in reasons)
    missing_appt = df["urgent_reasons"].apply(
        lambda reasons: settings.NO_APPOINTMENT_REASON in reasons
    )

    return POStats(
        total_pos=len(df),
        total_cases=int(df["total_cases"].sum()),
        vendors_with_pos=int(df["vendor_id"].nunique()),
        this_week_arrivals=int(days.between(0, settings.ARRIVAL_WINDOW_DAYS).sum()),
        urgent_po_count=int(urgent.sum()),
        urgent_cases=int(df.loc[urgent, "total_cases"].sum()),
        missing_edi_count=int((urgent & missing_edi.astype(bool)).sum()),
        missing_appointment_count=int((urgent & missing_appt.astype(bool)).sum()),
        overdue_po_count=int((days < 0).sum()),
        **so_counts,
    )
