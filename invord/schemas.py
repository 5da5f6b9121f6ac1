from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SpecialOrderStatus(str, Enum):
    READY = "Ready"
    DOQ = "*DOQ*"
    ORDER = "Order"


class ReportModel(BaseModel):
    class Config:
        # Records are built once per line and never touched again. Exports use
        # camelCase keys; construction keeps the snake_case field names.
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class VendorContext(ReportModel):
    id: str
    name: str


class InventoryItem(ReportModel):
    """
    One product row of the Inventory Order Report.
    The raw line and parse notes travel with the record so a reviewer can
    check any low-confidence parse against the source.
    """

    vendor_id: str
    vendor_name: str
    product_number: str
    special_order: bool = False
    unit: str = ""
    size: str = ""
    brand: str = ""
    description: str = ""
    ytd_sales: Optional[int] = None
    average_sales: Optional[int] = None
    available: Optional[int] = None
    on_order: Optional[int] = None
    days_of_supply: Optional[float] = None
    landed_cost: Optional[float] = None
    market_cost: Optional[float] = None
    slot: Optional[str] = None
    item_priority: Optional[float] = None
    confidence: Confidence = Confidence.LOW
    numeric_columns: int = Field(default=0, ge=0)
    raw_line: str
    parse_notes: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _days_of_supply_backs_high_confidence(self):
        if self.days_of_supply is None and self.confidence == Confidence.HIGH:
            raise ValueError("high confidence requires days_of_supply")
        return self


class PurchaseOrder(ReportModel):
    po_number: str = Field(..., pattern=r"^\d{5}$")
    vendor_id: str
    vendor_name: str
    due_date: str
    total_cases: int = Field(default=0, ge=0)
    status: str = ""
    edi: Optional[bool] = None
    appointment: Optional[str] = None
    pick_up: Optional[bool] = None
    entered: Optional[str] = None

    # Derived from (due_date, edi, appointment, report date); never read from the line.
    days_until_due: int = 0
    is_urgent: bool = False
    urgent_reasons: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _urgency_matches_reasons(self):
        if self.is_urgent != bool(self.urgent_reasons):
            raise ValueError("is_urgent must be set exactly when urgent_reasons is non-empty")
        return self


class SpecialOrder(ReportModel):
    product_number: str
    description: str = ""
    customer_number: str = ""
    customer_name: str = ""
    date_entered: Optional[str] = None
    date_doq: Optional[str] = None
    date_due: Optional[str] = None
    po_number: Optional[str] = None
    qty_ordered: int = Field(default=0, ge=0)
    on_hand: int = Field(default=0, ge=0)
    status: SpecialOrderStatus = SpecialOrderStatus.ORDER
    vendor_id: str
    vendor_name: str


class ParseStats(ReportModel):
    total_items: int = 0
    high_confidence_count: int = 0
    medium_confidence_count: int = 0
    low_confidence_count: int = 0
    attention_count: int = 0
    critical_count: int = 0
    watch_list_count: int = 0
    needs_review_count: int = 0
    vendor_count: int = 0
    special_order_count: int = 0


class POStats(ReportModel):
    total_pos: int = 0
    total_cases: int = 0
    vendors_with_pos: int = 0
    this_week_arrivals: int = 0
    special_order_count: int = 0
    ready_count: int = 0
    doq_count: int = 0
    pending_count: int = 0
    urgent_po_count: int = 0
    urgent_cases: int = 0
    missing_edi_count: int = 0
    missing_appointment_count: int = 0
    overdue_po_count: int = 0


class ParseResponse(ReportModel):
    items: list[InventoryItem] = Field(default_factory=list)
    purchase_orders: list[PurchaseOrder] = Field(default_factory=list)
    special_orders: list[SpecialOrder] = Field(default_factory=list)
    stats: ParseStats = Field(default_factory=ParseStats)
    po_stats: POStats = Field(default_factory=POStats)
    report_date: date
    parse_errors: list[str] = Field(default_factory=list)
