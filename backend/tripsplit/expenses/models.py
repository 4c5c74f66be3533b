"""Expense models."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from tripsplit.utils.enums import ExpenseCategory
from tripsplit.utils.money import round_money, to_decimal


@dataclass
class Expense:
    id: Optional[str]
    trip_id: str
    paid_by: Optional[str]
    amount: Decimal
    payment_date: datetime
    split_between: List[str] = field(default_factory=list)
    category: str = ExpenseCategory.OTHER.value
    description: str = ""
    paid_to: str = ""

    @classmethod
    def from_document(cls, doc: Dict) -> "Expense":
        return cls(
            id=doc.get("_id"),
            trip_id=doc.get("trip_id"),
            paid_by=doc.get("paid_by"),
            amount=to_decimal(doc.get("amount", 0)),
            payment_date=doc.get("payment_date"),
            split_between=list(doc.get("split_between") or []),
            category=doc.get("category", ExpenseCategory.OTHER.value),
            description=doc.get("description", ""),
            paid_to=doc.get("paid_to", ""),
        )

    def to_document(self) -> Dict:
        return {
            "trip_id": self.trip_id,
            "category": self.category,
            "description": self.description,
            "paid_to": self.paid_to,
            "paid_by": self.paid_by,
            "amount": round_money(self.amount),
            "payment_date": self.payment_date,
            "split_between": list(self.split_between),
        }
