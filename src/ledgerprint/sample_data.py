"""Seeded demo payloads for the CLI's demo command and for manual checks."""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional
import numpy as np
from faker import Faker


PRODUCT_NOUNS = ["Cable", "Adapter", "Router", "Switch", "Battery", "Charger", "Monitor",
                 "Keyboard", "Mouse", "Printer Toner", "Cement Bag", "Roofing Sheet", "Paint"]
BRANDS = ["Acme", "Globex", "Initech", "Umbrella", "Stark", "Wayne", "Hooli"]
CATEGORIES = ["Electronics", "Hardware", "Office Supplies", "Building Materials"]
COLORS = ["Black", "White", "Grey", "Blue", "Red"]
CUSTOMER_GROUPS = ["Retail", "Wholesale", "Corporate", "VIP"]
TAX_RATES = [0.0, 0.0, 18.0]

# (code, name, children) for the demo trial balance
ACCOUNT_TREE = [
    ("1000", "Assets", [
        ("1100", "Cash and Bank", []),
        ("1200", "Accounts Receivable", []),
        ("1300", "Inventory", []),
    ]),
    ("2000", "Liabilities", [
        ("2100", "Accounts Payable", []),
        ("2200", "VAT Payable", []),
    ]),
    ("3000", "Equity", [("3100", "Owner's Capital", [])]),
    ("4000", "Revenue", [("4100", "Sales", []), ("4200", "Other Income", [])]),
    ("5000", "Expenses", [("5100", "Cost of Sales", []), ("5200", "Rent", []), ("5300", "Salaries", [])]),
]


class SampleDataGenerator:
    """Generates realistic-looking export payloads from a fixed seed."""

    def __init__(self, seed: int = 42, fake: Optional[Faker] = None):
        self.rng = np.random.default_rng(seed)
        self.fake = fake or Faker()
        self.fake.seed_instance(seed)

    def _money(self, low: float, high: float) -> float:
        return round(float(self.rng.uniform(low, high)), 2)

    def company_details(self) -> Dict[str, Any]:
        return {
            "name": self.fake.company(),
            "address": self.fake.street_address(),
            "phone": self.fake.phone_number(),
            "email": self.fake.company_email(),
            "website": f"www.{self.fake.domain_name()}",
            "country": "Tanzania",
            "region": "Dar es Salaam",
            "tin": f"{self.rng.integers(100, 999)}-{self.rng.integers(100, 999)}-{self.rng.integers(100, 999)}",
        }

    def product(self) -> Dict[str, Any]:
        noun = str(self.rng.choice(PRODUCT_NOUNS))
        brand = str(self.rng.choice(BRANDS))
        return {
            "productCode": f"PRD-{int(self.rng.integers(1, 9999)):04d}",
            "productName": f"{brand} {noun} {self.fake.word().title()}",
            "partNumber": f"{self.fake.bothify('??-####').upper()}",
            "brandName": brand,
            "category": str(self.rng.choice(CATEGORIES)),
            "manufacturerName": self.fake.company(),
            "modelName": self.fake.bothify("M-###"),
            "colorName": str(self.rng.choice(COLORS)),
        }

    def stock_balance_export(self, n_rows: int = 40, historical: bool = False) -> Dict[str, Any]:
        rows = []
        for _ in range(n_rows):
            row = self.product()
            unit_cost = self._money(1, 500)
            quantity = int(self.rng.integers(0, 250))
            row.update({
                "storeLocation": f"{self.fake.city()} Store",
                "unitCost": unit_cost,
                "quantity": quantity,
                "totalValue": round(unit_cost * quantity, 2),
            })
            rows.append(row)
        filters: Dict[str, Any] = {"storeId": "All Stores"}
        if historical:
            filters["asOfDate"] = (date.today() - timedelta(days=30)).isoformat()
        return {
            "data": rows,
            "filters": filters,
            "searchTerm": "",
            "reportType": "historical" if historical else "current",
        }

    def customer_list_export(self, n_rows: int = 25) -> Dict[str, Any]:
        rows = []
        for i in range(n_rows):
            rows.append({
                "customerId": f"CUS-{i + 1:05d}",
                "fullName": self.fake.name(),
                "customerGroup": str(self.rng.choice(CUSTOMER_GROUPS)),
                "phone": self.fake.phone_number(),
                "email": self.fake.email(),
                "website": None,
                "fax": None,
                "birthday": self.fake.date_of_birth(minimum_age=18, maximum_age=80).isoformat(),
                "loyaltyCard": self.fake.bothify("LC-########") if self.rng.random() < 0.5 else None,
                "loyaltyCardPoints": int(self.rng.integers(0, 5000)),
                "address": self.fake.address(),
                "accountBalance": self._money(-500, 5000),
            })
        return {"data": rows, "filters": {"status": "active"}, "searchTerm": ""}

    def invoice_payload(self, n_items: int = 8, currency: str = "USD") -> Dict[str, Any]:
        items = []
        for _ in range(n_items):
            product = self.product()
            item = {
                "productName": product["productName"],
                "productCode": product["productCode"],
                "quantity": int(self.rng.integers(1, 20)),
                "unitPrice": self._money(2, 800),
                "taxPercentage": float(self.rng.choice(TAX_RATES)),
            }
            if self.rng.random() < 0.3:
                item["discountPercentage"] = float(self.rng.choice([5.0, 10.0, 15.0]))
            items.append(item)

        issued = date.today()
        return {
            "title": "Sales Invoice",
            "number": f"INV-{int(self.rng.integers(1, 99999)):05d}",
            "date": issued.isoformat(),
            "dueDate": (issued + timedelta(days=30)).isoformat(),
            "currency": currency,
            "currencyName": "US Dollars" if currency == "USD" else currency,
            "exchangeRate": 1,
            "status": "Approved",
            "paymentTerms": "Net 30",
            "customer": {
                "name": self.fake.company(),
                "address": self.fake.address(),
                "phone": self.fake.phone_number(),
                "email": self.fake.company_email(),
            },
            "items": items,
            "notes": "Thank you for your business.",
            "terms": "Goods once sold are not returnable.\nPayment due within 30 days.",
        }

    def trial_balance_export(self) -> Dict[str, Any]:
        def build(nodes) -> List[Dict[str, Any]]:
            accounts = []
            for code, name, children in nodes:
                child_accounts = build(children)
                if child_accounts:
                    debit = round(sum(c["totalDebit"] for c in child_accounts), 2)
                    credit = round(sum(c["totalCredit"] for c in child_accounts), 2)
                else:
                    debit = self._money(0, 20000) if self.rng.random() < 0.6 else 0.0
                    credit = self._money(0, 20000) if debit == 0.0 else 0.0
                accounts.append({"code": code, "name": name, "totalDebit": debit,
                                 "totalCredit": credit, "children": child_accounts})
            return accounts

        accounts = build(ACCOUNT_TREE)
        total_debit = round(sum(a["totalDebit"] for a in accounts), 2)
        total_credit = round(sum(a["totalCredit"] for a in accounts), 2)
        difference = round(total_debit - total_credit, 2)
        return {
            "data": accounts,
            "summary": {
                "totalDebit": total_debit,
                "totalCredit": total_credit,
                "difference": difference,
                "isBalanced": abs(difference) < 0.005,
            },
            "filters": {"financialYear": str(date.today().year)},
        }
