import io

import pandas as pd

from models import Package, ShippingResult
from services.report_export import export_to_excel, generate_pdf_report, summary_rows


def _result() -> ShippingResult:
    return ShippingResult(
        shipping_cost=500.0,
        tax=50.0,
        total_cost=550.0,
        currency_code="USD",
        pallets_needed=2,
        total_weight=200.0,
        warnings=["Weight per pallet (2000.00kg) exceeds pallet maximum capacity of 1500kg"],
        recommendations=["High volume utilization - ensure proper securing of goods"],
        calculations=["Package volume: 0.300 m³", "Tax calculation: 500.00 × 10%"],
    )


PACKAGES = [
    Package(length=40, width=30, height=25, weight=5, quantity=10, id="1"),
    Package(length=12, width=10, height=8, weight=2, quantity=3, length_unit="in", weight_unit="lbs", id="2"),
]


def test_summary_rows_only_list_pallets_in_pallet_mode():
    with_pallets = dict(summary_rows(_result(), use_pallet=True))
    without = dict(summary_rows(_result(), use_pallet=False))

    assert with_pallets["Total Cost"] == "USD 550.00"
    assert with_pallets["Total Weight"] == "200.00 kg"
    assert with_pallets["Pallets Needed"] == "2"
    assert "Pallets Needed" not in without


def test_export_to_excel_writes_all_sheets():
    blob = export_to_excel(PACKAGES, _result(), use_pallet=True)
    sheets = pd.read_excel(io.BytesIO(blob), sheet_name=None)

    assert list(sheets) == ["Packages", "Summary", "Calculations"]
    assert sheets["Packages"]["quantity"].tolist() == [10, 3]
    assert sheets["Packages"]["length_unit"].tolist() == ["cm", "in"]
    assert sheets["Summary"]["Setting"].tolist() == ["Shipping Cost", "Tax", "Total Cost", "Total Weight", "Pallets Needed"]
    assert sheets["Calculations"]["Kind"].tolist() == ["Warning", "Recommendation", "Calculation", "Calculation"]
    assert sheets["Calculations"]["Detail"].iloc[-1] == "Tax calculation: 500.00 × 10%"


def test_generate_pdf_report_returns_pdf_bytes():
    blob = generate_pdf_report(PACKAGES, _result(), use_pallet=False)
    assert blob.startswith(b"%PDF")
    assert len(blob) > 1000
