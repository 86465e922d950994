from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from catalog import custom_pallet, ensure_templates, load_catalog, template_csv
from field_specs import field_guide_df, table_column_config
from models import BASIS_TYPES, CUSTOM_PALLET_ID, Package, ShippingCostConfig
from planning_engine import ShipmentRequest, plan_shipment
from services.layer_diagram import plot_layer
from services.package_import import (
    packages_from_frame,
    packages_to_frame,
    read_package_upload,
    validate_package_import,
)
from services.report_export import export_to_excel, generate_pdf_report
from units import LENGTH_TO_MM, WEIGHT_TO_G, format_measurement
from validators import validate_with_specs

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Pallet Shipping Calculator", layout="wide")
ensure_templates()

catalog = load_catalog()
defaults = catalog.defaults


def default_package_frame(length_unit: str, weight_unit: str) -> pd.DataFrame:
    return packages_to_frame(
        [Package(id="1", length=0, width=0, height=0, weight=0, quantity=1, length_unit=length_unit, weight_unit=weight_unit)]
    ).drop(columns=["id"])


def render_import_box() -> None:
    with st.expander("Import packages from CSV / XLSX", expanded=False):
        st.download_button(
            "Download packages_template.csv",
            data=template_csv("packages"),
            file_name="packages_template.csv",
            mime="text/csv",
            key="packages_template",
        )
        st.dataframe(field_guide_df("packages"), width="stretch", hide_index=True)
        upload = st.file_uploader("Upload packages", type=["csv", "xlsx"], key="packages_upload")
        if upload is None:
            return
        try:
            frame = read_package_upload(upload.name, upload.getvalue())
        except ValueError as exc:
            st.error(str(exc))
            return
        report = validate_package_import(frame)
        for issue in report.warnings:
            st.warning(f"Row {issue.row_number} ({issue.field}): {issue.message}")
        if not report.ok:
            st.error("; ".join(f"Row {i.row_number} ({i.field}): {i.message}" for i in report.errors))
            return
        if st.button("Replace packages with upload", key="packages_apply_upload"):
            st.session_state["packages_frame"] = packages_to_frame(packages_from_frame(frame)).drop(columns=["id"])
            st.success(f"Loaded {report.summary['total_rows']} package rows")


st.title("Pallet Shipping Calculator")

unit_cols = st.columns(3)
unit_lengths = list(LENGTH_TO_MM)
unit_weights = list(WEIGHT_TO_G)
length_unit = unit_cols[0].selectbox("Length unit", unit_lengths, index=unit_lengths.index(defaults["length_unit"]))
weight_unit = unit_cols[1].selectbox("Weight unit", unit_weights, index=unit_weights.index(defaults["weight_unit"]))
use_pallet = unit_cols[2].toggle("Ship on pallets", value=bool(defaults["use_pallet"]))

render_import_box()

if "packages_frame" not in st.session_state:
    st.session_state["packages_frame"] = default_package_frame(length_unit, weight_unit)

st.subheader("Packages")
edited = st.data_editor(
    st.session_state["packages_frame"],
    num_rows="dynamic",
    width="stretch",
    column_config=table_column_config("packages"),
    key="packages_editor",
)

st.subheader("Pallet")
pallet_options = {p.id: f"{p.name} ({p.length}x{p.width}x{p.height} {p.length_unit}, {p.max_weight:g} kg)" for p in catalog.pallet_sizes}
pallet_options[CUSTOM_PALLET_ID] = "Custom Pallet"
pallet_id = st.selectbox("Pallet size", list(pallet_options), format_func=pallet_options.get)
selected_pallet = catalog.pallet(pallet_id)
custom = None
custom_pallet_row: dict[str, object] = {}
if selected_pallet.is_custom:
    c1, c2, c3, c4 = st.columns(4)
    custom_pallet_row = {
        "length": c1.number_input("Length", min_value=0.0, value=120.0),
        "width": c2.number_input("Width", min_value=0.0, value=80.0),
        "height": c3.number_input("Height", min_value=0.0, value=14.4),
        "max_weight": c4.number_input("Max weight (kg)", min_value=0.0, value=1000.0),
        "length_unit": length_unit,
    }
    custom = custom_pallet(**custom_pallet_row)
else:
    st.caption(selected_pallet.description)

st.subheader("Route")
loc_ids = [loc.id for loc in catalog.locations]
loc_labels = {loc.id: f"{loc.name}, {loc.country} {loc.zip_code}" for loc in catalog.locations}
r1, r2, r3 = st.columns(3)
from_id = r1.selectbox("From", loc_ids, index=0, format_func=loc_labels.get)
to_id = r2.selectbox("To", loc_ids, index=min(1, len(loc_ids) - 1), format_func=loc_labels.get)
category_id = r3.selectbox(
    "Product category",
    [c.id for c in catalog.product_categories],
    format_func=lambda cid: catalog.category(cid).name,
)

st.subheader("Cost model")
k1, k2, k3, k4, k5 = st.columns(5)
basis_names = list(BASIS_TYPES)
cost_type = k1.selectbox("Basis", basis_names, index=basis_names.index(defaults["cost_type"]))
basis_units = list(BASIS_TYPES[cost_type].units)
cost_unit = k2.selectbox("Unit", basis_units, index=basis_units.index(defaults["cost_unit"]) if defaults["cost_unit"] in basis_units else 0)
rate_per_unit = k3.number_input("Rate per unit", min_value=0.0, value=float(defaults["rate_per_unit"]), step=0.1)
currency = k4.text_input("Currency", value=defaults["currency"]).strip().upper() or "USD"
tax_rate = k5.number_input("Tax rate %", min_value=0.0, max_value=100.0, value=float(defaults["tax_rate"]), step=0.5)

if st.button("Calculate", type="primary"):
    if custom is not None:
        pallet_errors = validate_with_specs("custom_pallet", pd.DataFrame([custom_pallet_row]))
        if pallet_errors:
            st.error("Custom pallet: " + "; ".join(pallet_errors))
            st.stop()
    try:
        packages = packages_from_frame(edited.assign(length_unit=edited["length_unit"].fillna(length_unit), weight_unit=edited["weight_unit"].fillna(weight_unit)))
    except ValueError as exc:
        st.error(str(exc))
        st.stop()

    request = ShipmentRequest(
        packages=packages,
        from_location=catalog.location(from_id),
        to_location=catalog.location(to_id),
        pallet=selected_pallet,
        custom_pallet=custom,
        cost_config=ShippingCostConfig.from_type(cost_type, cost_unit, rate_per_unit, currency, tax_rate),
        use_pallet=use_pallet,
    )
    plan = plan_shipment(request)
    shipping = plan.shipping

    st.subheader("Results")
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Shipping cost", f"{shipping.currency_code} {shipping.shipping_cost:.2f}")
    m2.metric("Tax", f"{shipping.currency_code} {shipping.tax:.2f}")
    m3.metric("Total", f"{shipping.currency_code} {shipping.total_cost:.2f}")
    m4.metric("Total weight", format_measurement(shipping.total_weight, "kg"))
    st.caption(f"Category: {catalog.category(category_id).name}")
    if use_pallet:
        st.caption(f"Pallets needed: **{shipping.pallets_needed}**")

    for warning in shipping.warnings:
        st.warning(warning)
    for recommendation in shipping.recommendations:
        st.info(recommendation)

    with st.expander("Calculation details", expanded=False):
        st.code("\n".join(shipping.calculations), language=None)

    stacking = plan.stacking
    st.subheader("Stacking")
    st.write(
        f"Layers: `{stacking.layers}` | Items per layer: `{stacking.items_per_layer}` | "
        f"Total items: `{stacking.total_items}` | Pallets: `{stacking.pallets_needed}`"
    )
    if plan.combined_package is not None and stacking.items_per_layer:
        st.plotly_chart(plot_layer(stacking, plan.combined_package, plan.pallet), width="stretch")
    with st.expander("Stacking details", expanded=False):
        st.code("\n".join(stacking.calculations), language=None)

    d1, d2 = st.columns(2)
    d1.download_button(
        "Download XLSX",
        data=export_to_excel(packages, shipping, use_pallet),
        file_name="shipping_calculator.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    d2.download_button(
        "Download PDF",
        data=generate_pdf_report(packages, shipping, use_pallet),
        file_name="shipping_report.pdf",
        mime="application/pdf",
    )
