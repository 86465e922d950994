from __future__ import annotations

import plotly.graph_objects as go

from fit_engine import layer_grid
from models import Package, PalletSize, StackingPlan, normalize_pallet


def plot_layer(plan: StackingPlan, pkg: Package, pallet: PalletSize) -> go.Figure:
    """Top view of one layer: the pallet deck plus one rectangle per package footprint (mm)."""
    deck = normalize_pallet(pallet)
    fig = go.Figure()
    fig.add_shape(
        type="rect",
        x0=0,
        y0=0,
        x1=deck.length,
        y1=deck.width,
        line=dict(color="#8b5a2b", width=2),
        fillcolor="rgba(222,184,135,0.35)",
    )
    for cell in layer_grid(plan, pkg):
        fig.add_shape(
            type="rect",
            x0=cell["x_mm"],
            y0=cell["y_mm"],
            x1=cell["x_mm"] + cell["length_mm"],
            y1=cell["y_mm"] + cell["width_mm"],
            line=dict(color="#1f4e79", width=1),
            fillcolor="rgba(31,119,180,0.45)",
        )
    fig.update_xaxes(range=[0, deck.length], title_text="Length (mm)")
    fig.update_yaxes(range=[0, deck.width], title_text="Width (mm)", scaleanchor="x", scaleratio=1)
    fig.update_layout(margin=dict(l=0, r=0, b=0, t=0), height=360)
    return fig
