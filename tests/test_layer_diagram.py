import pytest

from fit_engine import plan_pallet_stacking
from models import Package, PalletSize
from services.layer_diagram import plot_layer

EUR = PalletSize(id="eur1", name="EUR 1", length=120, width=80, height=14.4, max_weight=1500, length_unit="cm")


def test_plot_layer_draws_deck_and_full_footprints():
    pkg = Package(length=40, width=30, height=25, weight=5, quantity=10)
    plan = plan_pallet_stacking(pkg, EUR)
    fig = plot_layer(plan, pkg, EUR)
    shapes = fig.layout.shapes

    assert len(shapes) == 1 + plan.items_per_layer
    deck = shapes[0]
    assert (deck.x0, deck.y0) == (0, 0)
    assert (deck.x1, deck.y1) == (pytest.approx(1200), pytest.approx(800))

    last = shapes[-1]
    assert (last.x0, last.y0) == (pytest.approx(900), pytest.approx(400))
    assert (last.x1, last.y1) == (pytest.approx(1200), pytest.approx(800))
    assert all(s.x1 > s.x0 and s.y1 > s.y0 for s in shapes)
    assert list(fig.layout.xaxis.range) == [0, pytest.approx(1200)]


def test_plot_layer_with_empty_plan_shows_only_the_deck():
    flat = Package(length=0, width=30, height=25, weight=5)
    fig = plot_layer(plan_pallet_stacking(flat, EUR), flat, EUR)
    assert len(fig.layout.shapes) == 1
