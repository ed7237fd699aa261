import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from rivernet.system import WaterNetwork
from rivernet.system._visualize import plot_results, visualize_network


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestVisualizeNetwork:
    def test_returns_figure_and_axes(self, network):
        fig, ax = network.visualize()
        assert isinstance(fig, plt.Figure)
        assert ax.get_title() == "Water Network (3 nodes, 2 edges)"

    def test_custom_title(self, network):
        _, ax = visualize_network(network, title="Catchment")
        assert ax.get_title() == "Catchment"

    def test_cyclic_network_still_draws(self, network):
        network.connect("lower", "upper")
        fig, _ = visualize_network(network)
        assert fig is not None

    def test_empty_network(self):
        with pytest.raises(ValueError, match="Network has no nodes"):
            visualize_network(WaterNetwork())

    def test_save_to(self, network, tmp_path):
        target = tmp_path / "network.png"
        visualize_network(network, save_to=target)
        assert target.exists()


class TestPlotResults:
    def test_plots_every_node(self, network):
        result = network.run("lower", 3, [1, 2, 3])

        fig, (ax_out, ax_store) = plot_results(result)

        assert len(ax_out.get_lines()) == 3
        assert len(ax_store.get_lines()) == 3

    def test_selected_nodes(self, network):
        result = network.run("lower", 3, [1, 2, 3])
        _, (ax_out, _) = plot_results(result, [network["lower"]])
        assert [line.get_label() for line in ax_out.get_lines()] == ["lower"]

    def test_no_nodes(self):
        from rivernet.system import DetailedResult

        with pytest.raises(ValueError, match="No nodes to plot"):
            plot_results(DetailedResult(days=1))
