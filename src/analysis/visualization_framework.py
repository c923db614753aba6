"""
Visualization Framework for Stardate Analysis
=============================================

Consistent styling, a per-season colour scheme and plot templates for the
stardate charts.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.patches import Patch

from corpus.seasons import SEASONS

logger = logging.getLogger(__name__)


@dataclass
class PlotConfig:
    """Configuration for plot styling."""
    figure_size: Tuple[float, float] = (10, 6)
    dpi: int = 100
    font_size: int = 11
    title_size: int = 14
    label_size: int = 12
    legend_size: int = 10
    marker_size: float = 40.0
    grid_alpha: float = 0.3
    color_palette: str = 'husl'
    style: str = 'seaborn-v0_8-darkgrid'


class VisualizationFramework:
    """Unified visualization framework for stardate charts."""

    COLOR_SCHEMES = {
        'default': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd',
                    '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf'],
        'seasons': {
            1: '#1f77b4',
            2: '#ff7f0e',
            3: '#2ca02c',
            4: '#d62728',
            5: '#9467bd',
            6: '#8c564b',
            7: '#e377c2',
        },
        'digits': 'viridis',
    }

    def __init__(self, config: Optional[PlotConfig] = None):
        """Initialize visualization framework."""
        self.config = config or PlotConfig()
        self.setup_style()

    def setup_style(self):
        """Set up matplotlib style settings."""
        if self.config.style in plt.style.available:
            plt.style.use(self.config.style)
        else:
            logger.warning(f"Plot style '{self.config.style}' not available, using default")

        mpl.rcParams.update({
            'figure.figsize': self.config.figure_size,
            'figure.dpi': self.config.dpi,
            'font.size': self.config.font_size,
            'axes.titlesize': self.config.title_size,
            'axes.labelsize': self.config.label_size,
            'xtick.labelsize': self.config.label_size - 1,
            'ytick.labelsize': self.config.label_size - 1,
            'legend.fontsize': self.config.legend_size,
            'axes.grid': True,
            'grid.alpha': self.config.grid_alpha,
        })

        sns.set_palette(self.config.color_palette)

    def get_colors(self, color_type: str = 'default',
                   n_colors: Optional[int] = None) -> Union[List[str], Dict[int, str], str]:
        """
        Get colors for plotting.

        Args:
            color_type: Type of color scheme
            n_colors: Number of colors needed (for list types)
        """
        colors = self.COLOR_SCHEMES.get(color_type, self.COLOR_SCHEMES['default'])
        if isinstance(colors, list):
            if n_colors and n_colors > len(colors):
                return sns.color_palette(self.config.color_palette, n_colors).as_hex()
            return colors[:n_colors] if n_colors else colors
        return colors

    def create_figure(self, nrows: int = 1, ncols: int = 1,
                      figsize: Optional[Tuple[float, float]] = None,
                      **kwargs) -> Tuple[plt.Figure, Union[plt.Axes, np.ndarray]]:
        """Create a figure with consistent styling."""
        figsize = figsize or (self.config.figure_size[0] * ncols,
                              self.config.figure_size[1] * nrows)
        return plt.subplots(nrows, ncols, figsize=figsize, **kwargs)

    def plot_stardate_timeline(self, frame: pd.DataFrame,
                               title: str = "Stardates by Episode",
                               save_path: Optional[Path] = None) -> plt.Figure:
        """Scatter of stardate against episode number, coloured by season."""
        fig, ax = self.create_figure(figsize=(14, 6))

        sns.scatterplot(data=frame, x='episode', y='stardate', hue='season',
                        palette=self.get_colors('seasons'), hue_order=SEASONS,
                        s=self.config.marker_size, alpha=0.8, ax=ax)

        ax.set_xlabel('Episode', fontsize=self.config.label_size)
        ax.set_ylabel('Stardate', fontsize=self.config.label_size)
        ax.set_title(title, fontsize=self.config.title_size, fontweight='bold')
        ax.legend(title='Season', loc='best')
        ax.grid(True, alpha=self.config.grid_alpha)

        if save_path:
            self.save_figure(fig, save_path)

        return fig

    def plot_decimal_distribution(self, counts: pd.Series,
                                  title: str = "Digit After the Stardate Decimal Point",
                                  save_path: Optional[Path] = None) -> plt.Figure:
        """Bar chart of the decimal digit counts (index 0-9)."""
        fig, ax = self.create_figure(figsize=(10, 6))

        digits = [str(d) for d in counts.index]
        values = counts.to_numpy()
        colors = sns.color_palette(self.COLOR_SCHEMES['digits'], len(digits))

        bars = ax.bar(digits, values, color=colors, alpha=0.85, edgecolor='black')

        top = max(values.max() if len(values) else 0, 1)
        for bar, val in zip(bars, values):
            ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height() + top * 0.01,
                    f'{val:,}', ha='center', va='bottom', fontsize=9)

        ax.set_xlabel('Decimal digit', fontsize=self.config.label_size)
        ax.set_ylabel('Stardates', fontsize=self.config.label_size)
        ax.set_title(title, fontsize=self.config.title_size, fontweight='bold')
        ax.set_ylim(0, top * 1.1)

        if save_path:
            self.save_figure(fig, save_path)

        return fig

    def plot_season_ranges(self, frame: pd.DataFrame,
                           title: str = "Stardate Range per Season",
                           save_path: Optional[Path] = None) -> plt.Figure:
        """Box plot of stardates for each season."""
        fig, ax = self.create_figure(figsize=(12, 6))
        palette = self.get_colors('seasons')

        sns.boxplot(data=frame, x='season', y='stardate', hue='season', order=SEASONS,
                    hue_order=SEASONS, palette=palette, legend=False, ax=ax)
        sns.stripplot(data=frame, x='season', y='stardate', order=SEASONS,
                      color='black', size=3, alpha=0.5, ax=ax)

        ax.set_xlabel('Season', fontsize=self.config.label_size)
        ax.set_ylabel('Stardate', fontsize=self.config.label_size)
        ax.set_title(title, fontsize=self.config.title_size, fontweight='bold')

        if save_path:
            self.save_figure(fig, save_path)

        return fig

    def plot_stardates_per_episode(self, episode_summary: pd.DataFrame,
                                   title: str = "Stardates Quoted per Episode",
                                   save_path: Optional[Path] = None) -> plt.Figure:
        """Bar chart of stardate counts per episode, coloured by season."""
        fig, ax = self.create_figure(figsize=(16, 5))
        season_colors = self.get_colors('seasons')

        colors = [season_colors.get(season, '#7f7f7f') for season in episode_summary['season']]
        ax.bar(episode_summary['episode'], episode_summary['stardate_count'],
               color=colors, width=0.9)

        ax.set_xlabel('Episode', fontsize=self.config.label_size)
        ax.set_ylabel('Stardates', fontsize=self.config.label_size)
        ax.set_title(title, fontsize=self.config.title_size, fontweight='bold')

        handles = [Patch(color=season_colors[s], label=f'Season {s}') for s in SEASONS]
        ax.legend(handles=handles, loc='upper right', ncol=len(SEASONS))

        if save_path:
            self.save_figure(fig, save_path)

        return fig

    def save_figure(self, fig: plt.Figure, path: Path, dpi: Optional[int] = None,
                    formats: Tuple[str, ...] = ('png', 'pdf')):
        """Save figure in multiple formats."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        dpi = dpi or self.config.dpi * 3

        for fmt in formats:
            save_path = path.with_suffix(f'.{fmt}')
            fig.savefig(save_path, dpi=dpi, bbox_inches='tight')
            logger.info(f"Figure saved to {save_path}")

    def create_html_table(self, data: pd.DataFrame, caption: str = "Stardates") -> str:
        """Render a DataFrame as an HTML table with a caption."""
        table = data.to_html(index=False, na_rep='', float_format=lambda x: f'{x:.1f}',
                             classes='stardate-table', border=0)
        return f"<h2>{caption}</h2>\n{table}"
