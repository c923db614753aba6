"""
Stardate Analyzer
=================

Descriptive analysis of the stardates quoted in the episode scripts:
- Per-season stardate ranges
- Distribution of the digit after the decimal point
- Stardates quoted per episode
- Progression of stardates across broadcast order
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import matplotlib.pyplot as plt
import pandas as pd
from scipy import stats

from corpus.config import EXPECTED_EPISODE_COUNT, PipelineConfig
from corpus.episode_titles import JOINED_COLUMNS, join_episode_titles
from corpus.extraction import ExtractionStats, StardateExtractor
from corpus.preprocessing import load_scripts_complete
from corpus.seasons import SEASONS, season_for_episode

from analysis.visualization_framework import VisualizationFramework

logger = logging.getLogger(__name__)


class StardateAnalyzer:
    """Analyze the tidy stardate table of the corpus."""

    def __init__(self, frame: pd.DataFrame,
                 episodes: Optional[List[int]] = None,
                 extraction_stats: Optional[ExtractionStats] = None):
        """
        Initialize the analyzer.

        Args:
            frame: Stardate table, with or without the episode_title column
            episodes: Episode numbers of the whole corpus, used to find
                episodes that quote no stardate
            extraction_stats: Counts from the extraction run, if available
        """
        if 'episode_title' not in frame.columns:
            frame = join_episode_titles(frame, {})
        self.frame = frame[JOINED_COLUMNS].reset_index(drop=True)
        if episodes is None:
            episodes = self.frame['episode'].unique()
        self.episodes = sorted(int(e) for e in episodes)
        self.extraction_stats = extraction_stats

    @classmethod
    def from_config(cls, config: PipelineConfig,
                    titles: Optional[Mapping[int, str]] = None) -> 'StardateAnalyzer':
        """Load the corpus described by a config and extract its stardates."""
        scripts = load_scripts_complete(
            config.scripts_dir,
            pattern=config.file_pattern,
            expected_episode_count=config.expected_episode_count,
            encoding=config.encoding,
        )
        extractor = StardateExtractor(config.expected_episode_count)
        frame = join_episode_titles(extractor.extract(scripts), titles or {})
        return cls(frame,
                   episodes=[script.episode for script in scripts],
                   extraction_stats=extractor.stats)

    def season_summary(self) -> pd.DataFrame:
        """Stardate count, episode count and stardate range for each season."""
        grouped = self.frame.groupby('season').agg(
            stardates=('stardate', 'size'),
            episodes=('episode', 'nunique'),
            min_stardate=('stardate', 'min'),
            max_stardate=('stardate', 'max'),
            mean_stardate=('stardate', 'mean'),
        )
        summary = grouped.reindex(SEASONS)
        summary[['stardates', 'episodes']] = summary[['stardates', 'episodes']].fillna(0).astype('int64')
        summary.index.name = 'season'
        return summary.reset_index()

    def decimal_distribution(self) -> pd.Series:
        """Count of stardates for each decimal digit 0-9."""
        counts = self.frame['stardate_decimal'].value_counts()
        counts = counts.reindex(range(10), fill_value=0).astype('int64')
        counts.index.name = 'stardate_decimal'
        counts.name = 'count'
        return counts

    def episode_summary(self) -> pd.DataFrame:
        """Stardate count and first/last stardate per episode of the corpus."""
        grouped = self.frame.groupby('episode').agg(
            episode_title=('episode_title', 'first'),
            stardate_count=('stardate', 'size'),
            first_stardate=('stardate', 'first'),
            last_stardate=('stardate', 'last'),
        )
        summary = grouped.reindex(self.episodes)
        summary['stardate_count'] = summary['stardate_count'].fillna(0).astype('int64')
        summary.index.name = 'episode'
        summary = summary.reset_index()
        summary.insert(1, 'season', summary['episode'].map(season_for_episode))
        return summary

    def episodes_without_stardates(self) -> List[int]:
        """Episode numbers that quote no usable stardate."""
        quoted = set(self.frame['episode'])
        return [episode for episode in self.episodes if episode not in quoted]

    def stardate_progression(self) -> Dict[str, Any]:
        """Spearman rank correlation between broadcast order and stardate."""
        frame = self.frame
        if len(frame) < 3 or frame['stardate'].nunique() < 2 or frame['episode'].nunique() < 2:
            return {'n': len(frame), 'spearman_rho': None, 'p_value': None}

        rho, p_value = stats.spearmanr(frame['episode'], frame['stardate'])
        return {'n': len(frame), 'spearman_rho': float(rho), 'p_value': float(p_value)}

    def filter_records(self, season: Optional[int] = None,
                       episode: Optional[int] = None,
                       min_stardate: Optional[float] = None,
                       max_stardate: Optional[float] = None) -> pd.DataFrame:
        """Select rows of the stardate table; all given conditions must hold."""
        mask = pd.Series(True, index=self.frame.index)
        if season is not None:
            mask &= self.frame['season'] == season
        if episode is not None:
            mask &= self.frame['episode'] == episode
        if min_stardate is not None:
            mask &= self.frame['stardate'] >= min_stardate
        if max_stardate is not None:
            mask &= self.frame['stardate'] <= max_stardate
        return self.frame[mask].reset_index(drop=True)

    def generate_report(self, save_path: Optional[Path] = None) -> Dict[str, Any]:
        """Generate the stardate report, optionally saving it as JSON."""
        season_summary = self.season_summary()
        season_summary = season_summary.astype(object).where(season_summary.notna(), None)
        report = {
            'overview': {
                'total_episodes': len(self.episodes),
                'total_stardates': len(self.frame),
                'episodes_with_stardates': int(self.frame['episode'].nunique()),
                'min_stardate': float(self.frame['stardate'].min()) if len(self.frame) else None,
                'max_stardate': float(self.frame['stardate'].max()) if len(self.frame) else None,
                'untitled_episodes': sorted(
                    int(e) for e in self.frame.loc[self.frame['episode_title'].isna(), 'episode'].unique()
                ),
            },
            'extraction': vars(self.extraction_stats) if self.extraction_stats else None,
            'seasons': season_summary.to_dict('records'),
            'decimal_distribution': {int(k): int(v) for k, v in self.decimal_distribution().items()},
            'episodes_without_stardates': self.episodes_without_stardates(),
            'progression': self.stardate_progression(),
        }

        if save_path:
            save_path = Path(save_path)
            save_path.parent.mkdir(parents=True, exist_ok=True)
            with open(save_path, 'w') as f:
                json.dump(report, f, indent=2, default=str)
            logger.info(f"Report saved to {save_path}")

        return report

    def export_table(self, path: Path, viz: Optional[VisualizationFramework] = None) -> List[Path]:
        """Write the stardate table as CSV and HTML next to each other."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        csv_path = path.with_suffix('.csv')
        self.frame.to_csv(csv_path, index=False)

        html_path = path.with_suffix('.html')
        if viz is None:
            table = self.frame.to_html(index=False, na_rep='')
        else:
            table = viz.create_html_table(self.frame, caption="Stardates by Episode")
        html_path.write_text(table, encoding='utf-8')

        logger.info(f"Table saved to {csv_path} and {html_path}")
        return [csv_path, html_path]

    def plot_all(self, output_dir: Path, viz: Optional[VisualizationFramework] = None) -> List[Path]:
        """Draw and save every stardate chart; returns the PNG paths."""
        viz = viz or VisualizationFramework()
        output_dir = Path(output_dir)

        charts = {
            'stardate_timeline': lambda p: viz.plot_stardate_timeline(self.frame, save_path=p),
            'decimal_distribution': lambda p: viz.plot_decimal_distribution(
                self.decimal_distribution(), save_path=p),
            'season_ranges': lambda p: viz.plot_season_ranges(self.frame, save_path=p),
            'stardates_per_episode': lambda p: viz.plot_stardates_per_episode(
                self.episode_summary(), save_path=p),
        }

        saved = []
        for name, draw in charts.items():
            path = output_dir / f"{name}.png"
            fig = draw(path)
            plt.close(fig)
            saved.append(path)

        return saved


def main(argv: Optional[List[str]] = None) -> int:
    """Run the stardate analysis offline, with titles from a local JSON file."""
    import argparse

    from analysis.run_all_analyses import UnifiedAnalysisRunner

    parser = argparse.ArgumentParser(description="Analyze stardates in episode scripts")
    parser.add_argument('--scripts-dir', type=Path, default=Path("data/scripts"),
                        help='Directory containing the episode script files')
    parser.add_argument('--output-dir', type=Path, default=Path("analysis/stardates"),
                        help='Directory to save results')
    parser.add_argument('--titles', type=Path, default=Path("data/episode_titles.json"),
                        help='JSON file mapping episode numbers to titles')
    parser.add_argument('--expected-episodes', type=int, default=EXPECTED_EPISODE_COUNT,
                        help='Number of scripts the corpus must contain')
    parser.add_argument('--plots', action='store_true', help='Generate charts')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    config = PipelineConfig(
        scripts_dir=args.scripts_dir,
        output_dir=args.output_dir,
        expected_episode_count=args.expected_episodes,
        titles_cache=args.titles,
        offline=True,
        generate_plots=args.plots,
    )
    UnifiedAnalysisRunner(config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
