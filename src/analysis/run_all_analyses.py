"""
Unified Analysis Runner
========================

Run the whole stardate pipeline with one configuration: load scripts,
extract stardates, attach episode titles, then write the report, the tidy
table and (optionally) the charts.
"""

import argparse
import json
import logging
import platform
import sys
from datetime import datetime
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional

from corpus.config import PipelineConfig
from corpus.episode_titles import (
    fetch_episode_titles,
    load_episode_titles,
    save_episode_titles,
)
from corpus.exceptions import EpisodeTitleFetchError

from analysis.stardate_analyzer import StardateAnalyzer
from analysis.visualization_framework import VisualizationFramework

logger = logging.getLogger(__name__)

SESSION_PACKAGES = ['pandas', 'numpy', 'scipy', 'matplotlib', 'seaborn',
                    'requests', 'beautifulsoup4', 'lxml', 'tqdm']


def collect_session_info(packages: Optional[List[str]] = None) -> Dict[str, Any]:
    """Record interpreter, platform and library versions of the run."""
    versions = {}
    for name in packages or SESSION_PACKAGES:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = None

    return {
        'python': sys.version.split()[0],
        'implementation': platform.python_implementation(),
        'platform': platform.platform(),
        'packages': versions,
    }


class UnifiedAnalysisRunner:
    """Run every stardate analysis step in a coordinated manner."""

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.output_dir = config.output_dir
        self.results = {}

    def resolve_titles(self) -> Dict[int, str]:
        """
        Get episode titles from Wikipedia, falling back to the cache.

        A fresh download refreshes the cache. When the download fails and no
        cache exists, the run continues without titles.
        """
        cached = load_episode_titles(self.config.titles_cache)

        if self.config.offline:
            logger.info(f"Offline mode: using {len(cached)} cached titles")
            return cached

        try:
            titles = fetch_episode_titles(
                self.config.wiki_url,
                timeout=self.config.request_timeout,
                retries=self.config.request_retries,
                delay=self.config.request_delay,
            )
        except EpisodeTitleFetchError as e:
            logger.warning(f"{e}; using {len(cached)} cached titles")
            return cached

        save_episode_titles(titles, self.config.titles_cache)
        return titles

    def run(self) -> Dict[str, Any]:
        """Run the pipeline and return a summary of the outputs."""
        print("\n" + "=" * 80)
        print("STARDATE CORPUS ANALYSIS")
        print("=" * 80)
        print(f"Scripts directory: {self.config.scripts_dir}")
        print(f"Output directory: {self.output_dir}")
        print("=" * 80)

        self.output_dir.mkdir(parents=True, exist_ok=True)

        titles = self.resolve_titles()
        analyzer = StardateAnalyzer.from_config(self.config, titles)

        report = analyzer.generate_report(save_path=self.output_dir / "stardate_report.json")

        viz = VisualizationFramework()
        table_paths = analyzer.export_table(self.output_dir / "stardates", viz=viz)
        analyzer.season_summary().to_csv(self.output_dir / "season_summary.csv", index=False)
        analyzer.episode_summary().to_csv(self.output_dir / "episode_summary.csv", index=False)

        plot_paths = []
        if self.config.generate_plots:
            plot_paths = analyzer.plot_all(self.output_dir / "plots", viz=viz)

        self.results = {
            'timestamp': datetime.now().isoformat(),
            'config': self.config.to_dict(),
            'session': collect_session_info(),
            'overview': report['overview'],
            'titles_available': len(titles),
            'outputs': [str(p) for p in table_paths + plot_paths],
        }

        summary_path = self.output_dir / "run_summary.json"
        with open(summary_path, 'w') as f:
            json.dump(self.results, f, indent=2, default=str)

        self.print_summary(report)
        return self.results

    def print_summary(self, report: Dict[str, Any]):
        """Print a short human-readable summary of the report."""
        overview = report['overview']
        print("\n" + "=" * 60)
        print("STARDATE ANALYSIS SUMMARY")
        print("=" * 60)
        print(f"  Stardates: {overview['total_stardates']}")
        print(f"  Episodes with stardates: {overview['episodes_with_stardates']}/{overview['total_episodes']}")
        print(f"  Range: {overview['min_stardate']} - {overview['max_stardate']}")

        print("\nPer season:")
        for row in report['seasons']:
            print(f"  Season {row['season']}: {row['stardates']} stardates "
                  f"in {row['episodes']} episodes")

        rho = report['progression']['spearman_rho']
        if rho is not None:
            print(f"\nSpearman rho (episode vs stardate): {rho:.3f}")

        print(f"\nAll results saved to {self.output_dir}")


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Combine an optional JSON config file with command line overrides."""
    overrides = {
        'scripts_dir': args.scripts_dir,
        'output_dir': args.output_dir,
        'file_pattern': args.pattern,
        'expected_episode_count': args.expected_episodes,
        'titles_cache': args.titles_cache,
        'offline': True if args.offline else None,
        'generate_plots': True if args.plots else None,
    }
    if args.config:
        return PipelineConfig.from_json(args.config, **overrides)
    return PipelineConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the stardate corpus analysis")
    parser.add_argument('--config', type=Path, help='JSON configuration file')
    parser.add_argument('--scripts-dir', type=Path, help='Directory containing the episode scripts')
    parser.add_argument('--output-dir', type=Path, help='Directory to save all results')
    parser.add_argument('--pattern', type=str, help='Glob pattern selecting script files')
    parser.add_argument('--expected-episodes', type=int,
                        help='Number of scripts the corpus must contain (default: 176)')
    parser.add_argument('--titles-cache', type=Path, help='JSON cache of episode titles')
    parser.add_argument('--offline', action='store_true',
                        help='Use cached episode titles instead of fetching them')
    parser.add_argument('--plots', action='store_true', help='Generate charts')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(levelname)s - %(message)s')

    runner = UnifiedAnalysisRunner(build_config(args))
    runner.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
