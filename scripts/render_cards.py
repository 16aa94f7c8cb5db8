#!/usr/bin/env python3
"""
Render plugin info cards from the command line
"""
import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.main import build_renderer
from src.utils.config_loader import load_cards_config


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Render WordPress.org plugin info cards as HTML',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Cards for two plugins
  python scripts/render_cards.py --slugs akismet,jetpack

  # Every plugin by an author, followed by one more slug
  python scripts/render_cards.py --author automattic --slugs hello-dolly

  # Write the HTML to a file with verbose logging
  python scripts/render_cards.py --slugs akismet --output cards.html --verbose
        """
    )

    parser.add_argument(
        '--slugs',
        type=str,
        default='',
        help='Comma separated plugin slugs'
    )

    parser.add_argument(
        '--author',
        type=str,
        default=None,
        help='Author whose plugins are rendered before the slugs'
    )

    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to cards config YAML file (default: config/cards_config.yml)'
    )

    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=None,
        help='Write HTML to this file instead of stdout'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        default=None,
        help='Path to log file'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for the card renderer"""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    if not args.slugs.strip() and not (args.author or '').strip():
        parser.error('provide --slugs and/or --author')

    try:
        config = load_cards_config(args.config) if args.config else None
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    renderer = build_renderer(config)
    html = renderer.render_embed(args.slugs, author=args.author)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(html, encoding='utf-8')
        logger.info(f"Wrote cards to {args.output}")
    else:
        sys.stdout.write(html)
    return 0


if __name__ == '__main__':
    sys.exit(main())
