#!/usr/bin/env python3
"""
Vellum: PDF workflow activities.

Creates blank PDFs, merges PDFs, places text and images, and embeds OGC
georeference (Geospatial PDF) metadata. Every activity takes its inputs as a
mapping, validates them, delegates the document work to a PDF engine and
returns the resulting PDF bytes.

Architecture:
- Factory pattern for engines, image embedders and activities
- Protocol-based contracts (PDFEngine, ImageEmbedder, Activity)
- Pure processors (color parsing, georeference records) with no PDF access

Usage:
    from vellum import VellumRunner

    runner = VellumRunner()
    runner.initialize()
    outputs = runner.run("create_pdf", {"title": "Site plan"})
    pdf_bytes = outputs["result"]

Or from command line:
    python vellum.py create blank.pdf --title "Site plan"
    python vellum.py georeference blank.pdf map.pdf \\
        --page-bounds 0 0 100 100 --map-bounds 10 10 10 20 20 20 20 10 \\
        --coordinate-system 'GEOGCS["WGS 84", ...]'
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from activities import ACTIVITY_REGISTRY, get_activity, inputs_from_mapping
from engines.pdf import get_pdf_engine
from errors import ActivityError
from utilities import Print, set_log_level, format_bytes, CPU_and_Mem_usage


class VellumRunner:
    """
    Entry point that wires configuration, the PDF engine and the activities.

    Attributes:
        config: Loaded configuration dictionary
        pdf_engine: Initialized PDF engine instance
        activities: Activity instances by name
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize runner with configuration.

        Args:
            config_path: Path to config.json. If None, uses default location.
        """
        self.config = self._load_config(config_path)
        self.pdf_engine = None
        self.activities: Dict[str, Any] = {}
        self._initialized = False

        set_log_level(self.config.get('logging', {}).get('level', 'INFO'))

    def _load_config(self, config_path: Optional[Path]) -> dict:
        """Load configuration from JSON file."""
        if config_path is None:
            config_path = Path(__file__).parent / "config" / "config.json"

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Create config/config.json or specify path with config_path parameter."
            )

        with open(config_path) as f:
            config = json.load(f)

        Print("DEBUG", f"Loaded configuration v{config.get('version', 'unknown')}")
        return config

    def initialize(self, pdf_engine_name: str = "pikepdf") -> None:
        """
        Initialize the PDF engine and every registered activity.

        This must be called before run().

        Args:
            pdf_engine_name: Name of PDF engine to use (default: pikepdf)

        Raises:
            ValueError: If the engine is not registered
        """
        Print("STARTING", f"Initializing Vellum v{self.config.get('version', '1.0.0')}")

        engine_config = dict(self.config.get('pdf_engines', {}).get(pdf_engine_name, {}))
        engine_config.setdefault('images', self.config.get('images', {}))
        self.pdf_engine = get_pdf_engine(pdf_engine_name, engine_config)
        Print("SUCCESS", f"PDF engine: {self.pdf_engine.name}")

        for name in ACTIVITY_REGISTRY:
            self.activities[name] = get_activity(name, self.pdf_engine, self.config)
        Print("DEBUG", f"Activities: {', '.join(self.activities)}")

        self._initialized = True

    def run(self, activity_name: str, inputs: Mapping[str, Any]) -> dict:
        """
        Run one activity with workflow-style inputs.

        Args:
            activity_name: Registered activity name (e.g. 'merge_pdfs')
            inputs: Named inputs; camelCase or snake_case keys

        Returns:
            dict with a 'result' key holding the PDF bytes

        Raises:
            RuntimeError: If the runner is not initialized
            ValueError: If the activity is not registered
            ActivityError: If the inputs fail validation
        """
        if not self._initialized:
            raise RuntimeError("Runner not initialized. Call initialize() first.")

        if activity_name not in self.activities:
            available = ', '.join(self.activities)
            raise ValueError(f"Unknown activity: '{activity_name}'. Available activities: {available}")

        activity = self.activities[activity_name]
        activity_inputs = inputs_from_mapping(activity.inputs_type, inputs)

        Print("STATE", f"Running {activity_name}")
        result = activity.execute(activity_inputs)
        return result.to_outputs()


def _pairs(values):
    """[x0, y0, x1, y1, ...] -> [[x0, y0], [x1, y1], ...]"""
    return [[values[i], values[i + 1]] for i in range(0, len(values), 2)]


def _cli_inputs(args) -> tuple:
    """Translate parsed CLI arguments into (activity name, inputs mapping)."""
    if args.command == 'create':
        return 'create_pdf', {
            'page_width': args.page_width,
            'page_height': args.page_height,
            'title': args.title,
            'author': args.author,
            'subject': args.subject,
            'language': args.language,
            'keywords': args.keywords,
        }

    if args.command == 'merge':
        return 'merge_pdfs', {'sources': [Path(p).read_bytes() for p in args.inputs]}

    inputs = {'source': args.input.read_bytes(), 'page_index': args.page}

    if args.command == 'add-text':
        inputs.update({
            'text': args.text,
            'x': args.x,
            'y': args.y,
            'font_name': args.font,
            'font_size': args.font_size,
            'color': args.color,
        })
        return 'add_text_to_pdf', inputs

    if args.command == 'add-image':
        inputs.update({
            'image': args.image.read_bytes(),
            'x': args.x,
            'y': args.y,
            'width': args.width,
            'height': args.height,
            'border_width': args.border_width,
            'border_color': args.border_color,
        })
        return 'add_image_to_pdf', inputs

    inputs.update({
        'page_bounds': _pairs(args.page_bounds),
        'map_bounds': _pairs(args.map_bounds),
        'coordinate_system': args.coordinate_system,
        'name': args.name,
    })
    return 'add_georeference_to_pdf', inputs


def main(argv=None):
    """Command-line entry point."""
    import argparse

    import pikepdf

    parser = argparse.ArgumentParser(
        description='Vellum: PDF workflow activities',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python vellum.py create blank.pdf --width 612 --height 792 --title "Report"
  python vellum.py merge out.pdf a.pdf b.pdf
  python vellum.py add-text in.pdf out.pdf "Hello" --x 72 --y 720 --color FF0000
  python vellum.py add-image in.pdf out.pdf logo.png --x 72 --y 72 --border-width 2
        """
    )
    parser.add_argument('--config', type=Path, default=None, help='Path to config.json')
    parser.add_argument('--stats', action='store_true', help='Log output size and CPU/memory usage')

    sub = parser.add_subparsers(dest='command', required=True)

    create = sub.add_parser('create', help='Create a blank PDF')
    create.add_argument('output', type=Path)
    create.add_argument('--width', dest='page_width', type=float, default=None, help='Page width in points (default: 595)')
    create.add_argument('--height', dest='page_height', type=float, default=None, help='Page height in points (default: 842)')
    create.add_argument('--title')
    create.add_argument('--author')
    create.add_argument('--subject')
    create.add_argument('--language')
    create.add_argument('--keywords', nargs='*', default=None)

    merge = sub.add_parser('merge', help='Merge PDFs in the given order')
    merge.add_argument('output', type=Path)
    merge.add_argument('inputs', nargs='+', type=Path)

    for command, help_text in (('add-text', 'Add text to a page'),
                               ('add-image', 'Add a JPEG or PNG image to a page'),
                               ('georeference', 'Add georeference metadata to a page')):
        p = sub.add_parser(command, help=help_text)
        p.add_argument('input', type=Path)
        p.add_argument('output', type=Path)
        p.add_argument('--page', type=int, default=0, help='Zero-based page index (default: 0)')

        if command == 'add-text':
            p.add_argument('text')
            p.add_argument('--x', type=float, default=0)
            p.add_argument('--y', type=float, default=0)
            p.add_argument('--font', default=None, help='Standard font name (default: Helvetica)')
            p.add_argument('--font-size', type=float, default=None)
            p.add_argument('--color', default=None, help='RRGGBB or RRGGBBAA (default: 000000FF)')
        elif command == 'add-image':
            p.add_argument('image', type=Path)
            p.add_argument('--x', type=float, default=0)
            p.add_argument('--y', type=float, default=0)
            p.add_argument('--width', type=float, default=None)
            p.add_argument('--height', type=float, default=None)
            p.add_argument('--border-width', type=float, default=0)
            p.add_argument('--border-color', default=None)
        else:
            p.add_argument('--page-bounds', type=float, nargs=4, required=True,
                           metavar=('X0', 'Y0', 'X1', 'Y1'))
            p.add_argument('--map-bounds', type=float, nargs=8, required=True,
                           help='Four lat/lon pairs: bottom-left, top-left, top-right, bottom-right')
            p.add_argument('--coordinate-system', required=True, help='WKT of the map coordinates')
            p.add_argument('--name', default=None)

    args = parser.parse_args(argv)

    try:
        runner = VellumRunner(config_path=args.config)
        runner.initialize()

        activity_name, inputs = _cli_inputs(args)
        outputs = runner.run(activity_name, inputs)

        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(outputs['result'])

        Print("COMPLETED", f"Saved: {args.output}")
        if args.stats:
            Print("INFO", f"Output size: {format_bytes(len(outputs['result']))}")
            Print("INFO", CPU_and_Mem_usage())
        return 0

    except (ActivityError, FileNotFoundError) as e:
        Print("FAILURE", str(e))
        return 1
    except pikepdf.PdfError as e:
        Print("FAILURE", f"Could not read PDF: {e}")
        return 2
    except KeyboardInterrupt:
        Print("WARNING", "Interrupted by user")
        return 130


if __name__ == "__main__":
    import sys
    sys.exit(main())
