"""Command-line interface for old photo restoration."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import click
from dotenv import load_dotenv

from src.adjustments import ADJUSTMENT_FIELDS, PRESETS, apply_preset, adjustment_intensity
from src.pipeline import Pipeline
from src.preprocessing.loader import load_bitmap, SUPPORTED_EXTENSIONS
from src.utils.metrics import compute_tone_stats
from src.utils.output import save_bitmap, compose_comparison, output_suffix, OUTPUT_SUFFIXES
from src.utils.settings import load_settings

# Load environment variables from .env
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)

logger = logging.getLogger(__name__)


def _parse_overrides(values: tuple) -> Dict[str, float]:
    """Parse repeated --set field=value options."""
    overrides: Dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition('=')
        name = name.strip()
        if not sep:
            raise click.BadParameter(f"Expected field=value, got {item!r}", param_hint='--set')
        try:
            overrides[name] = float(raw)
        except ValueError:
            raise click.BadParameter(f"Not a number: {raw!r}", param_hint='--set') from None
    return overrides


@click.group()
@click.version_option(version='0.1.0')
def main() -> None:
    """Photo Restore - Bring back color, contrast and detail in old photographs."""
    pass


@main.command()
@click.argument('input_paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    '--output',
    '-o',
    'output_dir',
    type=click.Path(),
    default='./output',
    help='Output directory for restored images'
)
@click.option(
    '--preset',
    'preset_id',
    type=click.Choice([preset.id for preset in PRESETS]),
    default=None,
    help='Preset to start from (default from settings, "auto" otherwise)'
)
@click.option(
    '--set',
    'overrides',
    multiple=True,
    metavar='FIELD=VALUE',
    help=f'Override one adjustment, repeatable. Fields: {", ".join(ADJUSTMENT_FIELDS)}'
)
@click.option(
    '--compare',
    is_flag=True,
    help='Also save a before/after split comparison'
)
@click.option(
    '--quality',
    type=click.IntRange(1, 100),
    default=None,
    help='JPEG quality for saved images'
)
@click.option(
    '--format',
    'output_format',
    type=click.Choice(list(OUTPUT_SUFFIXES)),
    default=None,
    help='Output image format (default from settings, "jpeg" otherwise)'
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging'
)
def process(
    input_paths: tuple,
    output_dir: str,
    preset_id: Optional[str],
    overrides: tuple,
    compare: bool,
    quality: Optional[int],
    output_format: Optional[str],
    verbose: bool
) -> None:
    """Restore old photos with a preset and optional manual adjustments.

    INPUT_PATHS: One or more image files or directories to process
    """
    # Set logging level
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_settings()
    if quality is not None:
        config.jpeg_quality = quality
    if output_format is not None:
        config.output_format = output_format
    suffix = output_suffix(config.output_format)

    try:
        adjustments = apply_preset(preset_id or config.default_preset, _parse_overrides(overrides))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--set') from None

    logger.info(
        f"Adjustments ({adjustment_intensity(adjustments)}% intensity): "
        + ", ".join(f"{k}={v:g}" for k, v in adjustments.to_dict().items())
    )

    # Collect all input files
    input_files: List[Path] = []

    for input_path_str in input_paths:
        input_path = Path(input_path_str)

        if input_path.is_file():
            input_files.append(input_path)
        elif input_path.is_dir():
            found = sorted(
                p for p in input_path.iterdir()
                if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
            )
            logger.info(f"Found {len(found)} image(s) in {input_path}")
            input_files.extend(found)

    if not input_files:
        logger.error("No input files found")
        sys.exit(1)

    logger.info(f"Processing {len(input_files)} file(s)")

    # Create output directory
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    pipeline = Pipeline(config)

    saved = 0
    for input_file in input_files:
        try:
            original, metadata = load_bitmap(str(input_file))
            result = pipeline.run(original, adjustments)

            output_file = output_path / f"{config.output_prefix}{input_file.stem}{suffix}"
            save_bitmap(result.bitmap, output_file, "Restored", quality=config.jpeg_quality)
            logger.info(f"Saved: {output_file.name}")

            if compare:
                comparison = compose_comparison(original, result.bitmap, config.comparison_split)
                compare_file = output_path / f"{config.output_prefix}{input_file.stem}_compare{suffix}"
                save_bitmap(comparison, compare_file, "Before/after", quality=config.jpeg_quality)
                logger.info(f"Saved: {compare_file.name}")

            before = compute_tone_stats(original)
            after = compute_tone_stats(result.bitmap)
            logger.info(f"  Format: {metadata.format} ({result.bitmap.width}x{result.bitmap.height})")
            logger.info(
                f"  Brightness: {before['mean_brightness']:.1f} -> {after['mean_brightness']:.1f}, "
                f"contrast: {before['contrast']:.1f} -> {after['contrast']:.1f}"
            )
            logger.info(f"  Processing time: {result.processing_time:.3f}s")
            saved += 1

        except Exception as e:
            logger.error(f"Error processing {input_file}: {e}", exc_info=verbose)
            continue

    # Print overall summary
    logger.info(f"COMPLETE: Restored {saved}/{len(input_files)} file(s)")
    logger.info(f"Output directory: {output_path.absolute()}")

    if saved == 0:
        sys.exit(1)


@main.command()
def presets() -> None:
    """List the bundled presets and their values."""
    for preset in PRESETS:
        click.echo(click.style(f"{preset.id}", bold=True) + f" - {preset.name}")
        click.echo(f"   {preset.description}")
        values = ", ".join(f"{k}={v:g}" for k, v in preset.adjustments.to_dict().items())
        click.echo(f"   {values}")
        click.echo()


if __name__ == '__main__':
    main()
