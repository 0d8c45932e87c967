"""
netstr command line tool.

Wraps payloads into netstring frames and unwraps them again.

Examples:
    # One frame per file
    netstr encode a.json b.json > frames.bin

    # One frame per input line
    printf 'foo\\nbar\\n' | netstr encode --lines > frames.bin

    # Print every frame on its own line
    netstr decode < frames.bin

    # Write every frame to its own file
    netstr decode --output-dir out/ < frames.bin
"""

from pathlib import Path

import click

from .common.config import NetstrConfig
from .common.log_base import logger, setup_logging
from .protocol import NetstrDecoder, NetstrEncoder, NetstrError


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.option(
    "--max-frame-size",
    type=click.IntRange(min=0),
    help="Reject frames larger than this many bytes",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: Path | None = None,
    log_level: str | None = None,
    max_frame_size: int | None = None,
) -> None:
    """netstr - varint length-prefixed framing for byte streams."""
    netstr_config = NetstrConfig.from_file(config) if config else NetstrConfig()

    # Apply CLI overrides
    if log_level:
        netstr_config.logging.level = log_level.upper()
    if max_frame_size is not None:
        netstr_config.codec.max_frame_size = max_frame_size

    setup_logging(
        level=netstr_config.logging.level,
        log_dir=netstr_config.logging.log_dir,
        environment=netstr_config.logging.environment,
    )
    if config:
        logger.info(f"Loaded configuration from {config}")

    ctx.obj = netstr_config


@main.command()
@click.argument("files", nargs=-1, type=click.File("rb"))
@click.option("--lines", is_flag=True, help="Emit one frame per input line")
@click.pass_obj
def encode(config: NetstrConfig, files: tuple, lines: bool) -> None:
    """Encode FILES (or stdin) as netstring frames on stdout."""
    sources = files or (click.get_binary_stream("stdin"),)
    stdout = click.get_binary_stream("stdout")
    encoder = NetstrEncoder.from_config(stdout, config.codec)

    count = 0
    try:
        for source in sources:
            if lines:
                for line in source:
                    encoder.encode(line.rstrip(b"\r\n"))
                    count += 1
            else:
                encoder.encode(source.read())
                count += 1
    except NetstrError as e:
        logger.error("Encoding failed", frames=count, error=str(e))
        raise click.ClickException(str(e)) from e
    finally:
        stdout.flush()

    logger.info(f"Encoded {count} frames")


@main.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write each frame to its own file in this directory",
)
@click.option(
    "--separator",
    default="\\n",
    show_default=True,
    help="Separator written after each frame on stdout",
)
@click.pass_obj
def decode(config: NetstrConfig, output_dir: Path | None, separator: str) -> None:
    """Decode netstring frames from stdin."""
    decoder = NetstrDecoder.from_config(click.get_binary_stream("stdin"), config.codec)
    stdout = click.get_binary_stream("stdout")
    sep = separator.encode("utf-8").decode("unicode_escape").encode("latin-1")

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    count = 0
    try:
        for frame in decoder:
            if output_dir is not None:
                (output_dir / f"frame_{count:06d}.bin").write_bytes(frame)
            else:
                stdout.write(frame + sep)
            count += 1
    except NetstrError as e:
        logger.error("Decoding failed", frames=count, error=str(e))
        raise click.ClickException(str(e)) from e
    finally:
        stdout.flush()

    logger.info(f"Decoded {count} frames")


if __name__ == "__main__":
    main()
