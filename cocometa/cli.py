"""CLI entry point for cocometa."""

from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path

from loguru import logger

from cocometa.config import DecoderConfig
from cocometa.decoder import AnnotationDecoder
from cocometa.exceptions import CocometaError
from cocometa.index import MetadataIndex
from cocometa.models import Metadata


class CliApp:
    """Command-line interface for cocometa."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="COCO annotation metadata utilities.",
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_inspect_parser(subparsers)
        self._add_check_parser(subparsers)

        return parser

    @staticmethod
    def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "annotations_file",
            help="Path to a COCO annotation JSON file.",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help=(
                "Fail when 'images', 'annotations' or 'categories' is missing "
                "(default: from config, lenient)."
            ),
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/cocometa/config.yaml "
                "or COCOMETA_CONFIG)."
            ),
        )

    def _add_inspect_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``inspect`` command parser."""
        parser = subparsers.add_parser(
            "inspect",
            help="Decode a COCO file and print collection and per-category counts.",
        )
        self._add_common_arguments(parser)

    def _add_check_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``check`` command parser."""
        parser = subparsers.add_parser(
            "check",
            help=(
                "Decode a COCO file and report annotations that reference "
                "unknown images or categories."
            ),
        )
        self._add_common_arguments(parser)

    def _load_metadata(self, args: argparse.Namespace) -> Metadata:
        """Read and decode the file named in *args*; exit on failure."""
        config_path = Path(args.config) if args.config else None
        cfg = DecoderConfig.load(config_path)
        decoder = AnnotationDecoder(strict=args.strict or cfg.is_strict)
        path = Path(args.annotations_file)
        try:
            raw = path.read_bytes()
        except OSError as e:
            sys.exit(f"Cannot read {path}: {e}")
        logger.trace(f"Decoding {path} ({len(raw)} bytes) with {decoder!r}")
        try:
            return decoder.decode(raw)
        except CocometaError as e:
            sys.exit(f"{path}: {e}")

    def _run_inspect(self, args: argparse.Namespace) -> None:
        metadata = self._load_metadata(args)
        logger.info(
            f"{args.annotations_file}: {len(metadata.images)} images, "
            f"{len(metadata.annotations)} annotations, "
            f"{len(metadata.categories)} categories"
        )
        per_category = Counter(a.category_id for a in metadata.annotations)
        for category in metadata.categories:
            logger.info(
                f"  category {category.id}: {per_category.get(category.id, 0)} "
                "annotations"
            )

    def _run_check(self, args: argparse.Namespace) -> None:
        metadata = self._load_metadata(args)
        dangling = MetadataIndex(metadata).dangling_references()
        if not dangling:
            logger.info(
                f"{args.annotations_file}: all {len(metadata.annotations)} "
                "annotations reference known images and categories"
            )
            return
        for ref in dangling:
            logger.warning(
                f"annotation {ref.annotation_id}: {ref.field}={ref.missing_id} "
                "not found"
            )
        sys.exit(f"{len(dangling)} dangling references found")

    def _run_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        if args.command == "inspect":
            self._run_inspect(args)
            return
        if args.command == "check":
            self._run_check(args)
            return
        sys.exit(f"Unknown command: {args.command}")

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        self._run_command(args)


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
