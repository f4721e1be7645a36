#!/usr/bin/env python
"""
CLI script to check whether a face is already registered.

Reads an embedding (a JSON list, or a stored payload document with an
"embedding" field) or a face image, runs the uniqueness check against the
configured registry and prints the verdict as JSON.

Exit codes: 0 unique, 1 duplicate, 2 invalid or indeterminate.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from faceproof.core.config import Settings
from faceproof.core.container import ServiceContainer
from faceproof.core.exceptions import ExtractionError, FaceProofError
from faceproof.core.logging import get_logger, setup_logging
from faceproof.domain.value_objects.verdicts import UniquenessStatus, UniquenessVerdict

logger = get_logger(__name__)

EXIT_CODES = {
    UniquenessStatus.UNIQUE: 0,
    UniquenessStatus.DUPLICATE: 1,
    UniquenessStatus.INVALID: 2,
    UniquenessStatus.INDETERMINATE: 2,
}


def load_embedding(path: Path) -> List[float]:
    """Load an embedding from a JSON file.

    Raises:
        ValueError: If the file holds neither a list nor an object with an embedding
    """
    document = json.loads(path.read_text())
    if isinstance(document, dict):
        document = document.get("embedding")
    if not isinstance(document, list):
        raise ValueError(f"{path} does not contain an embedding")
    return document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check whether a face is already registered")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--embedding", type=Path, help="Path to a JSON embedding file")
    source.add_argument("--image", type=Path, help="Path to a face image")
    parser.add_argument("--identity", type=str, default=None, help="Wallet whose own entry is not compared")
    parser.add_argument("--exclude", type=str, default=None, help="Content address to leave out of the check")
    parser.add_argument(
        "--oracle",
        action="store_true",
        help="Compare the image with the remote comparison API instead of extracting an embedding",
    )
    return parser


async def check(args: argparse.Namespace, container: ServiceContainer) -> UniquenessVerdict:
    """Run one uniqueness check with an initialized container."""
    coordinator = container.uniqueness_coordinator

    if args.embedding is not None:
        embedding = load_embedding(args.embedding)
        return await coordinator.check_uniqueness(
            embedding, identity=args.identity, exclude_content_address=args.exclude
        )

    image_bytes = args.image.read_bytes()
    if args.oracle:
        return await coordinator.check_uniqueness_with_oracle(
            image_bytes, identity=args.identity, exclude_content_address=args.exclude
        )

    if container.extractor is None:
        raise ExtractionError("EXTRACTOR_URL is not configured")
    embedding = await container.extractor.extract(image_bytes)
    return await coordinator.check_uniqueness(
        embedding, identity=args.identity, exclude_content_address=args.exclude
    )


async def run(argv: Optional[List[str]] = None, container: Optional[ServiceContainer] = None) -> int:
    """Parse arguments, run the check and print the verdict.

    Args:
        argv: Command line arguments, defaults to sys.argv
        container: Initialized container to use instead of one built from the environment

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)

    owns_container = container is None
    if container is None:
        settings = Settings()
        setup_logging(settings)
        container = ServiceContainer(settings)
        await container.initialize()

    try:
        verdict = await check(args, container)
    except (FaceProofError, ValueError, OSError) as e:
        logger.error("Uniqueness check could not run", error=str(e))
        verdict = UniquenessVerdict(status=UniquenessStatus.INDETERMINATE, reason=str(e))
    finally:
        if owns_container:
            await container.cleanup()

    print(json.dumps(verdict.model_dump(mode="json"), indent=2))
    return EXIT_CODES[verdict.status]


def main() -> None:
    """Main entry point for the script."""
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
