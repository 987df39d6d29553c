"""Command-line entry point: analyze one local document.

Usage:
    python -m answerlens.main homework.jpg --subject physics --difficulty "grade 10"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from answerlens.analysis.models import AnalysisOptions
from answerlens.config.settings import Settings
from answerlens.database.connection import close_pool, get_connection, init_pool
from answerlens.database.models import AnalysisStatus
from answerlens.database.repositories.analysis_repository import create_schema
from answerlens.logging.logger import Log
from answerlens.processor.service import build_service
from answerlens.validation.exceptions import ValidationError
from answerlens.validation.models import UploadedFile

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REJECTED = 2


def setup_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="answerlens",
        description="Extract text from a scanned document and produce AI feedback.",
    )
    parser.add_argument("file", type=Path, help="Image or PDF to analyze")
    parser.add_argument(
        "--mime-type", help="Declared MIME type (guessed from extension if omitted)"
    )
    parser.add_argument("--subject", default="", help="Subject of the document, e.g. 'chemistry'")
    parser.add_argument("--difficulty", default="", help="Difficulty level, e.g. 'grade 10'")
    parser.add_argument("--language", default="", help="OCR language code, e.g. 'eng'")
    parser.add_argument(
        "--feedback-language", default="English", help="Language of the generated feedback"
    )
    parser.add_argument(
        "--init-db", action="store_true", help="Create the analyses table before running"
    )
    return parser


async def run(args: argparse.Namespace, settings: Settings) -> int:
    service = build_service(settings)
    upload = UploadedFile.from_path(args.file, mime_type=args.mime_type)
    options = AnalysisOptions(
        subject=args.subject,
        difficulty=args.difficulty,
        language=args.language,
        analysis_language=args.feedback_language,
    )
    try:
        analysis_id = await service.submit(upload, options)
    except ValidationError as exc:
        Log.error(exc.message)
        print(json.dumps({"status": "rejected", "errors": exc.errors}, indent=2))
        return EXIT_REJECTED

    record = await service.wait(analysis_id)
    print(json.dumps(record.to_document(), indent=2, ensure_ascii=False))
    return EXIT_OK if record.status == AnalysisStatus.COMPLETED else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    """Entry point: configure -> build dependencies -> submit -> wait -> print."""
    args = setup_argparser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    use_postgres = settings.storage_backend.lower() == "postgres"
    if use_postgres:
        init_pool(settings)
    try:
        if use_postgres and args.init_db:
            with get_connection() as conn:
                create_schema(conn)
        return asyncio.run(run(args, settings))
    finally:
        if use_postgres:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
