"""
Main application entry point for the OfferFlow interview preparation assistant.

Runs a system check of the configuration, database and LLM providers, and
offers a few maintenance commands for the persisted interview prep state.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import DatabaseManager, get_config, validate_config
from .ai_processing import get_llm_manager
from .interview_prep import ContextStore, PointsLedger
from .utils import setup_logging, get_logger

logger = get_logger("main")

async def test_system_components() -> bool:
    """Test all system components to ensure they're working correctly."""
    logger.info("Starting system component tests")

    # Test configuration
    logger.info("Testing configuration system...")
    validation_issues = validate_config()

    if validation_issues["errors"]:
        logger.warning(f"Configuration errors: {validation_issues['errors']}")
        logger.info("⚠️ Configuration has errors but system can still start")

    if validation_issues["warnings"]:
        logger.warning(f"Configuration warnings: {validation_issues['warnings']}")

    logger.info("✅ Configuration system working")

    # Test database
    logger.info("Testing database system...")
    try:
        db = DatabaseManager()
        stats = db.get_stats()
        logger.info(f"Database initialized with stats: {stats}")
        logger.info("✅ Database system working")
    except Exception as e:
        logger.error(f"❌ Database system failed: {e}")
        return False

    # Test LLM manager
    logger.info("Testing LLM system...")
    llm_manager = get_llm_manager()
    providers = llm_manager.get_available_providers()
    logger.info(f"Available LLM providers: {providers}")
    logger.info(f"Provider info: {llm_manager.get_provider_info()}")

    if providers:
        test_results = await llm_manager.test_providers()
        logger.info(f"LLM test results: {test_results}")
        logger.info("✅ LLM system working")
    else:
        logger.warning("⚠️ No LLM providers available - check configuration")

    logger.info("🎉 All system components tested successfully!")
    return True

def print_status(store: ContextStore, ledger: PointsLedger) -> None:
    """Print the persisted economy and resume state."""
    prep = get_config().prep
    resume = store.get_resume_context()
    print(f"Points balance:       {ledger.balance}")
    print(f"Free mock sessions:   {store.get_usage_count()}/{prep.max_free_mock_attempts} used")
    print(f"Paid unlocks:         {store.get_paid_unlocks()}")
    print(f"Resume context:       {f'{len(resume)} chars' if resume else 'not set'}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="offerflow",
        description="OfferFlow interview preparation assistant"
    )
    parser.add_argument("--resume", type=Path, help="store the text of FILE as the resume context")
    parser.add_argument("--credit", type=int, metavar="N", help="credit N points to the balance")
    parser.add_argument("--status", action="store_true", help="show points, usage and resume state")
    return parser

async def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    setup_logging()
    logger.info("Starting OfferFlow interview preparation assistant")

    if args.resume or args.credit is not None or args.status:
        store = ContextStore(DatabaseManager())
        ledger = PointsLedger(store)

        if args.resume:
            try:
                store.set_resume_context(args.resume.read_text(encoding="utf-8"))
            except OSError as e:
                logger.error(f"Could not read resume file {args.resume}: {e}")
                return 1

        if args.credit is not None:
            if args.credit < 0:
                logger.error("Credit amount must not be negative")
                return 1
            ledger.credit(args.credit)

        print_status(store, ledger)
        return 0

    # Test system components
    if await test_system_components():
        logger.info("System is ready for use!")
        logger.info("Run the UI with: streamlit run offerflow/ui/app.py")
        return 0

    logger.error("System component tests failed. Please check configuration.")
    return 1

def cli() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))

if __name__ == "__main__":
    cli()
