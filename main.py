# =============================================================================
# main.py - CLI entry point
# =============================================================================

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from core.ad_client import ActiveDirectoryClient
from core.exceptions import AccountAuditError, ConfigurationError
from core.models import ReportModel
from core.pipeline import AccountAuditPipeline
from processors.report_builder import to_armored, to_json
from utils.config import Config
from utils.csv_utils import CSVHandler
from utils.excel_export import ExcelReportExporter
from utils.json_source import iter_json_accounts


def setup_logging(level: str = "INFO") -> str:
    """Setup logging configuration with both console and file output"""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_dir / f"account_audit_{timestamp}.log"

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Always log DEBUG to file
    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Console: {level.upper()}, File: DEBUG")
    logger.info(f"Log file: {log_filename}")

    return str(log_filename)


def run_directory_audit(config: Config) -> ReportModel:
    """Query Active Directory and audit every returned account"""
    if not config.validate_ad_config():
        raise ConfigurationError(f"Missing AD configuration: {', '.join(config.get_missing_ad_vars())}")

    with ActiveDirectoryClient(
            config.ad_server, config.ad_username,
            config.ad_password, config.base_dn,
            use_ssl=config.use_ssl,
            page_size=config.page_size,
            search_filter=config.search_filter
    ) as ad_client:
        return AccountAuditPipeline().run(ad_client.iter_accounts())


def run_file_audit(input_file: str) -> ReportModel:
    """Audit accounts from a JSON attribute export"""
    return AccountAuditPipeline().run(iter_json_accounts(input_file))


def write_outputs(model: ReportModel, args) -> None:
    """Write the requested artifacts for a finished audit"""
    logger = logging.getLogger(__name__)

    if args.output:
        payload = to_armored(model) if args.format == 'armored' else to_json(model)
        Path(args.output).write_text(payload, encoding='utf-8')
        logger.info(f"Wrote {args.format} report model to {args.output}")

    if args.csv:
        CSVHandler.write_accounts(model.accounts, args.csv)

    if args.xlsx:
        ExcelReportExporter(model).export(args.xlsx)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Directory Account Health Audit")
    subparsers = parser.add_subparsers(dest='source', help='Account source')

    subparsers.add_parser('directory', help='Query Active Directory (settings from environment)')

    file_parser = subparsers.add_parser('file', help='Read a JSON attribute export')
    file_parser.add_argument('input_file', help='Input JSON file path')

    for source_parser in subparsers.choices.values():
        source_parser.add_argument('--output', help='Report model output file path')
        source_parser.add_argument('--format', default='armored', choices=['armored', 'json'],
                                   help='Report model encoding')
        source_parser.add_argument('--csv', help='Account CSV output file path')
        source_parser.add_argument('--xlsx', help='Excel workbook output file path')

    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser


def main():
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args()

    if not args.source:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if args.source == 'directory':
        config = Config()
        if not config.validate_ad_config():
            missing_vars = config.get_missing_ad_vars()
            logger.error(f"Missing required environment variables: {missing_vars}")
            sys.exit(1)
    elif not Path(args.input_file).exists():
        logger.error(f"Input file not found: {args.input_file}")
        sys.exit(1)

    try:
        if args.source == 'directory':
            model = run_directory_audit(config)
        else:
            model = run_file_audit(args.input_file)
    except AccountAuditError as e:
        logger.error(f"Audit aborted, no report produced: {e}")
        sys.exit(1)

    try:
        write_outputs(model, args)
    except OSError as e:
        logger.error(f"Writing outputs failed: {e}")
        sys.exit(1)

    logger.info("Audit completed successfully!")


if __name__ == "__main__":
    main()
