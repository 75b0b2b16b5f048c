import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, Union


class LogManager:
    """Logging setup for applications embedding the link checker"""

    def __init__(self, log_dir: Optional[Union[str, Path]] = None, log_level: str = "INFO"):
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.setup_logging(log_level)

    def setup_logging(self, log_level: str):
        """Console handler, plus detailed file handlers when a log dir is set"""
        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        simple_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

        package_logger = logging.getLogger('linkwalker')
        package_logger.setLevel(getattr(logging, log_level.upper()))
        package_logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(simple_formatter)
        package_logger.addHandler(console_handler)

        if self.log_dir is None:
            return

        all_logs_file = self.log_dir / f"linkwalker_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(all_logs_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        package_logger.addHandler(file_handler)

        broken_file = self.log_dir / f"broken_{datetime.now().strftime('%Y%m%d')}.log"
        broken_handler = logging.FileHandler(broken_file)
        broken_handler.setLevel(logging.WARNING)
        broken_handler.setFormatter(detailed_formatter)
        package_logger.addHandler(broken_handler)

    def export_report_json(self, report_data: Dict[str, Any], filename: str = None) -> Path:
        """Write a report (Report.to_dict()) next to the logs"""
        if self.log_dir is None:
            raise ValueError("no log_dir configured")
        if filename is None:
            filename = f"report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

        export_path = self.log_dir / filename
        with open(export_path, 'w') as f:
            json.dump(report_data, f, indent=2, default=str)

        logging.getLogger(__name__).info(f"Report exported to {export_path}")
        return export_path
