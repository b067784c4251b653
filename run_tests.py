#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Entry point for running the engine test suites.
#
# Features:
#   - Run unit tests (in-memory fakes) or UI tests (real browser)
#   - Parallel workers through pytest-xdist; each worker owns its own session
#   - Browser kind and headless mode passed through config env overrides
#   - Allure results and report generation
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browser firefox --no-headless
#   python run_tests.py --suite all --parallel 4 --tags P0 smoke
#
# ================================================================================

import argparse
import os
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger


SUITE_PATHS = {
    "unit": "testsuites/unit",
    "ui": "testsuites/ui_testing/tests",
    "all": "testsuites/",
}


class TestRunner:
    """
    Builds and runs one pytest invocation, then renders the Allure report.
    """

    __test__ = False

    def __init__(
        self,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        parallel: int = 1,
        browser: str = "chromium",
        headless: bool = True,
        allure_report: bool = True,
        verbose: bool = False,
    ):
        self.suite = suite
        self.tags = tags or []
        self.parallel = parallel
        self.browser = browser
        self.headless = headless
        self.allure_report = allure_report
        self.verbose = verbose

        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / "reports"
        self.allure_results = self.reports_dir / "allure-results"
        self.allure_report_dir = self.reports_dir / "allure-report"

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            pytest's exit code
        """
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite} | Tags: {self.tags or 'All'} | Workers: {self.parallel}")
        if self.suite in ("ui", "all"):
            logger.info(f"Browser: {self.browser} | Headless: {self.headless}")
        logger.info("=" * 60)

        self.allure_results.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command()
        logger.info(f"Executing: {' '.join(cmd)}")
        exit_code = subprocess.run(cmd, cwd=str(self.root_dir), env=self.build_env()).returncode

        if self.allure_report:
            self._generate_allure_report()

        if exit_code == 0:
            logger.info("Test execution completed successfully")
        else:
            logger.error(f"Test execution failed (exit code: {exit_code})")
        return exit_code

    def build_command(self) -> List[str]:
        """pytest command line for the selected suite and options."""
        cmd = [sys.executable, "-m", "pytest", SUITE_PATHS[self.suite]]

        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])
        if self.parallel > 1:
            cmd.extend(["-n", str(self.parallel)])
        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])
        cmd.append("-v" if self.verbose else "-q")
        return cmd

    def build_env(self) -> Dict[str, str]:
        """Environment for the pytest process; browser options go through config overrides."""
        env = dict(os.environ)
        env["BROWSER_KIND"] = self.browser
        env["BROWSER_HEADLESS"] = "true" if self.headless else "false"
        return env

    def _generate_allure_report(self) -> None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = self.reports_dir / f"allure-report-{timestamp}"

        try:
            subprocess.run([
                "allure", "generate",
                str(self.allure_results),
                "-o", str(report_path),
                "--clean",
            ], check=True)
        except FileNotFoundError:
            logger.warning("Allure CLI not found. Please install Allure to generate reports.")
            return
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to generate Allure report: {e}")
            return

        latest_link = self.allure_report_dir
        if latest_link.is_symlink():
            latest_link.unlink()
        elif latest_link.exists():
            shutil.rmtree(latest_link)
        latest_link.symlink_to(report_path.name)
        logger.info(f"Report generated: {report_path}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="frameflow test runner")
    parser.add_argument("--suite", choices=sorted(SUITE_PATHS), default="all")
    parser.add_argument("--tags", nargs="+", default=[],
                        help="Pytest markers to filter tests (e.g. P0 smoke)")
    parser.add_argument("--parallel", "-n", type=int, default=1,
                        help="Number of parallel workers (default: 1)")
    parser.add_argument("--browser", default="chromium",
                        choices=["chromium", "chrome", "msedge", "firefox", "webkit"])
    parser.add_argument("--no-headless", dest="headless", action="store_false")
    parser.add_argument("--no-allure", dest="allure_report", action="store_false")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        level="INFO",
    )
    args = parse_args(argv)
    return TestRunner(**vars(args)).run()


if __name__ == "__main__":
    sys.exit(main())
