"""
Streaming reader for captured JSON trace reports.
"""

import logging
from typing import IO, Dict, Iterator, Union

import ijson

logger = logging.getLogger(__name__)


class ReportReader:
    """
    Reads files of concatenated JSON reports, as produced by tracers using
    the JSON output style, without loading the whole file into memory.
    """

    @staticmethod
    def iter_reports(source: Union[str, IO[bytes]]) -> Iterator[Dict]:
        """
        Yield each report object in a file or binary stream.

        Top-level values that are not objects, or objects without a
        ``spans`` list, are skipped with a warning.

        Args:
            source: Path to a report file, or an open binary file object

        Yields:
            Report dictionaries; non-integer numbers are floats, integers stay int

        Raises:
            FileNotFoundError: If the path does not exist
            ijson.JSONError: If the stream is not valid JSON
        """
        if isinstance(source, str):
            with open(source, 'rb') as f:
                yield from ReportReader._parse(f)
        else:
            yield from ReportReader._parse(source)

    @staticmethod
    def _parse(f: IO[bytes]) -> Iterator[Dict]:
        report_count, skipped = 0, 0

        for value in ijson.items(f, '', multiple_values=True, use_float=True):
            if not isinstance(value, dict) or not isinstance(value.get('spans'), list):
                skipped += 1
                logger.warning("Skipping value that is not a trace report: %.60r", value)
                continue

            report_count += 1
            if report_count % 1000 == 0:
                logger.debug("Read %d reports...", report_count)
            yield value

        logger.info("Completed reading reports: %d read, %d skipped", report_count, skipped)

    @staticmethod
    def read_all(source: Union[str, IO[bytes]]) -> list:
        """Read every report into a list."""
        return list(ReportReader.iter_reports(source))
