import io
import logging
import unittest

from colored_logger import (
    FAILURE_LEVEL,
    NOTICE_LEVEL,
    PROGRESS_LEVEL,
    SUCCESS_LEVEL,
    TRACE_LEVEL,
    ColoredFormatter,
    get_colored_logger,
)
from content_index.debounce import Debouncer
from content_index.frontmatter import parse_frontmatter_block
from tests.timer_fakes import FakeTimerFactory


class TtyStream(io.StringIO):
    def isatty(self):
        return True


def make_record(level=logging.INFO, msg="hello"):
    return logging.LogRecord("test", level, __file__, 1, msg, None, None)


class TestColoredFormatter(unittest.TestCase):
    """Test colour handling."""

    def test_plain_output_when_not_a_tty(self):
        formatter = ColoredFormatter("%(levelname)s %(message)s", stream=io.StringIO())

        self.assertEqual(formatter.format(make_record()), "INFO hello")

    def test_coloured_output_on_a_tty(self):
        formatter = ColoredFormatter("%(message)s", stream=TtyStream())

        output = formatter.format(make_record(logging.ERROR))

        self.assertTrue(output.startswith(ColoredFormatter.COLORS["ERROR"]))
        self.assertTrue(output.endswith(ColoredFormatter.COLORS["RESET"]))

    def test_custom_level_names(self):
        formatter = ColoredFormatter("%(levelname)s", stream=io.StringIO())

        self.assertEqual(formatter.format(make_record(SUCCESS_LEVEL)), "SUCCESS")


class TestEnhancedLogger(unittest.TestCase):
    """Test the extra level methods."""

    def test_extra_levels(self):
        logger = get_colored_logger("tests.colored_logger")

        with self.assertLogs("tests.colored_logger", level=TRACE_LEVEL) as logs:
            logger.trace("t")
            logger.progress("p")
            logger.success("s")
            logger.notice("n")
            logger.failure("f")

        self.assertEqual(
            [record.levelno for record in logs.records],
            [TRACE_LEVEL, PROGRESS_LEVEL, SUCCESS_LEVEL, NOTICE_LEVEL, FAILURE_LEVEL],
        )

    def test_delegates_unknown_attributes(self):
        logger = get_colored_logger("tests.colored_logger")

        self.assertEqual(logger.name, "tests.colored_logger")


    def test_superseded_debounce_call_is_traced(self):
        debouncer = Debouncer(lambda text: None, timer_factory=FakeTimerFactory())

        with self.assertLogs("content_index.debounce", level=TRACE_LEVEL) as logs:
            debouncer.call("re")
            debouncer.call("react")

        self.assertEqual([record.levelno for record in logs.records], [TRACE_LEVEL])
        self.assertIn("superseded", logs.output[0])

    def test_front_matter_keys_are_traced(self):
        with self.assertLogs("content_index.frontmatter", level=TRACE_LEVEL) as logs:
            parse_frontmatter_block("title: Hooks\ndate: 2024-01-10")

        self.assertEqual(len(logs.records), 2)
        self.assertTrue(all(r.levelname == "TRACE" for r in logs.records))


if __name__ == "__main__":
    unittest.main()
