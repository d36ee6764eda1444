import logging
import sys
import unittest

from regdefgen.utils.logger import get_logger, setup_logging


class SetupLoggingTests(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        root.handlers[:] = self._saved[1]
        root.setLevel(self._saved[0])

    def test_level_applied(self):
        setup_logging(level="DEBUG")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        self.assertEqual(len(logging.getLogger().handlers), 1)

    def test_quiet_hides_info(self):
        setup_logging(level="INFO", quiet=True)
        self.assertFalse(get_logger("regdefgen.regdef.loader").isEnabledFor(logging.INFO))
        self.assertTrue(get_logger("regdefgen").isEnabledFor(logging.ERROR))

    def test_quiet_keeps_stricter_level(self):
        setup_logging(level="ERROR", quiet=True)
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    def test_handler_writes_to_stderr(self):
        setup_logging(level="INFO")
        self.assertIs(logging.getLogger().handlers[0].stream, sys.stderr)


if __name__ == "__main__":
    unittest.main()
