import logging
import unittest
from unittest import mock

from bucket_utils import log


class LogConfigTestCase(unittest.TestCase):
    """Test cases for the logging configuration helpers."""

    def test_default_levels(self) -> None:
        config = log.get_log_config()
        self.assertEqual(config['loggers']['bucket_utils']['level'], 'INFO')
        self.assertEqual(config['loggers']['botocore']['level'], 'WARNING')
        self.assertEqual(config['root']['handlers'], ['console'])

    def test_debug(self) -> None:
        config = log.get_log_config(debug=True)
        self.assertEqual(config['loggers']['bucket_utils']['level'], 'DEBUG')

    def test_returns_copy(self) -> None:
        log.get_log_config(debug=True)
        self.assertEqual(
            log.DEFAULT_LOG_CONFIG['loggers']['bucket_utils']['level'],
            'INFO',
        )

    def test_configure_logging(self) -> None:
        with mock.patch('logging.config.dictConfig') as dict_config:
            log.configure_logging(log.get_log_config())
        dict_config.assert_called_once()

    def test_configure_logging_applies_levels(self) -> None:
        log.configure_logging(log.get_log_config(debug=True))
        self.assertEqual(
            logging.getLogger('bucket_utils').level,
            logging.DEBUG,
        )
        log.configure_logging(log.get_log_config())
        self.assertEqual(
            logging.getLogger('bucket_utils').level,
            logging.INFO,
        )
