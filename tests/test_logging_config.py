"""Tests for logging setup and secret masking."""

import logging

from common.logging_config import SensitiveDataFilter, setup_logging


def make_record(msg, args=()):
    return logging.LogRecord('aas_sdk.test', logging.INFO, __file__, 1, msg, args, None)


def test_masks_bearer_token():
    record = make_record("Authorization: Bearer abc.def.ghi")
    SensitiveDataFilter().filter(record)
    assert 'abc.def.ghi' not in record.getMessage()
    assert 'Bearer ***MASKED***' in record.getMessage()


def test_masks_client_secret_in_form_body():
    record = make_record("grant_type=client_credentials&client_id=abc&client_secret=s3cret")
    SensitiveDataFilter().filter(record)
    assert 's3cret' not in record.getMessage()
    assert 'client_id=abc' in record.getMessage()


def test_masks_access_token_in_args():
    record = make_record("token response: %s", ('{"access_token": "tok123", "token_type": "bearer"}',))
    SensitiveDataFilter().filter(record)
    assert 'tok123' not in record.getMessage()


def test_setup_logging_configures_components_once():
    logger = setup_logging(('aas_test_component', 'aas_test_other'), log_level='DEBUG')
    again = setup_logging(('aas_test_component',), log_level='INFO')

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logging.getLogger('aas_test_other').level == logging.DEBUG
    assert not logger.propagate


def test_setup_logging_quiets_httpx():
    setup_logging(('aas_test_quiet',), log_level='INFO')
    assert logging.getLogger('httpx').level == logging.WARNING
