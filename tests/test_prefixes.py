"""Tests for logtee.prefixes — built-in prefix providers."""

import os
import re
from unittest.mock import patch

from logtee.prefixes import PREFIX_PROVIDERS, epoch_prefix, iso_prefix, pid_prefix


def test_epoch_prefix():
    with patch("logtee.prefixes.time.time", return_value=1700000000.75):
        assert epoch_prefix() == "[1700000000]: "


def test_iso_prefix_shape():
    assert re.fullmatch(r"\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\] ", iso_prefix())


def test_pid_prefix():
    assert pid_prefix() == f"[{os.getpid()}] "


def test_registry_names():
    assert PREFIX_PROVIDERS == {
        'epoch': epoch_prefix, 'iso': iso_prefix, 'pid': pid_prefix,
    }


def test_provider_used_by_logger(tee, buf):
    tee.add_sink(buf, 0)
    tee.set_prefix_callback(pid_prefix)
    tee.info("x\n")
    assert buf.getvalue() == f"[{os.getpid()}] (II): x\n"
