"""Ready-made prefix providers for TeeLogger.set_prefix_callback().

A provider takes no arguments and returns the text put in front of every
line. It is called once per receiving sink, at write time.
"""

import os
import time
from datetime import datetime


def epoch_prefix() -> str:
    """``[<unix seconds>]: ``"""
    return f"[{int(time.time())}]: "


def iso_prefix() -> str:
    """``[<local ISO-8601 time>] ``"""
    return f"[{datetime.now().isoformat(timespec='seconds')}] "


def pid_prefix() -> str:
    return f"[{os.getpid()}] "


PREFIX_PROVIDERS = {
    'epoch': epoch_prefix,
    'iso': iso_prefix,
    'pid': pid_prefix,
}
