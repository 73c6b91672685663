"""Common literal values used across cicd_guide.

Timer keys and default durations live here so the viewer controllers, the
configuration loader, and tests share one source of truth. Durations are in
seconds because that is what ``asyncio`` event loops expect.

Examples
--------
>>> from cicd_guide import _constants
>>> _constants.DEFAULT_LOAD_DELAY
1.0
>>> _constants.DEFAULT_COPY_ACK_WINDOW * 1000
2000.0
"""

DEFAULT_LOAD_DELAY = 1.0
DEFAULT_COPY_ACK_WINDOW = 2.0

LOAD_TIMER = "load"
COPY_ACK_TIMER = "copy-ack"
