"""Test utilities for letterbox applications.

Black-box harness: start the real server on an ephemeral port and talk
to it over TCP with any HTTP client::

    from letterbox.testing import spawn_test_instance

    base_url, handle = await spawn_test_instance()
    ...
    await handle.shutdown()
"""

from letterbox.testing.harness import ShutdownHandle, TestInstance, spawn_test_instance

__all__ = [
    "ShutdownHandle",
    "TestInstance",
    "spawn_test_instance",
]
