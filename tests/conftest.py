"""Pytest configuration and fixtures for c5exporter tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from c5exporter.observability.registry import MetricRegistry

# Abridged sipproxyd response of a R6.0 system
SIPPROXYD_PAYLOAD: dict[str, Any] = {
    "proxyState": "active",
    "buildVersion": "Version: 6.0.2.57, compiled on Jan 15 2020, 13:06:31 built by TELES Communication Systems GmbH",
    "startupTime": "2020-01-19 04:01:04.503",
    "memoryUsage": "C5 Heap Health: OK  - Mem used: 18%  - Mem used: 383MB  - Mem total: 2048MB  - Max: 18% - UpdCtr: 60793",
    "tuQueueStatus": "OK - checked: 1830",
    "counterInfos": [
        "       Event counters                              absolute   curr   last",
        "  0 TRANSPORT_MESSAGE_IN                              6461     31     69",
        "  1 CALL_CONTROL_ORIG_CALL_SETUP_SUCCESS                12      0      1",
        "       Usage counters                              current    min    max   lMin   lMax   lAvg",
        " 45 CALL_CONTROL_ACTIVE_CALLS                           3      0      9      1      4      2",
        [
            " 84 TRANSACTION_AND_TU_TU_MANAGER_QUEUE_SIZE          0      0      3      0      9      0",
            "                                                      1      0      3      0      4      0",
            "                                                      2      0      2      0      3      1",
        ],
        " 85 TRANSACTION_AND_TU_TIMER_QUEUE_SIZE                 7      0     12      5      8      6",
    ],
}

# Abridged acdqueued response of a R6.2 system
ACDQUEUED_PAYLOAD: dict[str, Any] = {
    "queueState": "passive",
    "buildVersion": "Version: 6.2.0.12, compiled on Mar  3 2021, 09:12:44 built by TELES Communication Systems GmbH",
    "startupTime": "2021-03-04 10:00:00.000",
    "memoryUsage": "C5 Heap Health: OK  - Mem used: 3%  76MB  (min: 76 max: 76)  - Mem total: 2048MB  - MAX: 3% - UpdCtr: 92205",
    "tuQueueStatus": "FAIL - checked: 12",
    "counterInfos": [
        "       Event counters                              absolute   curr   last",
        "  3 ACD_CALLS_QUEUED                                   40      1      2",
    ],
}


@pytest.fixture
def sipproxyd_payload() -> dict[str, Any]:
    """R6.0 style sipproxyd status payload."""
    return copy.deepcopy(SIPPROXYD_PAYLOAD)


@pytest.fixture
def acdqueued_payload() -> dict[str, Any]:
    """R6.2 style acdqueued status payload."""
    return copy.deepcopy(ACDQUEUED_PAYLOAD)


@pytest.fixture
def registry() -> MetricRegistry:
    """Fresh metric registry on its own collector registry."""
    return MetricRegistry()
