"""Shared fixtures for the process visualizer tests."""

from __future__ import annotations

import pytest

from services.sample_processes import BOOKING_V3, PREAUTH_V2


@pytest.fixture
def legacy_document() -> str:
    return """
    {:process/id :process/simple
     :process/states #{:state/initial :state/pending :state/done}
     :process/transitions
     [{:transition/id :transition/request
       :transition/from :state/initial
       :transition/to :state/pending
       :transition/actor :actor.role/customer}
      {:transition/id :transition/complete
       :transition/from :state/pending
       :transition/to :state/done
       :transition/actor :system}]}
    """


@pytest.fixture
def modern_document() -> str:
    return """
    {:format :v3
     :transitions
     [{:name :transition/inquire
       :actor :actor.role/customer
       :actions [{:name :action/update-protected-data}]
       :to :state/inquiry}
      {:name :transition/request-payment
       :actor :actor.role/customer
       :from :state/inquiry
       :to :state/pending-payment}]}
    """


@pytest.fixture
def cycle_document() -> str:
    return """
    {:process/id :process/loop
     :process/states #{:state/a :state/b :state/c}
     :process/transitions
     [{:transition/id :transition/ab :transition/from :state/a :transition/to :state/b}
      {:transition/id :transition/bc :transition/from :state/b :transition/to :state/c}
      {:transition/id :transition/ca :transition/from :state/c :transition/to :state/a}]}
    """


@pytest.fixture
def booking_document() -> str:
    return BOOKING_V3


@pytest.fixture
def preauth_document() -> str:
    return PREAUTH_V2
