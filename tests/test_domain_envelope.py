"""Tests for response envelope and pagination helpers."""

import pytest

from mortgage_sim.domain import (
    domain_build_envelope,
    domain_build_error_envelope,
    domain_build_paginated,
    domain_is_envelope,
)


def test_domain_build_envelope_omits_message_when_unset() -> None:
    """Verify success envelopes always carry `data` and never an empty `message`."""

    envelope = domain_build_envelope(data={"id": "1"})

    assert envelope == {"success": True, "data": {"id": "1"}}


def test_domain_build_envelope_keeps_none_data_key() -> None:
    """Verify the `data` key is present even when the payload is None."""

    envelope = domain_build_envelope(data=None, message="done")

    assert "data" in envelope
    assert envelope["data"] is None
    assert envelope["message"] == "done"


def test_domain_build_error_envelope_requires_message() -> None:
    """Verify failure envelopes carry no data and reject blank messages."""

    assert domain_build_error_envelope("Invalid credentials") == {
        "success": False,
        "data": None,
        "message": "Invalid credentials",
    }
    with pytest.raises(ValueError):
        domain_build_error_envelope("  ")


def test_domain_is_envelope_detects_shape() -> None:
    """Verify envelope detection accepts wrapped payloads and rejects raw ones."""

    assert domain_is_envelope({"success": True, "data": []}) is True
    assert domain_is_envelope({"success": False, "message": "x"}) is True
    assert domain_is_envelope({"success": "yes", "data": []}) is False
    assert domain_is_envelope([1, 2]) is False


def test_domain_build_paginated_slices_last_partial_page() -> None:
    """Verify page geometry follows `totalPages = ceil(total / limit)`."""

    page = domain_build_paginated(list(range(25)), page=3, limit=10)

    assert page["data"] == [20, 21, 22, 23, 24]
    assert page["total"] == 25
    assert page["page"] == 3
    assert page["limit"] == 10
    assert page["totalPages"] == 3


def test_domain_build_paginated_returns_empty_page_past_end() -> None:
    """Verify requesting a page beyond the end yields an empty slice."""

    page = domain_build_paginated(["a", "b"], page=4, limit=1)

    assert page["data"] == []
    assert page["totalPages"] == 2


def test_domain_build_paginated_rejects_invalid_geometry() -> None:
    """Verify page and limit lower than one raise ValueError."""

    with pytest.raises(ValueError):
        domain_build_paginated([], page=0, limit=10)
    with pytest.raises(ValueError):
        domain_build_paginated([], page=1, limit=0)
