from __future__ import annotations

import pytest

from loan_offset.data_models import LoanInputs


@pytest.fixture
def sample_inputs():
    # 1 crore at 7.5 % over 20 years with a 1 lakh offset
    return LoanInputs(
        principal=10_000_000,
        annual_rate_percent=7.5,
        tenure_years=20,
        offset=100_000,
    )


@pytest.fixture
def web_client():
    from loan_offset_web.app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
