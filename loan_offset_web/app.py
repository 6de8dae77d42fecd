import logging
import math
import os

from flask import Flask, jsonify, redirect, render_template, request, url_for

from loan_offset.data_models import LoanInputs
from loan_offset.engine import DEFAULT_SAVINGS_ROI, compute_savings
from loan_offset.formatter import (
    MISSING_INPUTS_MESSAGE,
    assumptions_note,
    inputs_entered,
    result_rows,
)
from loan_offset.main import (
    DEFAULT_OFFSET,
    DEFAULT_PRINCIPAL,
    DEFAULT_RATE,
    DEFAULT_TENURE,
    build_payload,
)
from loan_offset.utils import to_number

logger = logging.getLogger(__name__)


def savings_roi_from_env(raw) -> float:
    """Parse the ``SAVINGS_ROI`` setting, falling back to the default when unusable."""
    if raw is None or not str(raw).strip():
        return DEFAULT_SAVINGS_ROI
    try:
        value = float(raw)
    except ValueError:
        logger.warning("SAVINGS_ROI=%r is not a number; using %s", raw, DEFAULT_SAVINGS_ROI)
        return DEFAULT_SAVINGS_ROI
    if not math.isfinite(value) or value < 0:
        logger.warning("SAVINGS_ROI=%r must be a non-negative number; using %s", raw, DEFAULT_SAVINGS_ROI)
        return DEFAULT_SAVINGS_ROI
    return value


app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["SAVINGS_ROI"] = savings_roi_from_env(os.environ.get("SAVINGS_ROI"))

FORM_FIELDS = ("principal", "rate", "tenure", "offset")
DEFAULT_FORM = {
    "principal": DEFAULT_PRINCIPAL,
    "rate": DEFAULT_RATE,
    "tenure": DEFAULT_TENURE,
    "offset": DEFAULT_OFFSET,
}


def _form_to_inputs(form) -> LoanInputs:
    """Build inputs from form strings; blank fields count as not provided."""
    values = {}
    for name in FORM_FIELDS:
        raw = form.get(name, "")
        try:
            values[name] = to_number(raw)
        except ValueError as exc:
            raise ValueError(f"{name.capitalize()}: {exc}") from exc
    return LoanInputs(
        principal=values["principal"],
        annual_rate_percent=values["rate"],
        tenure_years=values["tenure"],
        offset=values["offset"],
    )


def _json_to_inputs(data: dict) -> LoanInputs:
    return LoanInputs(
        principal=to_number(data.get("principal")),
        annual_rate_percent=to_number(data.get("annual_rate_percent")),
        tenure_years=to_number(data.get("tenure_years")),
        offset=to_number(data.get("offset")),
    )


@app.route("/", methods=["GET", "POST"])
def index():
    form_values = dict(DEFAULT_FORM)
    rows = None
    error = None
    savings_roi = app.config["SAVINGS_ROI"]

    if request.method == "POST":
        form_values = {name: request.form.get(name, "").strip() for name in FORM_FIELDS}

    try:
        inputs = _form_to_inputs(form_values)
    except ValueError as exc:
        app.logger.info("Rejected form input: %s", exc)
        error = str(exc)
    else:
        if inputs_entered(inputs):
            rows = result_rows(compute_savings(inputs, savings_roi=savings_roi))

    return render_template(
        "index.html",
        form=form_values,
        rows=rows,
        error=error,
        missing_message=MISSING_INPUTS_MESSAGE,
        note=assumptions_note(savings_roi),
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/reset")
def reset():
    return redirect(url_for("index"))


@app.post("/api/savings")
def api_savings():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    try:
        inputs = _json_to_inputs(data)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    savings_roi = app.config["SAVINGS_ROI"]
    result = compute_savings(inputs, savings_roi=savings_roi)
    return jsonify(build_payload(inputs, result, savings_roi))


if __name__ == "__main__":
    print("Starting Loan Offset web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
