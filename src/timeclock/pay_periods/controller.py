from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import require_datetime
from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/pay-period", methods=["GET"], endpoint="pay_period_list")
    def pay_period_list():
        periods = container.pay_period_service.list_periods()
        return jsonify({"periods": [p.to_dict() for p in periods]})

    @app.route("/pay-period/current", methods=["GET"], endpoint="pay_period_current")
    def pay_period_current():
        period = container.pay_period_service.current()
        return jsonify({"period": period.to_dict() if period else None})

    @app.route("/pay-period/on/<value>", methods=["GET"], endpoint="pay_period_on")
    def pay_period_on(value: str):
        period = container.pay_period_service.current(require_datetime(value, "date"))
        return jsonify({"period": period.to_dict() if period else None})

    @app.route("/pay-period/<int:pay_period_id>", methods=["GET"], endpoint="pay_period_detail")
    def pay_period_detail(pay_period_id: int):
        period = container.pay_period_service.get(pay_period_id)
        return jsonify({"period": period.to_dict()})

    @app.route("/pay-period/<int:pay_period_id>/complete", methods=["POST"], endpoint="pay_period_complete")
    @admin_required
    def pay_period_complete(pay_period_id: int):
        period = container.pay_period_service.mark_completed(pay_period_id)
        return jsonify({"period": period.to_dict()})

    @app.route("/pay-period/build", methods=["POST"], endpoint="pay_period_build")
    def pay_period_build():
        created = container.pay_period_service.generate_upcoming()
        return jsonify({"created": [p.to_dict() for p in created]})
